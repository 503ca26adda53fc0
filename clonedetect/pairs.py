"""
clonedetect.pairs: clone pair type and the minimum-distance filter.

Blocks a few pixels apart in smooth gradients routinely share a
fingerprint without being a copy-move.  A match is only kept as a
:class:`ClonePair` when source and destination are at least
``min_distance`` pixels apart (Euclidean).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


def euclidean_distance(a: Coord, b: Coord) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


@dataclass(frozen=True)
class ClonePair:
    """A matched source block and the later destination block that copies it."""

    source: Coord
    dest: Coord

    @property
    def displacement(self) -> Tuple[int, int]:
        return (self.dest[0] - self.source[0], self.dest[1] - self.source[1])

    @property
    def distance(self) -> float:
        return euclidean_distance(self.source, self.dest)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": list(self.source),
            "dest": list(self.dest),
            "displacement": list(self.displacement),
        }


class PairFilter:
    """Turns index matches into ClonePairs, dropping those closer than min_distance."""

    def __init__(self, min_distance: float):
        self.min_distance = float(min_distance)
        self.rejected = 0

    def evaluate(self, source: Coord, current: Coord) -> Optional[ClonePair]:
        if euclidean_distance(source, current) < self.min_distance:
            self.rejected += 1
            logger.debug("Near match %s -> %s rejected (< %.1f px)",
                         source, current, self.min_distance)
            return None
        return ClonePair(source=tuple(source), dest=tuple(current))
