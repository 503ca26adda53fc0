"""
clonedetect.match_index: first-seen fingerprint table.

The first block observed with a given fingerprint becomes its permanent
source for the rest of the pass.  Later blocks with the same fingerprint
are reported as matches against that stored coordinate and never replace
it.  Because of this, the block scan order determines which block of a
duplicated region is called the source.
"""

from __future__ import annotations

from typing import Dict, Hashable, Optional, Tuple

Coord = Tuple[int, int]


class MatchIndex:
    """Mapping fingerprint -> first-observed block coordinate (one pass only)."""

    def __init__(self) -> None:
        self._table: Dict[Hashable, Coord] = {}

    def lookup_or_insert(self, fingerprint: Hashable, coord: Coord) -> Optional[Coord]:
        """Return the stored source for *fingerprint*, or insert *coord* and return None.

        A hit leaves the table unchanged, so one source may match any
        number of later blocks.
        """
        stored = self._table.get(fingerprint)
        if stored is not None:
            return stored
        self._table[fingerprint] = (int(coord[0]), int(coord[1]))
        return None

    def get(self, fingerprint: Hashable) -> Optional[Coord]:
        return self._table.get(fingerprint)

    def __contains__(self, fingerprint: Hashable) -> bool:
        return fingerprint in self._table

    def __len__(self) -> int:
        return len(self._table)
