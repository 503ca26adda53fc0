"""
clonedetect.cluster: greedy displacement-vector clustering of clone pairs.

A copy-move forgery shows up as many clone pairs that share (almost) the
same displacement vector.  Pairs are grouped with a single greedy pass
over the candidate list in detection order:

1. The earliest pair not yet used seeds a new cluster; its displacement
   becomes the cluster's reference vector.
2. Every later unused pair whose displacement is within
   ``direction_tolerance`` of the reference on *both* axes (independent
   per-axis bound, not Euclidean) joins the cluster.
3. The cluster is kept only if it holds at least ``min_cluster_size``
   pairs.  Pairs of a dropped cluster stay consumed.

This is a heuristic, not an optimal partition: which pair becomes a seed
depends on the candidate order, which in turn follows the block scan
order.  Reordering the input can change cluster membership.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from .pairs import ClonePair

logger = logging.getLogger(__name__)


@dataclass
class Cluster:
    """Clone pairs consistent with the displacement of their seed (first) pair."""

    pairs: List[ClonePair] = field(default_factory=list)

    @property
    def seed(self) -> ClonePair:
        return self.pairs[0]

    @property
    def reference_displacement(self) -> Tuple[int, int]:
        return self.seed.displacement

    @property
    def size(self) -> int:
        return len(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self):
        return iter(self.pairs)

    def source_bbox(self, block_size: int) -> Tuple[int, int, int, int]:
        """(x, y, w, h) covering every source block of the cluster."""
        return _bbox([p.source for p in self.pairs], block_size)

    def dest_bbox(self, block_size: int) -> Tuple[int, int, int, int]:
        """(x, y, w, h) covering every destination block of the cluster."""
        return _bbox([p.dest for p in self.pairs], block_size)

    def to_dict(self, block_size: int = 0) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "size": self.size,
            "displacement": list(self.reference_displacement),
            "pairs": [p.to_dict() for p in self.pairs],
        }
        if block_size > 0:
            out["source_bbox"] = list(self.source_bbox(block_size))
            out["dest_bbox"] = list(self.dest_bbox(block_size))
        return out


def _bbox(coords: Sequence[Tuple[int, int]], block_size: int) -> Tuple[int, int, int, int]:
    xs = [c[0] for c in coords]
    ys = [c[1] for c in coords]
    x0, y0 = min(xs), min(ys)
    return (x0, y0, max(xs) + block_size - x0, max(ys) + block_size - y0)


def _within_tolerance(d: Tuple[int, int], ref: Tuple[int, int], tol: float) -> bool:
    return abs(d[0] - ref[0]) <= tol and abs(d[1] - ref[1]) <= tol


def cluster_clone_pairs(
    pairs: Sequence[ClonePair],
    min_cluster_size: int,
    direction_tolerance: float = 5.0,
) -> List[Cluster]:
    """Group *pairs* by consistent displacement; return surviving clusters in seed order.

    Parameters
    ----------
    pairs : sequence of ClonePair
        Candidate pairs in detection order.
    min_cluster_size : int
        Clusters with fewer pairs are discarded.
    direction_tolerance : float
        Maximum per-axis deviation from the seed displacement.

    Returns
    -------
    list of Cluster
    """
    clusters: List[Cluster] = []
    used = [False] * len(pairs)

    for i, seed in enumerate(pairs):
        if used[i]:
            continue
        used[i] = True
        ref = seed.displacement
        cluster = Cluster(pairs=[seed])

        for j in range(i + 1, len(pairs)):
            if used[j]:
                continue
            if _within_tolerance(pairs[j].displacement, ref, direction_tolerance):
                cluster.pairs.append(pairs[j])
                used[j] = True

        if cluster.size >= min_cluster_size:
            clusters.append(cluster)
        else:
            logger.debug("Dropped cluster %s with %d pair(s) (< %d)",
                         ref, cluster.size, min_cluster_size)

    return clusters
