"""
Block-grid copy-move (clone) detection.

Detects regions that were duplicated and pasted elsewhere in the same
image by:
  1. Block scan       : square blocks of side 2**n at a fixed stride,
                       row-major.
  2. Detail gate      : blocks whose Laplacian standard deviation is below
                       the threshold are skipped.
  3. Fingerprinting   : 4x4 area-averaged luminance grid quantised into
                       16 levels.
  4. First-seen index : the first block with a fingerprint becomes its
                       source; later blocks with the same fingerprint
                       are matches.
  5. Distance filter  : matches closer than ``min_distance`` are dropped.
  6. Shift clustering : greedy grouping of pairs by displacement vector;
                       small clusters are dropped.

Every run is a pure function of ``(image, ParameterSet)``: all tables and
lists are rebuilt from scratch and the input buffer is never written.

Public API
----------
>>> from clonedetect import ParameterSet, detect_clones
>>> result = detect_clones(rgb, ParameterSet(block_size_exponent=4))
>>> for cluster in result.clusters:
...     print(cluster.reference_displacement, cluster.size)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from .cluster import Cluster, cluster_clone_pairs
from .detail import compute_detail, passes_detail_gate
from .fingerprint import extract_fingerprint, reconstruct_block
from .match_index import MatchIndex
from .pairs import ClonePair, PairFilter
from .params import ParameterSet
from .scanner import BlockScanner
from .utils import as_pixel_buffer, crop_block

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Data classes
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class DetectionStats:
    """Counters for one detection pass."""
    blocks_scanned: int = 0
    blocks_textured: int = 0          # passed the detail gate
    unique_fingerprints: int = 0
    matches: int = 0                  # index hits before the distance filter
    rejected_near: int = 0
    candidate_pairs: int = 0
    clusters: int = 0
    elapsed_ms: int = 0


@dataclass
class DetectionResult:
    """Clusters and diagnostic preview produced by one detection pass."""

    clusters: List[Cluster]
    preview: np.ndarray                       # HxWx3 uint8, downsampled blocks pasted in
    candidate_pairs: List[ClonePair]
    params: ParameterSet
    stats: DetectionStats = field(default_factory=DetectionStats)

    @property
    def pair_count(self) -> int:
        return sum(c.size for c in self.clusters)

    def to_dict(self) -> Dict[str, Any]:
        """Serialisable summary for logging / JSON output."""
        block_size = self.params.block_size
        return {
            "params": self.params.to_dict(),
            "pair_count": self.pair_count,
            "stats": {
                "blocks_scanned": self.stats.blocks_scanned,
                "blocks_textured": self.stats.blocks_textured,
                "unique_fingerprints": self.stats.unique_fingerprints,
                "matches": self.stats.matches,
                "rejected_near": self.stats.rejected_near,
                "candidate_pairs": self.stats.candidate_pairs,
                "clusters": self.stats.clusters,
                "elapsed_ms": self.stats.elapsed_ms,
            },
            "clusters": [c.to_dict(block_size) for c in self.clusters],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Main public function
# ─────────────────────────────────────────────────────────────────────────────

def detect_clones(
    image: np.ndarray,
    params: Optional[ParameterSet] = None,
) -> DetectionResult:
    """Run one full detection pass over *image*.

    Parameters
    ----------
    image : np.ndarray
        HxWx3 uint8 RGB buffer.  Read only.
    params : ParameterSet, optional
        Detection parameters (defaults from :class:`ParameterSet`).

    Returns
    -------
    DetectionResult

    Raises
    ------
    InputError
        If *image* is missing, empty or not an HxWx3 uint8 array.
    """
    t0 = time.time()
    params = params or ParameterSet()
    rgb = as_pixel_buffer(image)
    height, width = rgb.shape[:2]
    block_size = params.block_size

    scanner = BlockScanner(width, height, block_size, params.step_size)
    index = MatchIndex()
    pair_filter = PairFilter(params.min_distance)
    candidates: List[ClonePair] = []
    stats = DetectionStats()
    preview = np.array(rgb, copy=True)

    # ------------------------------------------------------------------
    # 1. Scan, gate, fingerprint and index blocks in row-major order
    # ------------------------------------------------------------------
    for x, y in scanner:
        stats.blocks_scanned += 1
        block = crop_block(rgb, x, y, block_size)

        if not passes_detail_gate(compute_detail(block), params.detail_threshold):
            continue
        stats.blocks_textured += 1

        fp = extract_fingerprint(block)
        source = index.lookup_or_insert(fp, (x, y))
        if source is not None:
            stats.matches += 1
            pair = pair_filter.evaluate(source, (x, y))
            if pair is None:
                # near matches are left out of the preview too
                continue
            candidates.append(pair)

        preview[y : y + block.shape[0], x : x + block.shape[1]] = reconstruct_block(
            fp, block_size,
        )[: block.shape[0], : block.shape[1]]

    # ------------------------------------------------------------------
    # 2. Group candidate pairs by displacement
    # ------------------------------------------------------------------
    clusters = cluster_clone_pairs(
        candidates,
        min_cluster_size=params.min_cluster_size,
        direction_tolerance=params.direction_tolerance,
    )

    stats.unique_fingerprints = len(index)
    stats.rejected_near = pair_filter.rejected
    stats.candidate_pairs = len(candidates)
    stats.clusters = len(clusters)
    stats.elapsed_ms = int((time.time() - t0) * 1000)

    logger.info(
        "Scanned %d blocks (%d textured): %d candidate pairs, %d cluster(s) in %d ms",
        stats.blocks_scanned, stats.blocks_textured, stats.candidate_pairs,
        stats.clusters, stats.elapsed_ms,
    )

    return DetectionResult(
        clusters=clusters,
        preview=preview,
        candidate_pairs=candidates,
        params=params,
        stats=stats,
    )


class CloneDetector:
    """Binds one image; every :meth:`recompute` is a fresh, independent pass."""

    def __init__(self, image: np.ndarray):
        self.image = as_pixel_buffer(image)

    def recompute(self, params: ParameterSet) -> DetectionResult:
        return detect_clones(self.image, params)
