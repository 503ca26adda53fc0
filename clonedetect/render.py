"""
clonedetect.render: overlays for displaying detection results.

Source blocks are outlined in green, destination blocks in magenta, and a
thin white line joins the centres of each pair.  Colours are RGB.
"""

from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np

from .cluster import Cluster
from .detector import DetectionResult

SOURCE_COLOR = (0, 255, 0)
DEST_COLOR = (255, 0, 255)
LINK_COLOR = (255, 255, 255)


def annotate_clusters(
    rgb: np.ndarray,
    clusters: Sequence[Cluster],
    block_size: int,
    thickness: int = 2,
) -> np.ndarray:
    """Return a copy of *rgb* with every clustered pair drawn on it."""
    out = np.array(rgb, dtype=np.uint8, copy=True)
    half = block_size // 2
    for cluster in clusters:
        for pair in cluster:
            sx, sy = pair.source
            dx, dy = pair.dest
            cv2.rectangle(out, (sx, sy), (sx + block_size, sy + block_size),
                          SOURCE_COLOR, thickness)
            cv2.rectangle(out, (dx, dy), (dx + block_size, dy + block_size),
                          DEST_COLOR, thickness)
            cv2.line(out, (sx + half, sy + half), (dx + half, dy + half), LINK_COLOR, 1)
    return out


def render_view(
    rgb: np.ndarray,
    result: DetectionResult,
    show_quantized: bool = False,
) -> np.ndarray:
    """The buffer to present: the quantised preview, or the annotated image."""
    if show_quantized:
        return result.preview
    return annotate_clusters(rgb, result.clusters, result.params.block_size)
