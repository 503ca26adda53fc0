"""
clonedetect.detail: edge/texture energy gate for blocks.

The detail score of a block is the standard deviation of its Laplacian
response.  The luminance conversion (OpenCV ``COLOR_RGB2GRAY``) and the
kernel (``cv2.Laplacian`` with ``ksize=1``, i.e. ``[[0,1,0],[1,-4,1],[0,1,0]]``,
border ``BORDER_REFLECT_101``) are fixed: the default detail threshold of
9.7 is only meaningful for exactly this definition.
"""

from __future__ import annotations

import cv2
import numpy as np

from .utils import to_gray_u8


def compute_detail(block: np.ndarray) -> float:
    """Return the Laplacian standard deviation of an RGB block (always >= 0).

    A block of a single uniform colour scores exactly 0.0.
    """
    gray = to_gray_u8(block)
    lap = cv2.Laplacian(gray, cv2.CV_64F)
    return float(np.std(lap))


def passes_detail_gate(score: float, threshold: float) -> bool:
    """A block proceeds to fingerprinting only if ``score >= threshold``."""
    return score >= threshold
