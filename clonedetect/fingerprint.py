"""
clonedetect.fingerprint: coarse quantised block descriptor.

A block is reduced to luminance, area-averaged down to a fixed 4x4 grid
(independent of the block size) and every cell is divided by a bucket
width of 16, collapsing the 8-bit range into 16 symbols.  The 16 symbols
in raster order form the fingerprint key.

The key is lossy: small pixel noise maps to the same key,
so visually similar blocks collide.  The unquantised 4x4 grid is kept on
the fingerprint for preview rendering only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import cv2
import numpy as np

from .utils import to_gray_u8

GRID_SIZE = 4
BUCKET_WIDTH = 16


@dataclass(frozen=True)
class Fingerprint:
    """Hashable block key; equality and hashing use ``key`` only."""

    key: Tuple[int, ...]
    cells: np.ndarray = field(compare=False, repr=False)   # GRID x GRID uint8 luminance


def downsample(block: np.ndarray, grid: int = GRID_SIZE) -> np.ndarray:
    """Luminance of *block* area-averaged to a grid x grid uint8 array."""
    gray = to_gray_u8(block)
    return cv2.resize(gray, (grid, grid), interpolation=cv2.INTER_AREA)


def extract_fingerprint(
    block: np.ndarray,
    grid: int = GRID_SIZE,
    bucket_width: int = BUCKET_WIDTH,
) -> Fingerprint:
    """Compute the fingerprint of an RGB block."""
    cells = downsample(block, grid)
    levels = cells // bucket_width
    return Fingerprint(key=tuple(int(v) for v in levels.ravel()), cells=cells)


def reconstruct_block(fingerprint: Fingerprint, block_size: int) -> np.ndarray:
    """Upscale the 4x4 grid back to a block_size x block_size RGB block."""
    big = cv2.resize(
        fingerprint.cells, (block_size, block_size), interpolation=cv2.INTER_NEAREST,
    )
    return cv2.cvtColor(big, cv2.COLOR_GRAY2RGB)
