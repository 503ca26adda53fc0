"""
clonedetect.magnifier: cursor-centred zoom of a displayed buffer.

Independent of detection: it only reads whatever buffer is on screen.
"""

from __future__ import annotations

import cv2
import numpy as np

from .utils import clamp_roi

DEFAULT_VIEW_SIZE = 200


def magnify(
    buffer: np.ndarray,
    x: int,
    y: int,
    zoom: int,
    view_size: int = DEFAULT_VIEW_SIZE,
) -> np.ndarray:
    """Crop around (x, y) and upscale to view_size x view_size.

    The crop side is ``view_size / zoom`` (zoom below 1 counts as 1),
    limited to the shorter buffer side so the crop stays square.  Its
    origin is clamped so the crop never leaves the buffer, so cursors near
    an edge see an off-centre window.
    """
    scale = max(1, int(zoom))
    crop = max(1, int(view_size / float(scale)))
    height, width = buffer.shape[:2]
    side = min(crop, width, height)
    x0, y0, w, h = clamp_roi(x - side // 2, y - side // 2, side, side, width, height)
    region = np.require(buffer[y0 : y0 + h, x0 : x0 + w], requirements=["C", "W"])
    return cv2.resize(region, (view_size, view_size), interpolation=cv2.INTER_LINEAR)
