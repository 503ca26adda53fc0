"""
Shared utilities for the clone detector.

Provides:
- Image I/O helpers (load_image_rgb, to_gray_u8, save_image)
- PixelBuffer validation (as_pixel_buffer)
- Region-of-interest clamping used at every crop site (clamp_roi, crop_block)
- JSON sanitising of numpy / dataclass values for CLI output (json_sanitize)
"""

from __future__ import annotations

import math
from dataclasses import asdict
from pathlib import Path
from typing import Any, Tuple, Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import InputError


# ── Image I/O helpers ────────────────────────────────────────────────

def load_image_rgb(path: Union[str, Path]) -> np.ndarray:
    """
    Load any image (handling RGBA/LA/L/P/CMYK/etc.) as RGB uint8.

    Alpha channels are composited onto a white background so that
    transparent regions become white rather than black.

    Parameters
    ----------
    path : str or Path
        Path to the image file.

    Returns
    -------
    np.ndarray
        HxWx3 uint8 array in RGB order.

    Raises
    ------
    InputError
        If the file does not exist or cannot be decoded as an image.
    """
    path = Path(path)
    try:
        img = Image.open(path)
        img.load()
    except FileNotFoundError as exc:
        raise InputError(f"Image not found: {path}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise InputError(f"Unreadable image '{path}': {exc}") from exc

    if img.mode in ("RGBA", "LA"):
        background = Image.new("RGB", img.size, (255, 255, 255))
        if img.mode == "LA":
            img = img.convert("RGBA")
        background.paste(img, mask=img.split()[-1])
        img = background
    elif img.mode == "P":
        if "transparency" in img.info:
            img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            img = background
        else:
            img = img.convert("RGB")
    elif img.mode != "RGB":
        img = img.convert("RGB")

    return as_pixel_buffer(np.array(img, dtype=np.uint8))


def as_pixel_buffer(image: Any) -> np.ndarray:
    """
    Validate *image* as a PixelBuffer and return a read-only view of it.

    A PixelBuffer is an HxWx3 uint8 array in RGB order with non-zero
    width and height.  The caller's array is left writeable; only the
    returned view is locked.

    Raises
    ------
    InputError
        If *image* is ``None``, empty, or not an HxWx3 uint8 array.
    """
    if image is None:
        raise InputError("No image buffer given")
    arr = np.asarray(image)
    if arr.size == 0:
        raise InputError("Image buffer is empty")
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise InputError(f"Expected an HxWx3 colour buffer, got shape {arr.shape}")
    if arr.dtype != np.uint8:
        raise InputError(f"Expected 8 bits per channel (uint8), got {arr.dtype}")
    view = arr.view()
    view.flags.writeable = False
    return view


def to_gray_u8(rgb: np.ndarray) -> np.ndarray:
    """Luminance of an RGB block: ``0.299 R + 0.587 G + 0.114 B`` as uint8."""
    return cv2.cvtColor(np.require(rgb, requirements=["C", "W"]), cv2.COLOR_RGB2GRAY)


def save_image(
    rgb: np.ndarray,
    output_dir: Union[str, Path],
    name: str,
) -> Path:
    """
    Save an RGB image to disk via OpenCV.

    Parameters
    ----------
    rgb : np.ndarray
        HxWx3 uint8 image in RGB order.
    output_dir : str or Path
        Output directory (created if missing).
    name : str
        Filename (e.g. "scene_clones.png").

    Returns
    -------
    Path
        Path to the saved file.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / name
    cv2.imwrite(str(path), cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
    return path


# ── ROI helpers ──────────────────────────────────────────────────────

def clamp_roi(
    x: int,
    y: int,
    w: int,
    h: int,
    width: int,
    height: int,
) -> Tuple[int, int, int, int]:
    """
    Clamp an (x, y, w, h) region so it lies fully inside a width x height buffer.

    The size is first limited to the buffer size, then the origin is
    shifted so that ``origin + size`` never exceeds the buffer.

    Returns
    -------
    tuple of int
        ``(x, y, w, h)`` with ``0 <= x``, ``x + w <= width`` (same for y).
    """
    w = max(0, min(int(w), int(width)))
    h = max(0, min(int(h), int(height)))
    x = max(0, min(int(x), int(width) - w))
    y = max(0, min(int(y), int(height) - h))
    return x, y, w, h


def crop_block(image: np.ndarray, x: int, y: int, size: int) -> np.ndarray:
    """Return a view of the size x size block at (x, y), clamped to the image."""
    height, width = image.shape[:2]
    x0, y0, w, h = clamp_roi(x, y, size, size, width, height)
    return image[y0 : y0 + h, x0 : x0 + w]


# ── Serialisation ────────────────────────────────────────────────────

def json_sanitize(obj: Any) -> Any:
    """Convert numpy types + Path + dataclasses to JSON-safe Python types."""
    if obj is None:
        return None
    if isinstance(obj, Path):
        return str(obj)
    if hasattr(obj, "to_dict"):
        return json_sanitize(obj.to_dict())
    if hasattr(obj, "__dataclass_fields__"):
        return {k: json_sanitize(v) for k, v in asdict(obj).items()}
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return json_sanitize(float(obj))
    if isinstance(obj, np.ndarray):
        return json_sanitize(obj.tolist())
    if isinstance(obj, (list, tuple)):
        return [json_sanitize(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): json_sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (int, float, str, bool)):
        if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
            return None
        return obj
    return str(obj)
