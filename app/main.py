"""
Interactive clone viewer (OpenCV HighGUI).

Run with:
    python main.py view scene.png

Trackbars on the "Clone Detector" window drive the detection parameters;
each change reruns detection from scratch.  Moving the mouse over the
image shows a magnified crop of whatever is currently displayed in the
"Zoom View" window.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import cv2
import numpy as np

from clonedetect.detector import CloneDetector, DetectionResult
from clonedetect.magnifier import DEFAULT_VIEW_SIZE, magnify
from clonedetect.params import (
    CONFIG_PATH,
    SliderState,
    load_config,
    load_parameters,
    parameters_from_sliders,
)
from clonedetect.render import render_view
from clonedetect.utils import load_image_rgb

logger = logging.getLogger(__name__)

MAIN_WINDOW = "Clone Detector"
ZOOM_WINDOW = "Zoom View"

# (trackbar label, SliderState attribute, viewer-config key for its maximum, default max)
TRACKBARS = [
    ("Show Quantized", "show_quantized", None, 1),
    ("Block Size (2^n)", "block_exponent", "max_block_exponent", 6),
    ("Step Size", "step", "max_step", 20),
    ("Detail Threshold", "detail", "max_detail", 200),
    ("Min Distance", "min_distance", "max_min_distance", 100),
    ("Cluster Size", "cluster", "max_cluster_size", 10),
]
ZOOM_TRACKBAR = ("Zoom (1x-10x)", "zoom", "max_zoom", 10)


class CloneViewer:
    """Owns the slider state and the displayed buffer; detection itself is stateless."""

    def __init__(
        self,
        rgb: np.ndarray,
        config_path: Union[str, Path] = CONFIG_PATH,
    ):
        cfg = load_config(config_path)
        self.viewer_cfg: Dict[str, Any] = cfg.get("viewer") or {}
        self.base_params = load_parameters(config_path)
        self.detector = CloneDetector(rgb)
        self.zoom_size = int(self.viewer_cfg.get("zoom_size", DEFAULT_VIEW_SIZE))
        self.state = SliderState.from_parameters(
            self.base_params, zoom=int(self.viewer_cfg.get("zoom", 1)),
        )
        self.result: Optional[DetectionResult] = None
        self.displayed: Optional[np.ndarray] = None

    # ── State transitions (no GUI calls) ─────────────────────────────────────

    def recompute(self) -> np.ndarray:
        """Rerun detection for the current sliders and return the buffer to show."""
        params = parameters_from_sliders(self.state, base=self.base_params)
        self.result = self.detector.recompute(params)
        self.displayed = render_view(
            self.detector.image, self.result, show_quantized=bool(self.state.show_quantized),
        )
        return self.displayed

    def set_slider(self, attr: str, value: int) -> np.ndarray:
        setattr(self.state, attr, int(value))
        return self.recompute()

    def zoom_view(self, x: int, y: int) -> Optional[np.ndarray]:
        if self.displayed is None:
            return None
        return magnify(self.displayed, x, y, self.state.zoom, view_size=self.zoom_size)

    # ── HighGUI wiring ───────────────────────────────────────────────────────

    def _present(self, rgb: np.ndarray, window: str = MAIN_WINDOW) -> None:
        cv2.imshow(window, cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))

    def _on_slider(self, attr: str):
        def callback(value: int) -> None:
            self._present(self.set_slider(attr, value))
        return callback

    def _on_zoom(self, value: int) -> None:
        self.state.zoom = int(value)

    def _on_mouse(self, event: int, x: int, y: int, flags: int, param: Any) -> None:
        if event != cv2.EVENT_MOUSEMOVE:
            return
        zoomed = self.zoom_view(x, y)
        if zoomed is None:
            return
        cv2.moveWindow(ZOOM_WINDOW, x + 20, y + 20)
        self._present(zoomed, ZOOM_WINDOW)

    def run(self) -> None:
        cv2.namedWindow(MAIN_WINDOW, cv2.WINDOW_AUTOSIZE)
        cv2.namedWindow(ZOOM_WINDOW, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(ZOOM_WINDOW, self.zoom_size, self.zoom_size)
        cv2.setMouseCallback(MAIN_WINDOW, self._on_mouse)

        for label, attr, max_key, default_max in TRACKBARS:
            max_value = int(self.viewer_cfg.get(max_key, default_max)) if max_key else default_max
            cv2.createTrackbar(label, MAIN_WINDOW, getattr(self.state, attr), max_value,
                               self._on_slider(attr))
        label, attr, max_key, default_max = ZOOM_TRACKBAR
        cv2.createTrackbar(label, MAIN_WINDOW, self.state.zoom,
                           int(self.viewer_cfg.get(max_key, default_max)), self._on_zoom)

        self._present(self.recompute())
        logger.info("Viewer ready; press any key in the image window to quit")
        cv2.waitKey(0)
        cv2.destroyAllWindows()


def run_viewer(image_path: Union[str, Path], config_path: Union[str, Path] = CONFIG_PATH) -> None:
    CloneViewer(load_image_rgb(image_path), config_path=config_path).run()
