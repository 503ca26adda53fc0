"""
Detection parameters and their YAML configuration.

A :class:`ParameterSet` is an immutable value passed into every detection
run.  Defaults live in ``clonedetect/configs/detector.yaml``; the interactive viewer
maps its slider positions onto a fresh ParameterSet with
:func:`parameters_from_sliders` on every change.

The default thresholds are calibrated for the luminance conversion and
Laplacian kernel fixed in :mod:`clonedetect.detail`; they need
recalibrating if either changes.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError


CONFIG_PATH = Path(__file__).parent / "configs" / "detector.yaml"

DEFAULT_BLOCK_SIZE_EXPONENT = 2
DEFAULT_STEP_SIZE = 4
DEFAULT_DETAIL_THRESHOLD = 9.7
DEFAULT_MIN_DISTANCE = 20.0
DEFAULT_MIN_CLUSTER_SIZE = 3
DEFAULT_DIRECTION_TOLERANCE = 5.0


@dataclass(frozen=True)
class ParameterSet:
    """Tunable values for one detection pass."""

    block_size_exponent: int = DEFAULT_BLOCK_SIZE_EXPONENT   # block side = 2**n
    step_size: int = DEFAULT_STEP_SIZE
    detail_threshold: float = DEFAULT_DETAIL_THRESHOLD
    min_distance: float = DEFAULT_MIN_DISTANCE
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE
    direction_tolerance: float = DEFAULT_DIRECTION_TOLERANCE

    def __post_init__(self) -> None:
        for name in ("block_size_exponent", "step_size", "min_cluster_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        for name in ("detail_threshold", "min_distance", "direction_tolerance"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigError(f"{name} must be finite, got {value!r}")

        if self.block_size_exponent < 0:
            raise ConfigError(
                f"block_size_exponent must be >= 0, got {self.block_size_exponent}"
            )
        if self.step_size < 1:
            raise ConfigError(f"step_size must be >= 1, got {self.step_size}")
        if self.min_cluster_size < 1:
            raise ConfigError(f"min_cluster_size must be >= 1, got {self.min_cluster_size}")
        if self.min_distance < 0:
            raise ConfigError(f"min_distance must be >= 0, got {self.min_distance}")
        if self.direction_tolerance < 0:
            raise ConfigError(
                f"direction_tolerance must be >= 0, got {self.direction_tolerance}"
            )

    @property
    def block_size(self) -> int:
        return 1 << self.block_size_exponent

    def replace(self, **changes: Any) -> "ParameterSet":
        """Return a new, validated ParameterSet with *changes* applied."""
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ConfigError(f"Unknown detection parameter(s): {sorted(unknown)}")
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        out = dataclasses.asdict(self)
        out["block_size"] = self.block_size
        return out


def load_config(config_path: Union[str, Path] = CONFIG_PATH) -> Dict[str, Any]:
    """Read the YAML config.

    Only the bundled default may be absent (yielding an empty mapping); a
    missing file at any other path raises :class:`ConfigError`.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        if config_path == CONFIG_PATH:
            return {}
        raise ConfigError(f"Config not found: {config_path}")
    try:
        with open(config_path, encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed config '{config_path}': {exc}") from exc
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config '{config_path}' must be a mapping at top level")
    return cfg


def load_parameters(
    config_path: Union[str, Path] = CONFIG_PATH,
    **overrides: Any,
) -> ParameterSet:
    """
    Build a ParameterSet from the ``detection`` section of the config.

    Keys absent from the file keep their built-in defaults.  Keyword
    *overrides* whose value is ``None`` are ignored, so CLI flags that
    were not given can be passed straight through.
    """
    cfg = load_config(config_path)
    det_cfg = cfg.get("detection") or {}
    if not isinstance(det_cfg, dict):
        raise ConfigError("'detection' config section must be a mapping")

    values: Dict[str, Any] = dict(det_cfg)
    values.update({k: v for k, v in overrides.items() if v is not None})
    return ParameterSet().replace(**values)


@dataclass
class SliderState:
    """Raw trackbar positions of the interactive viewer."""

    show_quantized: int = 0
    block_exponent: int = DEFAULT_BLOCK_SIZE_EXPONENT
    step: int = DEFAULT_STEP_SIZE
    detail: int = int(round(DEFAULT_DETAIL_THRESHOLD * 10))   # threshold = detail / 10
    min_distance: int = int(DEFAULT_MIN_DISTANCE)
    cluster: int = DEFAULT_MIN_CLUSTER_SIZE
    zoom: int = 1

    @classmethod
    def from_parameters(cls, params: ParameterSet, zoom: int = 1) -> "SliderState":
        return cls(
            block_exponent=params.block_size_exponent,
            step=params.step_size,
            detail=int(round(params.detail_threshold * 10)),
            min_distance=int(round(params.min_distance)),
            cluster=params.min_cluster_size,
            zoom=zoom,
        )


def parameters_from_sliders(
    state: SliderState,
    base: Optional[ParameterSet] = None,
) -> ParameterSet:
    """
    Map slider positions onto a ParameterSet.

    Trackbars can only start at 0, so a step or cluster size of 0 is
    clamped to 1 here.  The direction tolerance has no slider and is
    taken from *base*.
    """
    base = base or ParameterSet()
    return base.replace(
        block_size_exponent=max(0, int(state.block_exponent)),
        step_size=max(1, int(state.step)),
        detail_threshold=max(0, int(state.detail)) / 10.0,
        min_distance=float(max(0, int(state.min_distance))),
        min_cluster_size=max(1, int(state.cluster)),
    )
