"""
Block-grid copy-move (clone) forgery detection.

Each stage of the detector lives in its own module; ``detector`` runs them
in order for one image and one parameter set.

Modules
-------
params         ParameterSet, YAML config loading, slider mapping
scanner        Row-major block position enumeration
detail         Laplacian detail score and gate
fingerprint    4x4 quantised luminance fingerprint
match_index    First-seen fingerprint -> source coordinate table
pairs          ClonePair and the minimum-distance filter
cluster        Greedy displacement-vector clustering
detector       Detection pass orchestration (detect_clones, CloneDetector)
render         Cluster overlays and quantised preview selection
magnifier      Cursor-centred zoom of a displayed buffer
utils          Image I/O, PixelBuffer validation, ROI clamping, JSON helpers
errors         InputError, ConfigError
"""

from .errors import ConfigError, InputError
from .params import ParameterSet, load_parameters
from .pairs import ClonePair
from .cluster import Cluster, cluster_clone_pairs
from .detector import CloneDetector, DetectionResult, detect_clones
from .utils import load_image_rgb

__all__ = [
    "ConfigError", "InputError",
    "ParameterSet", "load_parameters",
    "ClonePair", "Cluster", "cluster_clone_pairs",
    "CloneDetector", "DetectionResult", "detect_clones",
    "load_image_rgb",
]
