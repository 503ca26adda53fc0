"""High-level CLI for the block-grid clone detector."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from clonedetect.detector import detect_clones
from clonedetect.errors import ConfigError, InputError
from clonedetect.params import CONFIG_PATH, ParameterSet, load_config, load_parameters
from clonedetect.render import annotate_clusters
from clonedetect.utils import json_sanitize, load_image_rgb, save_image

logger = logging.getLogger("clonedetect")

EXIT_INPUT_ERROR = 1
EXIT_CONFIG_ERROR = 2


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the package logger once."""
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[clonedetect] %(levelname)s %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))


def detect_image(
    image_path: Path,
    params: ParameterSet,
    out_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """Detect clones in one image file; optionally save the display images."""
    rgb = load_image_rgb(image_path)
    result = detect_clones(rgb, params)

    summary = result.to_dict()
    summary["image"] = str(image_path)
    if out_dir is not None:
        annotated = annotate_clusters(rgb, result.clusters, params.block_size)
        summary["artifacts"] = {
            "clones": save_image(annotated, out_dir, f"{image_path.stem}_clones.png"),
            "quantized": save_image(result.preview, out_dir, f"{image_path.stem}_quantized.png"),
        }
    return summary


# -------------------- CLI commands --------------------

def cmd_detect(args: argparse.Namespace) -> int:
    params = load_parameters(
        args.config,
        block_size_exponent=args.block_exp,
        step_size=args.step,
        detail_threshold=args.detail,
        min_distance=args.min_distance,
        min_cluster_size=args.min_cluster,
        direction_tolerance=args.tolerance,
    )
    out_dir = Path(args.out) if args.out else None
    paths = [Path(p) for p in args.images]

    outputs: List[Dict[str, Any]] = []
    failed = 0
    for path in tqdm(paths, desc="detect", unit="img", disable=len(paths) < 2):
        try:
            outputs.append(detect_image(path, params, out_dir))
        except InputError as exc:
            logger.error("%s", exc)
            failed += 1

    if outputs:
        payload = outputs[0] if len(paths) == 1 else outputs
        print(json.dumps(json_sanitize(payload), indent=2, ensure_ascii=False))
    return EXIT_INPUT_ERROR if failed else 0


def cmd_view(args: argparse.Namespace) -> int:
    from app.main import run_viewer

    run_viewer(args.image, config_path=args.config)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Block-grid copy-move (clone) detector")
    parser.add_argument("--config", default=str(CONFIG_PATH), help="Path to the YAML config")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    det_p = sub.add_parser("detect", help="Detect cloned regions and print a JSON summary")
    det_p.add_argument("images", nargs="+", help="Image file(s); each is analysed on its own")
    det_p.add_argument("--block-exp", type=int, default=None, help="Block side = 2**N")
    det_p.add_argument("--step", type=int, default=None, help="Scan stride in pixels")
    det_p.add_argument("--detail", type=float, default=None, help="Detail (Laplacian std) threshold")
    det_p.add_argument("--min-distance", type=float, default=None, help="Min source/dest distance")
    det_p.add_argument("--min-cluster", type=int, default=None, help="Min pairs per cluster")
    det_p.add_argument("--tolerance", type=float, default=None, help="Per-axis displacement tolerance")
    det_p.add_argument("--out", default=None, help="Directory for annotated / quantized images")

    view_p = sub.add_parser("view", help="Open the interactive viewer")
    view_p.add_argument("image", help="Image file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "detect": cmd_detect,
        "view": cmd_view,
    }
    try:
        level = "DEBUG" if args.verbose else (load_config(args.config).get("logging") or {}).get("level", "INFO")
        configure_logging(level)
        return commands[args.command](args)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR
    except InputError as exc:
        logger.error("%s", exc)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
