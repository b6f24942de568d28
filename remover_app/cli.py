"""Headless stroke replay: apply a JSON stroke script to an image."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np

from retouch_brush import (
    RenderBox,
    RetouchEngine,
    RetouchError,
    download_name,
    load_image_rgba_u8,
    save_image_rgba_u8,
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay brush strokes onto an image and save the result as PNG")
    parser.add_argument("--input", type=str, required=True,
                        help="Image to retouch")
    parser.add_argument("--strokes", type=str, required=True,
                        help="JSON file with a list of strokes")
    parser.add_argument("--out", type=str, default=None,
                        help="Output PNG path (default: removed_watermark_<ms>.png next to the input)")
    parser.add_argument("--display-box", type=parse_box, default=None,
                        help="left,top,width,height of the on-screen box the points were recorded in")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the blur operator")
    parser.add_argument("--spacing", type=float, default=None,
                        help="Interpolate dabs every N pixels between stroke points")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def parse_box(raw: str) -> RenderBox:
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError(
            "--display-box expects left,top,width,height")
    left, top, width, height = (float(p) for p in parts)
    return RenderBox(left, top, width, height)


def load_strokes(path: Path) -> List[Dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of strokes")
    return data


def replay(engine: RetouchEngine, strokes: List[Dict], box: RenderBox) -> int:
    """Drive the engine like a pointer would; returns the number of strokes."""

    count = 0
    for index, stroke in enumerate(strokes):
        if "undo" in stroke:
            for _ in range(int(stroke["undo"])):
                if not engine.undo():
                    logger.info("Stroke %d: nothing left to undo", index)
                    break
            continue

        points = stroke.get("points") or []
        if not points:
            raise ValueError(f"stroke {index} has no points")
        if "operator" in stroke:
            engine.set_operator(stroke["operator"])
        if "radius" in stroke:
            engine.set_radius(stroke["radius"])

        first, *rest = points
        engine.pointer_down((float(first[0]), float(first[1])), box)
        for point in rest:
            engine.pointer_move((float(point[0]), float(point[1])), box)
        engine.pointer_up()
        count += 1
    return count


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input).expanduser()
    out_path = Path(args.out).expanduser() if args.out else input_path.parent / download_name()

    pixels = load_image_rgba_u8(str(input_path))
    height, width = pixels.shape[:2]
    box = args.display_box or RenderBox(0, 0, width, height)

    rng = np.random.default_rng(args.seed) if args.seed is not None else None
    engine = RetouchEngine(rng=rng, stroke_spacing=args.spacing)
    engine.load(pixels, width, height)

    try:
        count = replay(engine, load_strokes(Path(args.strokes)), box)
    except (RetouchError, ValueError) as exc:
        logger.error("Replay failed: %s", exc)
        return 1

    out_path.parent.mkdir(parents=True, exist_ok=True)
    save_image_rgba_u8(str(out_path), engine.export())
    logger.info("Applied %d strokes, saved %s", count, out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
