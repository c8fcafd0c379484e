"""
Plan It — entry point.

Usage:
    python -m planit serve                     # start web server on :8000
    python -m planit serve --port 3000
    python -m planit layout Study Cleaning Cat  # print a slot layout as JSON
    python -m planit layout Study Cat --legacy --seed 7
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys

from planit.bodies import planet_size
from planit.layout import (
    LayoutError, LegacyContinuousPlacer, OrbitLayout, anchor_for_viewport,
    layout_to_dict, legacy_to_dict,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="planit", description="Orbital layout for task categories")
    p.add_argument("-v", "--verbose", action="store_true", help="Log engine decisions")
    sub = p.add_subparsers(dest="cmd", required=True)

    sv = sub.add_parser("serve", help="Start the layout web service")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    lo = sub.add_parser("layout", help="Lay out categories and print JSON")
    lo.add_argument("categories", nargs="+", help="Category names, in order of appearance")
    lo.add_argument("--width", type=float, default=1280, help="Viewport width (px)")
    lo.add_argument("--height", type=float, default=800, help="Viewport height (px)")
    lo.add_argument("--seed", type=int, default=None, help="Random seed")
    lo.add_argument("--legacy", action="store_true", help="Use the grid-free legacy placer")

    return p


def _layout_json(args: argparse.Namespace) -> dict:
    rng = random.Random(args.seed)
    if args.legacy:
        anchor = anchor_for_viewport(args.width, args.height)
        placer = LegacyContinuousPlacer(rng=rng)
        sizes = {c: planet_size(0) for c in dict.fromkeys(args.categories)}
        return legacy_to_dict(placer.place_all(sizes), anchor)

    layout = OrbitLayout(args.width, args.height, rng=rng)
    result = layout.sync(args.categories)
    out = layout_to_dict(layout)
    out["unplaced"] = result.unplaced
    return out


def main() -> int:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "serve":
        from planit.web.server import main as serve_main
        serve_main(host=args.host, port=args.port)
        return 0

    if args.cmd == "layout":
        try:
            data = _layout_json(args)
        except LayoutError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
