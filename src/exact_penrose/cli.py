#!/usr/bin/env -S uv run python3
"""Compute the Penrose tiling seen through one or more windows and draw the
last one. Every --bounds after the first moves the window of the same tree.
"""
import argparse
import configparser
import logging
import time

from exact_penrose.approx import DEFAULT_PRECISION, approx_bbox
from exact_penrose.errors import ExpressionSyntaxError
from exact_penrose.penrose import PenroseTree
from exact_penrose.rational import format_rational, parse_rational_expr

logger = logging.getLogger("exact_penrose")

DEFAULT_SETTINGS = {
    "width": 800,
    "height": 800,
    "precision": DEFAULT_PRECISION,
    "draw_level": 0,
    "inner_frame": (0.0, 1.0),
    "fill": None,
    "stroke": 0x0066cc,
}


# Utility to get time for executing a block and print it later
class Timing():
    def __enter__(self):
        self.start_time = time.time()
        return self
    def __exit__(self, type, value, traceback):
        self.end_time = time.time()
        self.time = self.end_time - self.start_time
    def __str__(self):
        if self.time >= 1:
            return "%.3g s" % self.time
        elif self.time >= 1e-3:
            return "%.3g ms" % (self.time * 1e3)
        else:
            return "%d µs" % int(self.time * 1e6)


def read_config_file(config_path: str) -> dict:
    config = configparser.ConfigParser()
    if not config.read(config_path):
        raise FileNotFoundError(config_path)
    settings = {}
    if not config.has_section("Settings"):
        return settings
    section = config["Settings"]
    for key in ("width", "height", "precision", "draw_level"):
        if key in section:
            settings[key] = section.getint(key)
    if "inner_frame" in section:
        lo, hi = (float(x.strip()) for x in section["inner_frame"].split(","))
        settings["inner_frame"] = (lo, hi)
    for key in ("fill", "stroke"):
        if key in section:
            settings[key] = int(section[key].lstrip("#"), 16)
    return settings


def rational_arg(text: str):
    try:
        return parse_rational_expr(text)
    except (ExpressionSyntaxError, ZeroDivisionError) as e:
        raise argparse.ArgumentTypeError(f"{text!r}: {e}")


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer")
    if value < 1:
        raise argparse.ArgumentTypeError(f"{text!r} must be at least 1")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exact-penrose", description=__doc__)
    parser.add_argument("--bounds", nargs=4, action="append", type=rational_arg,
                        metavar=("LEFT", "BOTTOM", "RIGHT", "TOP"),
                        help="window in tiling units, as rational expressions (repeatable)")
    parser.add_argument("--config", help="INI file with a [Settings] section")
    parser.add_argument("--precision", type=positive_int, help="denominator of the approximations")
    parser.add_argument("--draw-level", type=int, help="draw tiles this many steps above the leaves")
    parser.add_argument("--width", type=positive_int, help="output width in pixels")
    parser.add_argument("--height", type=positive_int, help="output height in pixels")
    parser.add_argument("--output", default="tiling.png", help="PNG file to write")
    parser.add_argument("--no-render", action="store_true", help="only compute the tiling")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    settings = dict(DEFAULT_SETTINGS)
    if args.config:
        settings.update(read_config_file(args.config))
    for key in ("precision", "draw_level", "width", "height"):
        if getattr(args, key) is not None:
            settings[key] = getattr(args, key)
    for key in ("precision", "width", "height"):
        if settings[key] < 1:
            parser.error(f"{key} must be at least 1, got {settings[key]}")

    windows = args.bounds or [[-5, -5, 5, 5]]
    tree = None
    bound = None
    for left, bottom, right, top in windows:
        try:
            bound = approx_bbox(left, bottom, right, top, settings["precision"])
        except ValueError as e:
            parser.error(str(e))
        with Timing() as t:
            if tree is None:
                tree = PenroseTree(bound)
            else:
                tree.update(bound)
        logger.info(
            "window [%s, %s] x [%s, %s]: level %d, %d visible, %d nodes, %d subdivided (%s)",
            format_rational(left), format_rational(right), format_rational(bottom), format_rational(top),
            tree.level, len(tree.triangles()), len(tree), tree.stats.subdivided, t,
        )

    if not args.no_render:
        # cairo is only needed here
        from exact_penrose.render import render_tree
        with Timing() as t:
            render_tree(
                tree, bound, args.output,
                width=settings["width"], height=settings["height"],
                draw_level=settings["draw_level"], inner_frame=settings["inner_frame"],
                denominator=settings["precision"], fill=settings["fill"], stroke=settings["stroke"],
            )
        logger.info("draw: %s", t)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
