# Draw the visible part of a PenroseTree to a PNG with cairo.
# Exact vertices are turned into frame coordinates by approx_point; this is
# the only place floats are used.
import logging

import cairo
import numpy as np

from exact_penrose.approx import DEFAULT_PRECISION, FramePoint, approx_point
from exact_penrose.bbox import BBox, Triangle
from exact_penrose.penrose import PenroseTree, Shape

logger = logging.getLogger(__name__)

FILL_X = 0x99ccff
FILL_Y = 0x80afe1
STROKE = 0x0066cc
PARENT_STROKE = 0xff0000
FRAME_STROKE = 0x008000


def mkcolor(hex: int) -> tuple[float, float, float]:
    r, g, b = (hex >> 16) & 0xff, (hex >> 8) & 0xff, (hex & 0xff)
    return r / 255, g / 255, b / 255


def set_color(ctx: cairo.Context, hex: int):
    ctx.set_source_rgb(*mkcolor(hex))


"""
Frame to surface transformation, frame (0, 0) is bottom left:

[ w (hi - lo)       0         w lo       ] [ x ]
[     0       -h (hi - lo)  h (1 - lo)   ] [ y ]
[     0             0           1        ] [ 1 ]
"""
def frame_transform(width: int, height: int, inner_frame: tuple[float, float] = (0.0, 1.0)) -> np.ndarray:
    lo, hi = inner_frame
    return np.array([
        [width * (hi - lo), 0, width * lo],
        [0, -height * (hi - lo), height * (1 - lo)],
        [0, 0, 1],
    ])


def to_pixel(transform: np.ndarray, p: FramePoint) -> tuple[float, float]:
    u = transform @ np.array([p.re, p.im, 1.0])
    return u[0].item(), u[1].item()


def approx_corners(tri: Triangle, frame: BBox, denominator: int) -> tuple[FramePoint, FramePoint, FramePoint]:
    return tuple(approx_point(v, frame, denominator) for v in tri.vs)


def draw_triangle(ctx: cairo.Context, corners, transform: np.ndarray, fill: int, stroke: int = STROKE):
    a, b, c = (to_pixel(transform, p) for p in corners)
    ctx.move_to(*a)
    ctx.line_to(*b)
    ctx.line_to(*c)
    ctx.close_path()
    set_color(ctx, fill)
    ctx.fill()

    # Only C -> A -> B: the base BC is shared with the mirrored half tile
    ctx.set_line_join(cairo.LINE_JOIN_ROUND)
    ctx.move_to(*c)
    ctx.line_to(*a)
    ctx.line_to(*b)
    set_color(ctx, stroke)
    ctx.stroke()


def draw_triangle_dashed(ctx: cairo.Context, corners, transform: np.ndarray, stroke: int = PARENT_STROKE):
    a, b, c = (to_pixel(transform, p) for p in corners)
    ctx.set_dash([5.0, 10.0])
    ctx.move_to(*c)
    ctx.line_to(*a)
    ctx.line_to(*b)
    ctx.close_path()
    set_color(ctx, stroke)
    ctx.stroke()
    ctx.set_dash([])


def draw_frame(ctx: cairo.Context, transform: np.ndarray, stroke: int = FRAME_STROKE):
    corners = [FramePoint(0, 0), FramePoint(1, 0), FramePoint(1, 1), FramePoint(0, 1)]
    ctx.move_to(*to_pixel(transform, corners[0]))
    for p in corners[1:]:
        ctx.line_to(*to_pixel(transform, p))
    ctx.close_path()
    set_color(ctx, stroke)
    ctx.stroke()


def render_tree(
    tree: PenroseTree,
    frame: BBox,
    path: str,
    width: int = 800,
    height: int = 800,
    draw_level: int = 0,
    inner_frame: tuple[float, float] = (0.0, 1.0),
    denominator: int = DEFAULT_PRECISION,
    fill: int | None = None,
    stroke: int = STROKE,
) -> int:
    """Draw the tiles of `tree` seen through `frame` and write a PNG.

    With an inner frame other than (0, 1) the window is drawn smaller so the
    tiles crossing its edge show whole, together with the outlines of the
    next coarser level and the window outline. Returns the number of tiles
    drawn.
    """
    surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, width, height)
    ctx = cairo.Context(surface)
    ctx.set_line_width(1.0)
    transform = frame_transform(width, height, inner_frame)

    tiles = tree.tiles(draw_level)
    for tile in tiles:
        color = fill if fill is not None else FILL_X if tile.type.shape is Shape.X else FILL_Y
        draw_triangle(ctx, approx_corners(tile.tri, frame, denominator), transform, color, stroke)

    if inner_frame != (0.0, 1.0):
        for tri in tree.triangles(draw_level + 1):
            draw_triangle_dashed(ctx, approx_corners(tri, frame, denominator), transform)
        draw_frame(ctx, transform)

    surface.write_to_png(path)
    logger.info("wrote %d tiles to %s", len(tiles), path)
    return len(tiles)
