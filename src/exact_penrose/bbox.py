# Bounding box on the complex plane with QZeta5 corners, and an exact
# triangle/box relation test.
#
# Tile edges only ever run along the five lines ζ^n, and box edges along the
# real and imaginary axes, so the separating axis test needs no more than
# six fixed axes. Projections onto them land in Q(sqrt(5)) and are compared
# exactly.
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable

from exact_penrose.cyclotomic import QZeta5, ONE, ZETA, ZETA2, ZETA3, ZETA4, NEG_2_ZETA_IMAG
from exact_penrose.errors import GeometryInvariantViolation
from exact_penrose.golden import QSqrt5Frac


class Direction(IntEnum):
    """Direction of a line: ZETA0 .. ZETA4 run along ζ^n, I is vertical."""
    ZETA0 = 0
    ZETA1 = 1
    ZETA2 = 2
    ZETA3 = 3
    ZETA4 = 4
    I = 5

    def rotate(self, n: int) -> "Direction":
        if self is Direction.I:
            raise ValueError("only the ζ^n directions rotate")
        return Direction((self + n) % 5)


# perpendicular axis of each direction: Re(p * axis) is constant along the line
AXES: tuple[QZeta5, ...] = tuple(
    NEG_2_ZETA_IMAG * z for z in (ONE, ZETA4, ZETA3, ZETA2, ZETA)
) + (ONE,)

# 4 Re(ζ^k * axis) as integer pairs (a, b) meaning a + b√5
_AXIS_ROWS = tuple(
    tuple(
        (int(r.a * 4), int(r.b * 4))
        for r in ((zk * axis).real() for zk in (ONE, ZETA, ZETA2, ZETA3))
    )
    for axis in AXES
)


def project_point(p: QZeta5, direction: Direction) -> QSqrt5Frac:
    """Re(p * AXES[direction])."""
    nums, d = p.integral()
    row = _AXIS_ROWS[direction]
    a = sum(n * ra for n, (ra, _) in zip(nums, row))
    b = sum(n * rb for n, (_, rb) in zip(nums, row))
    return QSqrt5Frac(a, b, 4 * d)


@dataclass(frozen=True)
class Projected:
    lo: QSqrt5Frac
    hi: QSqrt5Frac


def project(points: Iterable[QZeta5], direction: Direction) -> Projected:
    values = [project_point(p, direction) for p in points]
    return Projected(min(values), max(values))


@dataclass(frozen=True)
class BBox:
    # bottom-left and top-right corner
    bl: QZeta5
    tr: QZeta5

    def corners(self) -> tuple[QZeta5, QZeta5, QZeta5, QZeta5]:
        br = self.tr.real_part() + self.bl.imag_part()
        tl = self.bl.real_part() + self.tr.imag_part()
        return (self.bl, br, self.tr, tl)


class CachedBBox:
    """A box with its corners projected on all six axes."""

    def __init__(self, bbox: BBox):
        self.bbox = bbox
        corners = bbox.corners()
        self.projected = [project(corners, d) for d in Direction]


@dataclass(frozen=True)
class EdgeDirections:
    # line direction of the edge opposite to a, b and c
    bc: Direction
    ca: Direction
    ab: Direction

    def __iter__(self):
        return iter((self.bc, self.ca, self.ab))


class Triangle:
    def __init__(self, a: QZeta5, b: QZeta5, c: QZeta5, dirs: EdgeDirections):
        if __debug__:
            for name, edge, d in (("bc", c - b, dirs.bc), ("ca", a - c, dirs.ca), ("ab", b - a, dirs.ab)):
                if not project_point(edge, d).is_zero():
                    raise GeometryInvariantViolation(f"edge {name} = {edge} does not run along {d.name}")
        self.vs = (a, b, c)
        self.dirs = dirs
        self._projected: list[Projected | None] = [None] * len(Direction)

    @property
    def a(self) -> QZeta5:
        return self.vs[0]

    @property
    def b(self) -> QZeta5:
        return self.vs[1]

    @property
    def c(self) -> QZeta5:
        return self.vs[2]

    def projected(self, direction: Direction) -> Projected:
        p = self._projected[direction]
        if p is None:
            p = self._projected[direction] = project(self.vs, direction)
        return p

    def map(self, scale: QZeta5, offset: QZeta5) -> "Triangle":
        """Image under p -> p * scale + offset, for a positive real scale."""
        return Triangle(*(v * scale + offset for v in self.vs), self.dirs)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Triangle):
            return NotImplemented
        return self.vs == other.vs

    def __hash__(self):
        return hash(self.vs)

    def __repr__(self) -> str:
        return f"Triangle({', '.join(map(str, self.vs))})"


class Relation(Enum):
    DISJOINT = 0
    INTERSECT = 1
    # the triangle contains the box
    CONTAIN = 2
    # the triangle is contained in the box
    BE_CONTAINED = 3


def relate(tri: Projected, box: Projected) -> Relation:
    if box.hi < tri.lo or tri.hi < box.lo:
        return Relation.DISJOINT
    elif tri.lo < box.lo and box.hi < tri.hi:
        return Relation.CONTAIN
    elif box.lo < tri.lo and tri.hi < box.hi:
        return Relation.BE_CONTAINED
    else:
        return Relation.INTERSECT


def classify(tri: Triangle, box: CachedBBox) -> Relation:
    """Relation between a tile triangle and an axis-aligned box.

    The triangle's own three axes decide DISJOINT and CONTAIN. The box only
    adds its two edge normals, I and ZETA0; with those the test is a full
    separating axis test. This holds only because every tile edge runs along
    some ζ^n and every box edge along ZETA0 or I.
    """
    contain = True
    be_contained = True
    for d in tri.dirs:
        res = relate(tri.projected(d), box.projected[d])
        if res is Relation.DISJOINT:
            return Relation.DISJOINT
        contain = contain and res is Relation.CONTAIN
        if d is Direction.ZETA0:
            be_contained = be_contained and res is Relation.BE_CONTAINED
    if contain:
        return Relation.CONTAIN

    box_dirs = [Direction.I]
    if Direction.ZETA0 not in tuple(tri.dirs):
        box_dirs.append(Direction.ZETA0)
    for d in box_dirs:
        res = relate(tri.projected(d), box.projected[d])
        if res is Relation.DISJOINT:
            return Relation.DISJOINT
        be_contained = be_contained and res is Relation.BE_CONTAINED
    if be_contained:
        return Relation.BE_CONTAINED

    return Relation.INTERSECT
