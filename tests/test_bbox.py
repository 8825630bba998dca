from fractions import Fraction

import pytest
from hypothesis import assume, given, strategies as st

from exact_penrose.approx import approx_bbox
from exact_penrose.bbox import (
    CachedBBox, Direction, EdgeDirections, Projected, Relation, Triangle,
    classify, project_point, relate,
)
from exact_penrose.cyclotomic import NEG_2_ZETA_IMAG, ONE, ZERO, ZETA, ZETA3
from exact_penrose.errors import GeometryInvariantViolation
from exact_penrose.golden import QSqrt5Frac
from exact_penrose.penrose import SPINE_OFFSET, SPINE_SCALE, spine_triangle


def box(left, bottom, right, top) -> CachedBBox:
    return CachedBBox(approx_bbox(left, bottom, right, top, 10**6))


def interval(lo, hi) -> Projected:
    return Projected(QSqrt5Frac(lo, 0), QSqrt5Frac(hi, 0))


@pytest.mark.parametrize("tri, bx, expected", [
    (interval(0, 10), interval(20, 30), Relation.DISJOINT),
    (interval(20, 30), interval(0, 10), Relation.DISJOINT),
    (interval(0, 10), interval(2, 3), Relation.CONTAIN),
    (interval(2, 3), interval(0, 10), Relation.BE_CONTAINED),
    (interval(0, 10), interval(5, 15), Relation.INTERSECT),
    # touching ends are not strict containment
    (interval(0, 10), interval(0, 3), Relation.INTERSECT),
    (interval(0, 10), interval(10, 15), Relation.INTERSECT),
])
def test_relate(tri, bx, expected):
    assert relate(tri, bx) is expected


def test_rotate():
    assert Direction.ZETA4.rotate(1) is Direction.ZETA0
    assert Direction.ZETA0.rotate(-2) is Direction.ZETA3
    with pytest.raises(ValueError):
        Direction.I.rotate(1)


def test_project_point():
    # points on a line through the origin project to zero on its axis
    assert project_point(ZETA, Direction.ZETA1).is_zero()
    assert project_point(ZETA3 * 5, Direction.ZETA3).is_zero()
    assert project_point(NEG_2_ZETA_IMAG, Direction.I).is_zero()
    assert project_point(ONE, Direction.I) == QSqrt5Frac(1, 0)
    assert not project_point(ONE, Direction.ZETA1).is_zero()


def test_corners():
    b = approx_bbox(-1, -2, 3, 4, 1000)
    bl, br, tr, tl = (p.to_complex() for p in b.corners())
    assert (br.real, br.imag) == (pytest.approx(3), pytest.approx(bl.imag))
    assert (tl.real, tl.imag) == (pytest.approx(-1), pytest.approx(tr.imag))
    assert tr.imag == pytest.approx(4, abs=1e-2)


@pytest.mark.skipif(not __debug__, reason="edge checks run only with assertions enabled")
def test_edge_direction_check():
    dirs = EdgeDirections(Direction.ZETA0, Direction.ZETA0, Direction.ZETA0)
    with pytest.raises(GeometryInvariantViolation):
        Triangle(ZERO, ONE, ZETA, dirs)


def test_map():
    assert spine_triangle(0).map(SPINE_SCALE, SPINE_OFFSET) == spine_triangle(1)


@pytest.mark.parametrize("tri_level, bounds, expected", [
    (2, (-5, -5, 5, 5), Relation.CONTAIN),
    (1, (-1, -1, 1, 1), Relation.CONTAIN),
    (0, (-5, -5, 5, 5), Relation.BE_CONTAINED),
    (0, (10, 10, 11, 11), Relation.DISJOINT),
    (0, (-Fraction(1, 10), -Fraction(1, 10), Fraction(1, 10), Fraction(1, 10)), Relation.INTERSECT),
    (1, (-5, -5, 5, 5), Relation.INTERSECT),
])
def test_classify_spine(tri_level, bounds, expected):
    assert classify(spine_triangle(tri_level), box(*bounds)) is expected


def test_classify_cache_invariance():
    cached = box(-1, -1, 1, 1)
    tri = spine_triangle(1)
    first = classify(tri, cached)
    assert tri.projected(Direction.I) is tri.projected(Direction.I)
    fresh = Triangle(*tri.vs, tri.dirs)
    assert classify(fresh, CachedBBox(cached.bbox)) is first
    assert classify(tri, cached) is first


def _inside_triangle(p: complex, vs: list[complex], eps: float) -> bool:
    a, b, c = vs
    def cross(u, v, w):
        return (v - u).real * (w - u).imag - (v - u).imag * (w - u).real
    s = cross(a, b, c)
    return all(cross(u, v, p) * s >= -eps for u, v in ((a, b), (b, c), (c, a)))


coords = st.integers(-20, 20).map(lambda n: Fraction(n, 10))


@given(coords, coords, coords, coords)
def test_classify_against_float_geometry(x0, y0, x1, y1):
    left, right = sorted((x0, x1))
    bottom, top = sorted((y0, y1))
    assume(left < right and bottom < top)
    cached = box(left, bottom, right, top)
    tri = spine_triangle(0)
    vs = [v.to_complex() for v in tri.vs]
    corners = [p.to_complex() for p in cached.bbox.corners()]
    eps = 1e-5

    def in_box(p: complex) -> bool:
        return (float(left) - eps <= p.real <= float(right) + eps
                and float(bottom) - eps <= p.imag <= float(top) + eps)

    res = classify(tri, cached)
    if res is Relation.CONTAIN:
        assert all(_inside_triangle(p, vs, eps) for p in corners)
    elif res is Relation.BE_CONTAINED:
        assert all(in_box(v) for v in vs)
    elif res is Relation.DISJOINT:
        strictly_in_box = [v for v in vs if float(left) + eps < v.real < float(right) - eps
                           and float(bottom) + eps < v.imag < float(top) - eps]
        assert not strictly_in_box
        assert not any(_inside_triangle(p, vs, -eps) for p in corners)
