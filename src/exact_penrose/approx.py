# Approximate conversion between rationals/floats and the extension fields.
#
# Quantities like sqrt(r), r sqrt(5) and r / Im(ζ) have no rational value, so
# each is written as the root of an integer function of the scaled numerator
# n (x = n / d) and isolated between two adjacent integers by `solve`.
# The rounding direction is always explicit, which is what lets approx_bbox
# grow a requested window outward instead of cutting into it.
import logging
from dataclasses import dataclass
from fractions import Fraction
from math import isqrt
from typing import Callable

from exact_penrose.bbox import BBox
from exact_penrose.cyclotomic import QZeta5, NEG_2_ZETA_IMAG
from exact_penrose.golden import QSqrt5

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 10**9


def solve(f: Callable[[int], int], x0: int, x1: int, floor: bool = True) -> int:
    """Integer root isolation by false position with a bisection fallback.

    f(x0) and f(x1) must have opposite signs (or one of them be zero). An
    exact integer root is returned as is; otherwise the floor (or ceiling)
    of the root is returned.
    """
    y0 = f(x0)
    if y0 == 0:
        return x0
    y1 = f(x1)
    if y1 == 0:
        return x1
    if (y0 > 0) == (y1 > 0):
        raise ValueError(f"no sign change between {x0} and {x1}")
    if x0 > x1:
        x0, y0, x1, y1 = x1, y1, x0, y0

    kept = 0  # > 0: left end kept in a row, < 0: right end
    while x1 - x0 > 1:
        if abs(kept) >= 2:
            x2 = (x0 + x1) // 2
        else:
            x2 = (x0 * y1 - x1 * y0) // (y1 - y0)
            # a secant probe landing on an end would stall
            if x2 <= x0:
                x2 = x0 + 1
            elif x2 >= x1:
                x2 = x1 - 1
        y2 = f(x2)
        if y2 == 0:
            return x2
        if (y2 > 0) == (y0 > 0):
            x0, y0 = x2, y2
            kept = min(kept, 0) - 1
        else:
            x1, y1 = x2, y2
            kept = max(kept, 0) + 1
    return x0 if floor else x1


def _bracket(f: Callable[[int], int], x: int) -> tuple[int, int]:
    """Widen [x, x + 1] until the increasing function f changes sign on it."""
    lo, hi = x, x + 1
    step = 1
    while f(lo) > 0:
        lo, hi = lo - step, lo
        step *= 2
    while f(hi) < 0:
        lo, hi = hi, hi + step
        step *= 2
    return lo, hi


def _check_denominator(denominator: int):
    if denominator < 1:
        raise ValueError(f"precision denominator must be positive, got {denominator}")


def _output_denominator(value: Fraction, denominator: int) -> int:
    d = value.denominator
    while d < denominator:
        d *= 2
    return d


def approx_sqrt(value, floor: bool, denominator: int) -> Fraction:
    """sqrt(value) rounded to a multiple of 1 / denominator."""
    _check_denominator(denominator)
    value = Fraction(value)
    if value < 0:
        raise ValueError(f"square root of negative value {value}")

    # x^2 - r = 0, x = n/d, r = a/b
    # f(n) = b n^2 - a d^2
    a, b = value.numerator, value.denominator
    ad2 = a * denominator * denominator

    def f(n: int) -> int:
        return b * n * n - ad2

    n = solve(f, *_bracket(f, isqrt(ad2 // b)), floor)
    return Fraction(n, denominator)


def approx_mul_sqrt5(value, floor: bool, denominator: int) -> Fraction:
    """value * sqrt(5) with a denominator of at least `denominator`."""
    _check_denominator(denominator)
    value = Fraction(value)
    if value < 0:
        return -approx_mul_sqrt5(-value, not floor, denominator)

    # sqrt(5) r - x = 0  =>  5 r^2 - x^2 = 0, x = n/d, r = a/b
    # f(n) = b^2 n^2 - 5 a^2 d^2
    d = _output_denominator(value, denominator)
    a, b = value.numerator, value.denominator
    c = 5 * a * a * d * d
    bb = b * b

    def f(n: int) -> int:
        return bb * n * n - c

    n = solve(f, *_bracket(f, isqrt(c // bb)), floor)
    return Fraction(n, d)


def approx_div_zeta_imag_sq(value, floor: bool, denominator: int) -> Fraction:
    """value / Im(ζ)^2 with a denominator of at least `denominator`."""
    _check_denominator(denominator)
    value = Fraction(value)
    if value < 0:
        return -approx_div_zeta_imag_sq(-value, not floor, denominator)

    # Im(ζ)^2 = (5 + sqrt(5)) / 8, so Im(ζ)^2 x = r reads sqrt(5) x = 8 r - 5 x,
    # i.e. (5x - 8r)^2 - 5x^2 = 0 on the branch where 8r - 5x >= 0.
    # Comparing u|u| with v|v| instead of u^2 with v^2 keeps f increasing:
    # f(n) = 5 b^2 n^2 - w |w|,  w = 8 a d - 5 b n
    d = _output_denominator(value, denominator)
    a, b = value.numerator, value.denominator
    _8ad = 8 * a * d
    _5bb = 5 * b * b

    def f(n: int) -> int:
        w = _8ad - 5 * b * n
        return _5bb * n * n - w * abs(w)

    # r / Im(ζ)^2 = r (2 - 2 sqrt(5) / 5)
    seed = 2 * a * d // b - isqrt(20 * a * a * d * d // (25 * b * b))
    n = solve(f, *_bracket(f, seed), floor)
    return Fraction(n, d)


def approx_div_zeta_imag(value, floor: bool, denominator: int) -> Fraction:
    """value / Im(ζ) rounded to a multiple of 1 / denominator."""
    _check_denominator(denominator)
    value = Fraction(value)
    if value < 0:
        return -approx_div_zeta_imag(-value, not floor, denominator)
    # both steps round the same way, so the bound direction survives
    value_sq = approx_div_zeta_imag_sq(value * value, floor, denominator * denominator)
    return approx_sqrt(value_sq, floor, denominator)


def approx_golden(value: QSqrt5, floor: bool, denominator: int) -> Fraction:
    return value.a + approx_mul_sqrt5(value.b, floor, denominator)


def approx_bbox(left, bottom, right, top, denominator: int = DEFAULT_PRECISION) -> BBox:
    """Smallest representable box covering [left, right] x [bottom, top].

    The x bounds are exact. A y coordinate y is stored as a multiple of
    Im(ζ), so bottom is rounded down and top up. The window must have a
    positive width and height.
    """
    left, bottom, right, top = (Fraction(v) for v in (left, bottom, right, top))
    _check_denominator(denominator)
    if left >= right or bottom >= top:
        raise ValueError(f"empty or inverted bounds {left}, {bottom}, {right}, {top}")
    b = approx_div_zeta_imag(bottom, True, denominator)
    t = approx_div_zeta_imag(top, False, denominator)
    # y i = (y / Im ζ) (ζ - ζ^4) / 2
    return BBox(
        QZeta5.normalize(left, b / 2, 0, 0, -b / 2),
        QZeta5.normalize(right, t / 2, 0, 0, -t / 2),
    )


@dataclass(frozen=True)
class FramePoint:
    re: float
    im: float


def approx_point(value: QZeta5, frame: BBox, denominator: int = DEFAULT_PRECISION) -> FramePoint:
    """Position of `value` inside `frame`, (0, 0) bottom-left, (1, 1) top-right."""
    extent = frame.tr - frame.bl
    value_ = value - frame.bl

    # multiplying by -2 Im(ζ) i maps Im onto Re, up to the factor 2 Im(ζ)
    width = extent.real()
    height = (extent * NEG_2_ZETA_IMAG).real()
    if width.sign() <= 0 or height.sign() <= 0:
        raise ValueError(f"degenerate frame {frame}")

    re = approx_golden(value_.real() / width, True, denominator)
    im = approx_golden((value_ * NEG_2_ZETA_IMAG).real() / height, True, denominator)

    return FramePoint(float(re), float(im))
