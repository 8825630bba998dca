from fractions import Fraction

import pytest
from hypothesis import given, strategies as st

from exact_penrose.errors import ExpressionSyntaxError, FieldDivisionByZero, InvalidRational
from exact_penrose.rational import (
    compare, format_rational, fractional, integer, inv, make, parse_rational_expr,
)

fractions = st.fractions(max_denominator=10**6)
nonzero = fractions.filter(lambda x: x != 0)


def test_make_reduces():
    x = make(6, -4)
    assert (x.numerator, x.denominator) == (-3, 2)


def test_make_zero_denominator():
    with pytest.raises(InvalidRational):
        make(1, 0)


def test_inv_zero():
    with pytest.raises(FieldDivisionByZero):
        inv(Fraction(0))
    # also a ZeroDivisionError for callers that only know the builtin
    with pytest.raises(ZeroDivisionError):
        inv(Fraction(0))


@given(nonzero)
def test_inv_involution(x):
    assert inv(inv(x)) == x
    assert x * inv(x) == 1


@given(fractions, fractions)
def test_compare(a, b):
    assert compare(a, b) == -compare(b, a)
    assert (compare(a, b) == 0) == (a == b)
    assert a + b == b + a
    assert a * b == b * a


@given(fractions, fractions, fractions)
def test_associative(a, b, c):
    assert (a + b) + c == a + (b + c)
    assert (a * b) * c == a * (b * c)


@given(fractions)
def test_euclidean_split(x):
    assert integer(x) + fractional(x) == x
    assert 0 <= fractional(x) < 1


def test_integer_negative():
    assert integer(Fraction(-7, 2)) == -4
    assert fractional(Fraction(-7, 2)) == Fraction(1, 2)


@pytest.mark.parametrize("text, value", [
    ("1 + 2 * 3", 7),
    ("(1+2)*3", 9),
    ("1.5/3", Fraction(1, 2)),
    ("-0.25", Fraction(-1, 4)),
    ("2 - -1", 3),
    ("-(1/3)", Fraction(-1, 3)),
    ("10 / 4 - 1", Fraction(3, 2)),
])
def test_parse(text, value):
    assert parse_rational_expr(text) == value


@pytest.mark.parametrize("text", ["1 +", "(1", "1 2", "a", "1 + )", ""])
def test_parse_errors(text):
    with pytest.raises(ExpressionSyntaxError):
        parse_rational_expr(text)


def test_parse_division_by_zero():
    with pytest.raises(FieldDivisionByZero):
        parse_rational_expr("1 / (2 - 2)")


@pytest.mark.parametrize("value, text", [
    (Fraction(7, 2), "3+1/2"),
    (Fraction(-7, 2), "-3-1/2"),
    (Fraction(1, 2), "1/2"),
    (Fraction(-1, 2), "-1/2"),
    (Fraction(4), "4"),
    (Fraction(0), "0"),
])
def test_format(value, text):
    assert format_rational(value) == text


@given(fractions)
def test_format_parses_back(x):
    assert parse_rational_expr(format_rational(x)) == x
