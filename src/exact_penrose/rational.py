# Rationals are plain fractions.Fraction values; this module adds the checked
# constructors, the Euclidean split and the small expression language used to
# type coordinates in.
import re
from fractions import Fraction

from exact_penrose.errors import InvalidRational, FieldDivisionByZero, ExpressionSyntaxError

ZERO = Fraction(0)
ONE = Fraction(1)


def make(n: int, d: int = 1) -> Fraction:
    if d == 0:
        raise InvalidRational(f"invalid rational {n}/{d}")
    return Fraction(n, d)


def inv(x: Fraction) -> Fraction:
    if x == 0:
        raise FieldDivisionByZero("Cannot take reciprocal of zero")
    return 1 / Fraction(x)


def compare(a: Fraction, b: Fraction) -> int:
    return (a > b) - (a < b)


def integer(x: Fraction) -> int:
    return x.numerator // x.denominator


def fractional(x: Fraction) -> Fraction:
    # always in [0, 1), also for negative x
    return x - integer(x)


def to_float(x: Fraction) -> float:
    return float(x)


def format_rational(x: Fraction) -> str:
    """Format as integer part and proper fraction, e.g. "3+1/2" or "-3-1/2".

    The result is valid input for parse_rational_expr.
    """
    x = Fraction(x)
    if x == 0:
        return "0"
    is_neg = x < 0
    x_abs = -x if is_neg else x
    i = integer(x_abs)
    f = fractional(x_abs)
    res = ""
    if i != 0:
        res += ("-" if is_neg else "") + str(i)
    if f != 0:
        res += ("-" if is_neg else "+" if res else "") + f"{f.numerator}/{f.denominator}"
    return res


_TOKEN = re.compile(r"\s*(?:(\d+(?:\.\d+)?)|([()+\-*/]))\s*")


def _tokenize(text: str) -> list[str]:
    tokens = []
    pos = 0
    while pos < len(text):
        m = _TOKEN.match(text, pos)
        if m is None or m.end() == pos:
            raise ExpressionSyntaxError(f"Unexpected character {text[pos]!r} at {pos}")
        tokens.append(m.group(1) or m.group(2))
        pos = m.end()
    tokens.append("")
    return tokens


def _decimal(literal: str) -> Fraction:
    whole, _, frac = literal.partition(".")
    return Fraction(int(whole + frac), 10 ** len(frac))


class _Parser:
    def __init__(self, text: str):
        self.tokens = _tokenize(text)
        self.i = 0

    def peek(self) -> str:
        return self.tokens[self.i]

    def next(self) -> str:
        tok = self.tokens[self.i]
        self.i += 1
        return tok

    def primary(self) -> Fraction:
        tok = self.peek()
        if tok == "(":
            self.next()
            value = self.add_sub()
            if self.peek() != ")":
                raise ExpressionSyntaxError("Expected ')'")
            self.next()
            return value
        if tok in ("+", "-"):
            self.next()
            value = self.primary()
            return -value if tok == "-" else value
        if tok and tok[0].isdigit():
            self.next()
            return _decimal(tok)
        raise ExpressionSyntaxError(f"Unexpected token: {tok!r}")

    def mul_div(self) -> Fraction:
        lhs = self.primary()
        while self.peek() in ("*", "/"):
            op = self.next()
            rhs = self.primary()
            lhs = lhs * rhs if op == "*" else lhs * inv(rhs)
        return lhs

    def add_sub(self) -> Fraction:
        lhs = self.mul_div()
        while self.peek() in ("+", "-"):
            op = self.next()
            rhs = self.mul_div()
            lhs = lhs + rhs if op == "+" else lhs - rhs
        return lhs


def parse_rational_expr(text: str) -> Fraction:
    """Evaluate `+ - * / ( )` over decimal literals exactly."""
    parser = _Parser(text)
    value = parser.add_sub()
    if parser.peek() != "":
        raise ExpressionSyntaxError("Unexpected extra tokens")
    return value
