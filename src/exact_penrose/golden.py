# Real quadratic field Q(sqrt(5)).
# Its order can be decided exactly, which is what makes the bounding box
# tests in bbox.py precise.
from dataclasses import dataclass
from fractions import Fraction
from math import sqrt, lcm
from numbers import Rational

from exact_penrose.errors import FieldDivisionByZero


def sign_sqrt5(a, b) -> int:
    """Sign of a + b√5 for rational a, b."""
    if a >= 0 and b >= 0:
        return 1 if a > 0 or b > 0 else 0
    if a <= 0 and b <= 0:
        return -1
    # components disagree: the larger magnitude of a and b√5 wins
    if a * a > 5 * b * b:
        return 1 if a > 0 else -1
    return 1 if b > 0 else -1


@dataclass(frozen=True)
class QSqrt5:
    a: Fraction = Fraction(0)
    b: Fraction = Fraction(0)

    def __post_init__(self):
        object.__setattr__(self, "a", Fraction(self.a))
        object.__setattr__(self, "b", Fraction(self.b))

    def __str__(self) -> str:
        if self.b == 0:
            return f"{self.a}"
        elif self.a == 0:
            return f"{self.b}√5"
        else:
            return f"({self.a} + {self.b}√5)"

    @staticmethod
    def coerce(value: "QSqrt5 | int | Rational") -> "QSqrt5":
        return value if isinstance(value, QSqrt5) else QSqrt5(value)

    def is_zero(self) -> bool:
        return self.a == 0 and self.b == 0

    def add(self, other: "QSqrt5") -> "QSqrt5":
        return QSqrt5(self.a + other.a, self.b + other.b)

    def mul(self, other: "QSqrt5") -> "QSqrt5":
        # (a + b√5)(a' + b'√5) = (aa' + 5bb') + (ab' + ba')√5
        return QSqrt5(
            self.a * other.a + self.b * other.b * 5,
            self.a * other.b + self.b * other.a,
        )

    def neg(self) -> "QSqrt5":
        return QSqrt5(-self.a, -self.b)

    def conjugate(self) -> "QSqrt5":
        return QSqrt5(self.a, -self.b)

    def norm(self) -> Fraction:
        return self.a * self.a - self.b * self.b * 5

    def reciprocal(self) -> "QSqrt5":
        # 1 / (a + b√5) = (a - b√5) / (a^2 - 5b^2)
        if self.is_zero():
            raise FieldDivisionByZero("Cannot take reciprocal of zero")
        denom = self.norm()
        return QSqrt5(self.a / denom, -self.b / denom)

    inv = reciprocal

    def sub(self, other: "QSqrt5") -> "QSqrt5":
        return self.add(other.neg())

    def div(self, other: "QSqrt5") -> "QSqrt5":
        return self.mul(other.reciprocal())

    def sign(self) -> int:
        return sign_sqrt5(self.a, self.b)

    def compare(self, other: "QSqrt5") -> int:
        return self.sub(other).sign()

    def __eq__(self, other) -> bool:
        if not isinstance(other, (QSqrt5, Rational)):
            return NotImplemented
        other = QSqrt5.coerce(other)
        return self.a == other.a and self.b == other.b

    def __hash__(self):
        # rational values hash like the Fraction they equal
        return hash(self.a) if self.b == 0 else hash((self.a, self.b))

    def __add__(self, other) -> "QSqrt5":
        return self.add(QSqrt5.coerce(other))

    __radd__ = __add__

    def __sub__(self, other) -> "QSqrt5":
        return self.sub(QSqrt5.coerce(other))

    def __rsub__(self, other) -> "QSqrt5":
        return QSqrt5.coerce(other).sub(self)

    def __mul__(self, other) -> "QSqrt5":
        return self.mul(QSqrt5.coerce(other))

    __rmul__ = __mul__

    def __neg__(self) -> "QSqrt5":
        return self.neg()

    def __truediv__(self, other) -> "QSqrt5":
        return self.div(QSqrt5.coerce(other))

    def __rtruediv__(self, other) -> "QSqrt5":
        return QSqrt5.coerce(other).div(self)

    def __lt__(self, other) -> bool:
        return self.compare(QSqrt5.coerce(other)) < 0

    def __le__(self, other) -> bool:
        return self.compare(QSqrt5.coerce(other)) <= 0

    def __gt__(self, other) -> bool:
        return self.compare(QSqrt5.coerce(other)) > 0

    def __ge__(self, other) -> bool:
        return self.compare(QSqrt5.coerce(other)) >= 0

    def to_float(self) -> float:
        return float(self.a) + float(self.b) * sqrt(5)


SQRT5 = QSqrt5(0, 1)
# (1 + √5) / 2
PHI = QSqrt5(Fraction(1, 2), Fraction(1, 2))


@dataclass(frozen=True)
class QSqrt5Frac:
    """(a + b√5) / d with integer a, b and d > 0.

    Nothing is reduced, so products and comparisons stay in integer
    arithmetic. Used for the cached projections of bbox.py.
    """
    a: int
    b: int
    d: int = 1

    def __post_init__(self):
        if self.d == 0:
            raise FieldDivisionByZero("zero denominator")
        if self.d < 0:
            object.__setattr__(self, "a", -self.a)
            object.__setattr__(self, "b", -self.b)
            object.__setattr__(self, "d", -self.d)

    @staticmethod
    def from_golden(value: QSqrt5) -> "QSqrt5Frac":
        d = lcm(value.a.denominator, value.b.denominator)
        return QSqrt5Frac(
            value.a.numerator * (d // value.a.denominator),
            value.b.numerator * (d // value.b.denominator),
            d,
        )

    def to_golden(self) -> QSqrt5:
        return QSqrt5(Fraction(self.a, self.d), Fraction(self.b, self.d))

    def is_zero(self) -> bool:
        return self.a == 0 and self.b == 0

    def add(self, other: "QSqrt5Frac") -> "QSqrt5Frac":
        return QSqrt5Frac(
            self.a * other.d + other.a * self.d,
            self.b * other.d + other.b * self.d,
            self.d * other.d,
        )

    def neg(self) -> "QSqrt5Frac":
        return QSqrt5Frac(-self.a, -self.b, self.d)

    def mul(self, other: "QSqrt5Frac") -> "QSqrt5Frac":
        return QSqrt5Frac(
            self.a * other.a + self.b * other.b * 5,
            self.a * other.b + self.b * other.a,
            self.d * other.d,
        )

    def inv(self) -> "QSqrt5Frac":
        if self.is_zero():
            raise FieldDivisionByZero("Cannot take reciprocal of zero")
        # d / (a + b√5) = d (a - b√5) / (a^2 - 5b^2), sign moved into the numerator
        norm = self.a * self.a - self.b * self.b * 5
        return QSqrt5Frac(self.a * self.d, -self.b * self.d, norm)

    def sign(self) -> int:
        return sign_sqrt5(self.a, self.b)

    def compare(self, other: "QSqrt5Frac") -> int:
        return sign_sqrt5(self.a * other.d - other.a * self.d, self.b * other.d - other.b * self.d)

    def __eq__(self, other) -> bool:
        if not isinstance(other, QSqrt5Frac):
            return NotImplemented
        return self.compare(other) == 0

    def __hash__(self):
        return hash(self.to_golden())

    def __lt__(self, other: "QSqrt5Frac") -> bool:
        return self.compare(other) < 0

    def __le__(self, other: "QSqrt5Frac") -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: "QSqrt5Frac") -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: "QSqrt5Frac") -> bool:
        return self.compare(other) >= 0

    def to_float(self) -> float:
        return self.to_golden().to_float()

    def __str__(self) -> str:
        return f"({self.a} + {self.b}√5)/{self.d}"
