# Cyclotomic field Q(zeta), zeta = exp(2πi/5).
# Elements are c0 + c1 ζ + c2 ζ^2 + c3 ζ^3; ζ^4 is eliminated with
# 1 + ζ + ζ^2 + ζ^3 + ζ^4 = 0. The real subfield is Q(sqrt(5)).
import cmath
from dataclasses import dataclass
from fractions import Fraction
from math import lcm

from exact_penrose.errors import FieldDivisionByZero
from exact_penrose.golden import QSqrt5


@dataclass(frozen=True)
class QZeta5:
    c0: Fraction = Fraction(0)
    c1: Fraction = Fraction(0)
    c2: Fraction = Fraction(0)
    c3: Fraction = Fraction(0)

    def __post_init__(self):
        object.__setattr__(self, "c0", Fraction(self.c0))
        object.__setattr__(self, "c1", Fraction(self.c1))
        object.__setattr__(self, "c2", Fraction(self.c2))
        object.__setattr__(self, "c3", Fraction(self.c3))

    @staticmethod
    def normalize(c0, c1, c2, c3, c4) -> "QZeta5":
        """Build c0 + c1 ζ + c2 ζ^2 + c3 ζ^3 + c4 ζ^4."""
        return QZeta5(c0 - c4, c1 - c4, c2 - c4, c3 - c4)

    @property
    def coeffs(self) -> tuple[Fraction, Fraction, Fraction, Fraction]:
        return (self.c0, self.c1, self.c2, self.c3)

    def __str__(self) -> str:
        return f"({self.c0} + {self.c1}ζ + {self.c2}ζ² + {self.c3}ζ³)"

    def is_zero(self) -> bool:
        return self.c0 == 0 and self.c1 == 0 and self.c2 == 0 and self.c3 == 0

    def add(self, other: "QZeta5") -> "QZeta5":
        return QZeta5(self.c0 + other.c0, self.c1 + other.c1, self.c2 + other.c2, self.c3 + other.c3)

    def neg(self) -> "QZeta5":
        return QZeta5(-self.c0, -self.c1, -self.c2, -self.c3)

    def sub(self, other: "QZeta5") -> "QZeta5":
        return QZeta5(self.c0 - other.c0, self.c1 - other.c1, self.c2 - other.c2, self.c3 - other.c3)

    def mul(self, other: "QZeta5") -> "QZeta5":
        a0, a1, a2, a3 = self.coeffs
        b0, b1, b2, b3 = other.coeffs
        # ζ^5 = 1 and ζ^6 = ζ wrap around, the ζ^4 column is folded back
        return QZeta5.normalize(
            a0 * b0 + a2 * b3 + a3 * b2,
            a0 * b1 + a1 * b0 + a3 * b3,
            a0 * b2 + a1 * b1 + a2 * b0,
            a0 * b3 + a1 * b2 + a2 * b1 + a3 * b0,
            a1 * b3 + a2 * b2 + a3 * b1,
        )

    def mul_coeff(self, k) -> "QZeta5":
        return QZeta5(self.c0 * k, self.c1 * k, self.c2 * k, self.c3 * k)

    def galois(self, k: int) -> "QZeta5":
        """Image under the automorphism ζ -> ζ^k, k in 1..4."""
        if k % 5 == 0:
            raise ValueError("ζ -> 1 is not an automorphism")
        c = [Fraction(0)] * 5
        for j, cj in enumerate(self.coeffs):
            c[j * k % 5] += cj
        return QZeta5.normalize(*c)

    def conj(self) -> "QZeta5":
        # complex conjugation is ζ -> ζ^4
        return self.galois(4)

    def norm(self) -> Fraction:
        # the product is fixed by every automorphism, so only c0 is left
        return self.mul(self._other_conjugates()).c0

    def _other_conjugates(self) -> "QZeta5":
        return self.galois(2).mul(self.galois(3)).mul(self.galois(4))

    def inv(self) -> "QZeta5":
        if self.is_zero():
            raise FieldDivisionByZero("Cannot take reciprocal of zero")
        others = self._other_conjugates()
        norm = self.mul(others).c0
        return others.mul_coeff(1 / norm)

    def div(self, other: "QZeta5") -> "QZeta5":
        return self.mul(other.inv())

    def real(self) -> QSqrt5:
        # Re ζ = Re ζ^4 = (√5 - 1) / 4, Re ζ^2 = Re ζ^3 = (-√5 - 1) / 4
        c23 = self.c2 + self.c3
        return QSqrt5(
            self.c0 - self.c1 / 4 - c23 / 4,
            self.c1 / 4 - c23 / 4,
        )

    def real_part(self) -> "QZeta5":
        """Re(z) as an element of this field."""
        return self.add(self.conj()).mul_coeff(Fraction(1, 2))

    def imag_part(self) -> "QZeta5":
        """i Im(z) as an element of this field."""
        return self.sub(self.conj()).mul_coeff(Fraction(1, 2))

    def integral(self) -> tuple[tuple[int, int, int, int], int]:
        """Integer coefficients over their least common denominator."""
        d = lcm(self.c0.denominator, self.c1.denominator, self.c2.denominator, self.c3.denominator)
        return tuple(c.numerator * (d // c.denominator) for c in self.coeffs), d

    def __add__(self, other: "QZeta5") -> "QZeta5":
        return self.add(other)

    def __sub__(self, other: "QZeta5") -> "QZeta5":
        return self.sub(other)

    def __mul__(self, other) -> "QZeta5":
        if isinstance(other, QZeta5):
            return self.mul(other)
        return self.mul_coeff(other)

    __rmul__ = __mul__

    def __neg__(self) -> "QZeta5":
        return self.neg()

    def __truediv__(self, other) -> "QZeta5":
        if isinstance(other, QZeta5):
            return self.div(other)
        return self.mul_coeff(1 / Fraction(other))

    def to_complex(self) -> complex:
        return sum(float(c) * _ZETA_POWERS[k] for k, c in enumerate(self.coeffs))


_ZETA_POWERS = [cmath.exp(2j * cmath.pi * k / 5) for k in range(4)]

ZERO = QZeta5()
ONE = QZeta5(1)
ZETA = QZeta5(0, 1)
ZETA2 = QZeta5(0, 0, 1)
ZETA3 = QZeta5(0, 0, 0, 1)
ZETA4 = QZeta5.normalize(0, 0, 0, 0, 1)

# -2 Im(ζ) i = ζ^4 - ζ = -sqrt((5 + √5) / 2) i ≈ -1.902 i
# multiplying by it turns an imaginary part into a real one
NEG_2_ZETA_IMAG = QZeta5.normalize(0, -1, 0, 0, 1)
