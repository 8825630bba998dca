# Failures of the exact tiling core. None of them is transient: they all
# mean a caller mistake or a broken invariant, so they propagate.


class InvalidRational(ValueError):
    """A rational was constructed with a zero denominator."""


class FieldDivisionByZero(ZeroDivisionError):
    """Inversion of the zero element of Q, Q(sqrt 5) or Q(zeta)."""


class GeometryInvariantViolation(AssertionError):
    """A triangle edge does not lie along the direction it was tagged with."""


class UnreachableState(RuntimeError):
    """Substitution or tree surgery reached a combination outside the rules."""


class ExpressionSyntaxError(ValueError):
    """A rational expression could not be parsed."""
