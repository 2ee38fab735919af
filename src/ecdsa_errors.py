"""
Exception types raised by the curve, point and key modules.

Errors fall into three groups. Configuration errors report an unknown
or malformed curve. Precondition errors report bad caller input, such
as mixing points from different curves. Internal invariant errors
report an arithmetic result that broke its own postcondition; retrying
will not help.
"""


class EccError(Exception):
    """Base class for every error raised by this package."""


# --- Configuration ---
class UnsupportedCurveError(EccError, ValueError):
    """The requested curve name is not in the registry."""


class InvalidCurveError(EccError, ValueError):
    """Curve parameters violate one of the curve invariants."""


class ConfigurationError(EccError, ValueError):
    """A signing profile or curve definition file is malformed."""


# --- Caller preconditions ---
class PreconditionError(EccError, ValueError):
    """The caller passed arguments that the operation does not accept."""


class CurveMismatchError(PreconditionError):
    """Two operands are defined over different curves."""


class InvalidScalarError(PreconditionError):
    """A scalar has the wrong type or lies outside its allowed range."""


class InvalidPointError(PreconditionError):
    """Coordinates do not describe a point on the given curve."""


class InvalidKeyError(PreconditionError):
    """Key material fails validation."""


# --- Internal invariants ---
class InternalInvariantError(EccError, RuntimeError):
    """An internal consistency check failed."""


class ArithmeticInvariantError(InternalInvariantError):
    """A group operation produced a point that is not on its curve."""


class SigningError(InternalInvariantError):
    """Signing could not produce a non-degenerate signature."""
