"""Exceptions raised by the LQ control and filtering routines."""


class LQFilterError(Exception):
    """Base class for all errors raised by ``lqcontrol``."""
    pass


class ShapeError(LQFilterError, ValueError):
    """Raised when ``d``, ``y_m`` or ``r`` are malformed at construction."""
    pass


class DimensionError(LQFilterError, ValueError):
    """Raised when the lengths of ``a_hist``, ``y_m``, ``N`` and ``m`` disagree."""
    pass


class ArgumentError(LQFilterError, ValueError):
    """Raised for an invalid horizon or a parameter outside its domain."""
    pass


class FactorizationError(LQFilterError, ArithmeticError):
    """Raised when ``phi`` does not admit a minimum-phase spectral factor."""
    pass


class SingularSystemError(LQFilterError, ArithmeticError):
    """Raised when the Euler-equation matrix ``W`` is rank deficient."""
    pass


class NonPositiveDefiniteError(LQFilterError, ArithmeticError):
    """Raised when the covariance matrix ``V`` has no Cholesky factor."""
    pass
