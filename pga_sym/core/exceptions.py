"""
Exceptions raised by PGA-Sym.

Only structural misuse is reported through exceptions. Numerically degenerate
inputs (normalizing a zero-length axis, exp/log of a null line or motor) are
not errors: they propagate NaN/Inf values to the caller.
"""


class PGASymError(Exception):
    """Base exception for PGA-Sym errors."""
    pass


class ExpressionError(PGASymError, ValueError):
    """An expression or program was built or used inconsistently."""
    pass


class AlgebraMismatchError(ExpressionError):
    """Operands belong to different algebras."""
    pass


class BindingOverlapError(ExpressionError):
    """Two distinct entities were bound to overlapping id ranges."""
    pass


class MultivectorShapeError(ExpressionError):
    """A multivector or entity violates its array-length or blade invariants."""
    pass
