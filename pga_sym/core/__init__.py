"""
Core module for PGA-Sym.

Contains:
- Constants: Centralized default values and blade bitmasks
- Types: Type aliases for blades, coefficients and storage
- Exceptions: Errors raised for structural misuse
- Base: Abstract base class defining the entity protocol
"""

from .constants import (
    # Numeric constants
    DEFAULT_LOG_EPS,
    DEFAULT_DTYPE,
    # Engine defaults
    DEFAULT_CACHE_SIZE,
    DEFAULT_VALIDATE_BINDINGS,
    MAX_DIMENSION,
)

from .types import (
    Blade,
    BladeList,
    Rational,
    Number,
    Value,
    Entry,
    popcount,
)

from .exceptions import (
    PGASymError,
    ExpressionError,
    AlgebraMismatchError,
    BindingOverlapError,
    MultivectorShapeError,
)

from .base import (
    BaseEntity,
    stack_values,
)

__all__ = [
    # Constants
    "DEFAULT_LOG_EPS",
    "DEFAULT_DTYPE",
    "DEFAULT_CACHE_SIZE",
    "DEFAULT_VALIDATE_BINDINGS",
    "MAX_DIMENSION",
    # Types
    "Blade",
    "BladeList",
    "Rational",
    "Number",
    "Value",
    "Entry",
    "popcount",
    # Exceptions
    "PGASymError",
    "ExpressionError",
    "AlgebraMismatchError",
    "BindingOverlapError",
    "MultivectorShapeError",
    # Base classes
    "BaseEntity",
    "stack_values",
]
