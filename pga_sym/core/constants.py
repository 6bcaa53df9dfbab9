"""
Centralized constants for PGA-Sym.

This module defines all default values and numeric constants used throughout
the library. Using these constants ensures consistency and makes it easy to
adjust defaults globally.

Usage:
    from pga_sym.core.constants import DEFAULT_LOG_EPS

    def log(motor, eps: float = DEFAULT_LOG_EPS):
        ...
"""

# =============================================================================
# Numeric Constants
# =============================================================================

# Threshold on |<M>_0| below which the motor logarithm switches to the
# branch that avoids dividing by the scalar part
DEFAULT_LOG_EPS: float = 1e-6

# Default floating point type for entities built from Python numbers
DEFAULT_DTYPE: str = "float64"


# =============================================================================
# Engine Defaults
# =============================================================================

# Number of compiled programs retained by the engine cache
DEFAULT_CACHE_SIZE: int = 128

# Check that distinct bound entities use disjoint id ranges before reducing
DEFAULT_VALIDATE_BINDINGS: bool = True


# =============================================================================
# Algebra Limits
# =============================================================================

# Blades are stored as bitmasks; larger algebras are not useful symbolically
MAX_DIMENSION: int = 8


# =============================================================================
# Blade Bitmasks for the Projective Algebra G(3,0,1)
# =============================================================================

# e0 is the null (degenerate) basis vector and occupies bit 0
BLADE_S: int = 0b0000
BLADE_E0: int = 0b0001
BLADE_E1: int = 0b0010
BLADE_E2: int = 0b0100
BLADE_E3: int = 0b1000
BLADE_E01: int = 0b0011
BLADE_E02: int = 0b0101
BLADE_E03: int = 0b1001
BLADE_E12: int = 0b0110
BLADE_E13: int = 0b1010
BLADE_E23: int = 0b1100
BLADE_E012: int = 0b0111
BLADE_E013: int = 0b1011
BLADE_E023: int = 0b1101
BLADE_E123: int = 0b1110
BLADE_E0123: int = 0b1111
