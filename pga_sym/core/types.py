"""
Type aliases for PGA-Sym.

Blades are plain integers used as bitmasks over the basis vectors: bit i is
set when basis vector e_i participates in the blade. The grade of a blade is
the number of set bits.

Storage Convention:
===================

Every entity stores its numeric values in a tensor of shape (..., K):
    - Leading dimensions: batch dimensions, broadcast across the entities
      taking part in one computation
    - K: number of stored slots (one per indeterminate of the entity)

Example:
    points: Tensor[B, 3]   # B points, slots (x, y, z)
    motors: Tensor[B, 8]   # B motors, one slot per even blade
"""

from fractions import Fraction
from typing import Tuple, Union

import torch


# =============================================================================
# Basic Type Aliases
# =============================================================================

# Bitmask identifying a basis blade
Blade = int

# Ordered tuple of distinct blades
BladeList = Tuple[int, ...]

# Exact coefficient of a monomial
Rational = Fraction

# Anything that can be lifted to a rational scalar constant
Number = Union[int, float, Rational]

# Value accepted by entity constructors for a single slot
Value = Union[int, float, torch.Tensor]

# One fully expanded symbolic contribution: (blade, coefficient, source ids)
Entry = Tuple[int, Rational, Tuple[int, ...]]


def popcount(blade: Blade) -> int:
    """Number of basis vectors in a blade (its grade)."""
    return bin(blade).count("1")
