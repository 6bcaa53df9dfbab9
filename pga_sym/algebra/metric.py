"""
Metric signatures and the blade tables derived from them.

A metric (p, q, r) describes n = p + q + r basis vectors:
- r null vectors (e_i^2 = 0), occupying the lowest bits
- p positive vectors (e_i^2 = +1)
- q negative vectors (e_i^2 = -1), occupying the highest bits

Placing the null vectors first makes the projective origin vector e0 bit 0,
so the G(3,0,1) blades read naturally: e01 = 0b0011, e123 = 0b1110, etc.

A blade is a bitmask over the basis vectors. The product of two blades is
the blade a ^ b, scaled by:
1. The parity of the transpositions needed to bring the concatenated basis
   vectors into ascending order
2. The square of every basis vector shared by both blades (0 for a null
   vector, in which case the product vanishes)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from ..core.constants import MAX_DIMENSION
from ..core.exceptions import MultivectorShapeError
from ..core.types import Blade, popcount


@dataclass(frozen=True)
class Metric:
    """
    Signature of an algebra's basis vectors.

    Attributes:
        p: Number of basis vectors squaring to +1
        q: Number of basis vectors squaring to -1
        r: Number of basis vectors squaring to 0
    """

    p: int
    q: int = 0
    r: int = 0

    def __post_init__(self):
        for name in ("p", "q", "r"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if self.dimension > MAX_DIMENSION:
            raise ValueError(
                f"p + q + r must be <= {MAX_DIMENSION}, got {self.dimension}"
            )

    @property
    def dimension(self) -> int:
        """Number of basis vectors n."""
        return self.p + self.q + self.r

    def square(self, i: int) -> int:
        """Square of basis vector e_i: 0, +1 or -1."""
        if not 0 <= i < self.dimension:
            raise ValueError(f"Basis vector {i} out of range for {self}")
        if i < self.r:
            return 0
        if i < self.r + self.p:
            return 1
        return -1

    @property
    def null_mask(self) -> Blade:
        return (1 << self.r) - 1

    @property
    def negative_mask(self) -> Blade:
        return ((1 << self.q) - 1) << (self.r + self.p)


def reordering_sign(a: Blade, b: Blade) -> int:
    """
    Sign of the permutation that sorts the basis vectors of a followed by b.

    Each basis vector of b must move past every basis vector of a with a
    higher index.
    """
    a >>= 1
    swaps = 0
    while a:
        swaps += popcount(a & b)
        a >>= 1
    return -1 if swaps & 1 else 1


class Algebra:
    """
    A geometric algebra fixed by its metric.

    All tables are derived once at construction: grades, the blade product
    table (result blade and signed multiplier for every pair), reversion,
    involution and complement signs.
    """

    def __init__(self, metric: Metric):
        self.metric = metric
        self.dimension = metric.dimension
        self.blade_count = 1 << self.dimension
        self.pseudoscalar: Blade = self.blade_count - 1

        self.grades: Tuple[int, ...] = tuple(
            popcount(blade) for blade in range(self.blade_count)
        )
        self._products = self._build_product_table()

        # Treat null vectors as squaring to +1 so a degenerate algebra still
        # has an element whose product with the pseudoscalar is one in the
        # non-degenerate completion
        sign = reordering_sign(self.pseudoscalar, self.pseudoscalar)
        if popcount(metric.negative_mask) & 1:
            sign = -sign
        self.pseudoscalar_inverse: Tuple[Blade, int] = (self.pseudoscalar, sign)

    def _build_product_table(self) -> Tuple[Tuple[Tuple[Blade, int], ...], ...]:
        null_mask = self.metric.null_mask
        negative_mask = self.metric.negative_mask
        table = []
        for a in range(self.blade_count):
            row = []
            for b in range(self.blade_count):
                shared = a & b
                if shared & null_mask:
                    row.append((a ^ b, 0))
                    continue
                sign = reordering_sign(a, b)
                if popcount(shared & negative_mask) & 1:
                    sign = -sign
                row.append((a ^ b, sign))
            table.append(tuple(row))
        return tuple(table)

    # === Blade queries ===

    def check_blade(self, blade: Blade) -> None:
        """Raise MultivectorShapeError if blade does not belong to this algebra."""
        if not isinstance(blade, int) or not 0 <= blade < self.blade_count:
            raise MultivectorShapeError(
                f"Blade {blade!r} out of range for algebra with {self.blade_count} blades"
            )

    def grade(self, blade: Blade) -> int:
        return self.grades[blade]

    def product(self, a: Blade, b: Blade) -> Tuple[Blade, int]:
        """
        Geometric product of two basis blades.

        Returns:
            (blade, sign) where sign is +1, -1, or 0 when a shared basis
            vector is null and the product vanishes
        """
        return self._products[a][b]

    def reverse_sign(self, blade: Blade) -> int:
        """Reversion sign (-1)^(k(k-1)/2) for a grade-k blade."""
        k = self.grades[blade]
        return -1 if (k * (k - 1) // 2) & 1 else 1

    def involution_sign(self, blade: Blade) -> int:
        """Grade involution sign: odd grades are negated."""
        return -1 if self.grades[blade] & 1 else 1

    def conjugate_sign(self, blade: Blade) -> int:
        """Clifford conjugation: reversion combined with grade involution."""
        return self.reverse_sign(blade) * self.involution_sign(blade)

    def complement(self, blade: Blade) -> Tuple[Blade, int]:
        """
        Right complement: the signed blade C with blade ∧ C = I.

        Metric-free, so it is well defined in degenerate algebras and is used
        as the Poincaré dual.
        """
        other = self.pseudoscalar ^ blade
        return other, reordering_sign(blade, other)

    def left_complement(self, blade: Blade) -> Tuple[Blade, int]:
        """Left complement: the signed blade C with C ∧ blade = I."""
        other = self.pseudoscalar ^ blade
        return other, reordering_sign(other, blade)

    def blade_name(self, blade: Blade) -> str:
        """Readable name such as 'e013'; the scalar blade is '1'."""
        if blade == 0:
            return "1"
        # Null vectors count from e0 so that G(3,0,1) reads e0, e1, e2, e3
        offset = 0 if self.metric.r else 1
        digits = "".join(
            str(i + offset) for i in range(self.dimension) if blade & (1 << i)
        )
        return f"e{digits}"

    # === Identity ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Algebra):
            return NotImplemented
        return self.metric == other.metric

    def __hash__(self) -> int:
        return hash(self.metric)

    def __repr__(self) -> str:
        m = self.metric
        return f"Algebra(Metric(p={m.p}, q={m.q}, r={m.r}))"
