"""
Symbolic multivectors: sparse polynomials over blades.

A symbolic multivector is built from three flat arrays:
- Indeterminates: references to external numeric slots (by source id)
- Monomials: signed rational products of consecutive indeterminates
- Terms: the contribution of one monomial to one target blade

    M = Σ_terms  count · sign · coefficient · Π(multiplier · x[id])  ·  blade

Combining two multivectors never touches numeric values. Every public
operation returns the canonical form (see canonicalize), so the number of
surviving terms is exactly the number of multiply-accumulate steps needed to
evaluate the result.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..core.exceptions import AlgebraMismatchError, MultivectorShapeError
from ..core.types import Blade, Entry, Number, Rational
from .metric import Algebra


ONE = Fraction(1)
ZERO = Fraction(0)


def as_rational(value: Number) -> Rational:
    """
    Lift an int, float or Fraction to an exact rational.

    Floats are converted exactly (0.1 becomes the binary fraction closest
    to 0.1).
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not valid scalar constants")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        try:
            return Fraction(value)
        except (OverflowError, ValueError) as exc:
            raise ValueError(f"Cannot use non-finite constant {value!r}") from exc
    raise TypeError(f"Expected int, float or Fraction, got {type(value).__name__}")


@dataclass(frozen=True)
class Indeterminate:
    """A reference to one external numeric slot, scaled by a rational."""

    source_id: int
    multiplier: Rational = ONE


@dataclass(frozen=True)
class Monomial:
    """
    Product of `width` consecutive indeterminates starting at `start`,
    scaled by sign * coefficient. A width of zero is a constant.
    """

    sign: int
    coefficient: Rational
    width: int
    start: int


@dataclass(frozen=True)
class Term:
    """Contribution of a monomial to one blade, repeated `count` times."""

    count: int
    monomial: int
    blade: Blade


class ProductKind(Enum):
    """Which blade pairs a product keeps."""

    GEOMETRIC = "geometric"
    EXTERIOR = "exterior"
    LEFT_CONTRACTION = "left_contraction"
    SCALAR = "scalar"


class Multivector:
    """
    A symbolic element of a geometric algebra.

    Instances are immutable. The constructor is a validating builder: array
    lengths and blade ranges are checked once, here, so downstream code can
    index the arrays freely.
    """

    __slots__ = ("algebra", "indeterminates", "monomials", "terms")

    def __init__(
        self,
        algebra: Algebra,
        indeterminates: Iterable[Indeterminate] = (),
        monomials: Iterable[Monomial] = (),
        terms: Iterable[Term] = (),
    ):
        self.algebra = algebra
        self.indeterminates: Tuple[Indeterminate, ...] = tuple(indeterminates)
        self.monomials: Tuple[Monomial, ...] = tuple(monomials)
        self.terms: Tuple[Term, ...] = tuple(terms)
        self._validate()

    def _validate(self) -> None:
        n_ind = len(self.indeterminates)
        for ind in self.indeterminates:
            if ind.source_id < 0:
                raise MultivectorShapeError(f"Negative source id {ind.source_id}")
        for i, mon in enumerate(self.monomials):
            if mon.sign not in (1, -1):
                raise MultivectorShapeError(f"Monomial {i} has sign {mon.sign}, expected +1 or -1")
            if mon.coefficient < 0:
                raise MultivectorShapeError(f"Monomial {i} has negative coefficient")
            if mon.width < 0 or mon.start < 0 or mon.start + mon.width > n_ind:
                raise MultivectorShapeError(
                    f"Monomial {i} spans indeterminates [{mon.start}, {mon.start + mon.width}) "
                    f"but only {n_ind} exist"
                )
        n_mon = len(self.monomials)
        for i, term in enumerate(self.terms):
            if term.count < 1:
                raise MultivectorShapeError(f"Term {i} has count {term.count}")
            if not 0 <= term.monomial < n_mon:
                raise MultivectorShapeError(
                    f"Term {i} references monomial {term.monomial} but only {n_mon} exist"
                )
            self.algebra.check_blade(term.blade)

    # === Construction helpers ===

    @classmethod
    def zero(cls, algebra: Algebra) -> "Multivector":
        return cls(algebra)

    @classmethod
    def constant(cls, algebra: Algebra, value: Number = 1, blade: Blade = 0) -> "Multivector":
        """A multivector with no indeterminates: value * blade."""
        return cls.from_entries(algebra, [(blade, as_rational(value), ())])

    @classmethod
    def from_entries(cls, algebra: Algebra, entries: Iterable[Entry]) -> "Multivector":
        """
        Build a multivector with one monomial per entry.

        Entries are (blade, signed coefficient, source ids). Order is kept
        and nothing is merged; use canonicalize for that. Zero-valued entries
        are kept as zero-coefficient monomials.
        """
        indeterminates: List[Indeterminate] = []
        monomials: List[Monomial] = []
        terms: List[Term] = []
        for blade, value, ids in entries:
            start = len(indeterminates)
            indeterminates.extend(Indeterminate(i) for i in ids)
            sign = -1 if value < 0 else 1
            monomials.append(Monomial(sign, Fraction(abs(value)), len(ids), start))
            terms.append(Term(1, len(monomials) - 1, blade))
        return cls(algebra, indeterminates, monomials, terms)

    # === Inspection ===

    def monomial_indeterminates(self, monomial: Monomial) -> Tuple[Indeterminate, ...]:
        return self.indeterminates[monomial.start:monomial.start + monomial.width]

    def entries(self) -> List[Entry]:
        """
        Expand every term to (blade, coefficient, sorted source ids).

        Counts, signs and indeterminate multipliers are folded into the
        coefficient. Ids are sorted because numeric indeterminates commute.
        """
        out = []
        for term in self.terms:
            mon = self.monomials[term.monomial]
            value = mon.coefficient * mon.sign * term.count
            ids = []
            for ind in self.monomial_indeterminates(mon):
                value *= ind.multiplier
                ids.append(ind.source_id)
            out.append((term.blade, value, tuple(sorted(ids))))
        return out

    @property
    def term_count(self) -> int:
        return len(self.terms)

    def blades(self) -> Tuple[Blade, ...]:
        """Distinct target blades in ascending order."""
        return tuple(sorted({term.blade for term in self.terms}))

    def source_ids(self) -> Tuple[int, ...]:
        return tuple(sorted({ind.source_id for ind in self.indeterminates}))

    def max_id(self) -> int:
        """Largest referenced source id, or -1 when there is none."""
        return max((ind.source_id for ind in self.indeterminates), default=-1)

    @property
    def is_constant(self) -> bool:
        return all(mon.width == 0 for mon in self.monomials)

    def format(self) -> str:
        """Human readable polynomial, e.g. '-x0*x3 e12 + 1/2 e0123'."""
        if not self.terms:
            return "0"
        parts = []
        for blade, value, ids in self.entries():
            factors = [f"x{i}" for i in ids]
            prefix = ""
            if value == -1 and factors:
                prefix = "-"
            elif value != 1 or not factors:
                factors.insert(0, str(value))
            parts.append(f"{prefix}{'*'.join(factors)} {self.algebra.blade_name(blade)}")
        return " + ".join(parts).replace("+ -", "- ")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Multivector):
            return NotImplemented
        return (
            self.algebra == other.algebra
            and self.indeterminates == other.indeterminates
            and self.monomials == other.monomials
            and self.terms == other.terms
        )

    def __hash__(self) -> int:
        return hash((self.algebra, self.indeterminates, self.monomials, self.terms))

    def __repr__(self) -> str:
        return f"Multivector({self.format()})"


# =============================================================================
# Canonicalization
# =============================================================================

def _canonical_key(key: Tuple[Blade, Tuple[int, ...]]) -> Tuple[Blade, int, Tuple[int, ...]]:
    blade, ids = key
    return blade, len(ids), ids


def canonicalize(mv: Multivector) -> Multivector:
    """
    Reduce a multivector to its canonical term list.

    Terms are grouped by target blade; monomials over the same multiset of
    source ids are merged by summing coefficients, and exact zeros are
    dropped. The result is ordered by ascending blade, then ascending
    monomial width, then ascending id tuple, so positional lookups such as
    "the scalar part is term 0" are stable. Idempotent.
    """
    merged: Dict[Tuple[Blade, Tuple[int, ...]], Rational] = {}
    for blade, value, ids in mv.entries():
        key = (blade, ids)
        merged[key] = merged.get(key, ZERO) + value

    ordered = sorted((key for key, value in merged.items() if value != 0), key=_canonical_key)
    return Multivector.from_entries(
        mv.algebra, [(blade, merged[(blade, ids)], ids) for blade, ids in ordered]
    )


def _check_same_algebra(a: Multivector, b: Multivector) -> None:
    if a.algebra != b.algebra:
        raise AlgebraMismatchError(f"Cannot combine elements of {a.algebra} and {b.algebra}")


# =============================================================================
# Sums
# =============================================================================

def concatenate(a: Multivector, b: Multivector) -> Multivector:
    """Raw sum: b's arrays appended to a's with indices shifted. Nothing merges."""
    _check_same_algebra(a, b)
    n_ind = len(a.indeterminates)
    n_mon = len(a.monomials)
    monomials = a.monomials + tuple(replace(m, start=m.start + n_ind) for m in b.monomials)
    terms = a.terms + tuple(replace(t, monomial=t.monomial + n_mon) for t in b.terms)
    return Multivector(a.algebra, a.indeterminates + b.indeterminates, monomials, terms)


def add(a: Multivector, b: Multivector) -> Multivector:
    return canonicalize(concatenate(a, b))


def scale(a: Multivector, factor: Number) -> Multivector:
    factor = as_rational(factor)
    return canonicalize(
        Multivector.from_entries(a.algebra, [(bl, v * factor, ids) for bl, v, ids in a.entries()])
    )


def negate(a: Multivector) -> Multivector:
    return scale(a, -1)


def subtract(a: Multivector, b: Multivector) -> Multivector:
    _check_same_algebra(a, b)
    return canonicalize(concatenate(a, negate(b)))


# =============================================================================
# Products
# =============================================================================

def _keeps(kind: ProductKind, a: Blade, b: Blade, result: Blade) -> bool:
    if kind is ProductKind.GEOMETRIC:
        return True
    if kind is ProductKind.EXTERIOR:
        return a & b == 0
    if kind is ProductKind.LEFT_CONTRACTION:
        return a & b == a
    return result == 0


def raw_product(
    a: Multivector,
    b: Multivector,
    kind: ProductKind = ProductKind.GEOMETRIC,
) -> Multivector:
    """
    Pairwise product of all terms, before merging.

    For every (term_a, term_b) whose blade product is non-degenerate and
    kept by `kind`, the resulting monomial concatenates both indeterminate
    lists and multiplies coefficients, signs and the blade-product sign.
    Yields at most a.term_count * b.term_count terms.
    """
    _check_same_algebra(a, b)
    algebra = a.algebra
    indeterminates: List[Indeterminate] = []
    monomials: List[Monomial] = []
    terms: List[Term] = []

    for ta in a.terms:
        ma = a.monomials[ta.monomial]
        for tb in b.terms:
            blade, sign = algebra.product(ta.blade, tb.blade)
            if sign == 0 or not _keeps(kind, ta.blade, tb.blade, blade):
                continue
            mb = b.monomials[tb.monomial]
            start = len(indeterminates)
            indeterminates.extend(a.monomial_indeterminates(ma))
            indeterminates.extend(b.monomial_indeterminates(mb))
            monomials.append(Monomial(
                ma.sign * mb.sign * sign,
                ma.coefficient * mb.coefficient,
                ma.width + mb.width,
                start,
            ))
            terms.append(Term(ta.count * tb.count, len(monomials) - 1, blade))

    return Multivector(algebra, indeterminates, monomials, terms)


def geometric_product(a: Multivector, b: Multivector) -> Multivector:
    return canonicalize(raw_product(a, b, ProductKind.GEOMETRIC))


def exterior_product(a: Multivector, b: Multivector) -> Multivector:
    """Outer (wedge) product: the grade-raising part. Used for meets."""
    return canonicalize(raw_product(a, b, ProductKind.EXTERIOR))


def left_contraction(a: Multivector, b: Multivector) -> Multivector:
    """Left contraction a ⌋ b: grade(b) - grade(a) part of ab."""
    return canonicalize(raw_product(a, b, ProductKind.LEFT_CONTRACTION))


def scalar_product(a: Multivector, b: Multivector) -> Multivector:
    return canonicalize(raw_product(a, b, ProductKind.SCALAR))


# =============================================================================
# Blade-wise maps
# =============================================================================

def _map_blades(mv: Multivector, fn: Callable[[Blade], Optional[Tuple[Blade, int]]]) -> Multivector:
    entries = []
    for blade, value, ids in mv.entries():
        mapped = fn(blade)
        if mapped is None or mapped[1] == 0:
            continue
        entries.append((mapped[0], value * mapped[1], ids))
    return canonicalize(Multivector.from_entries(mv.algebra, entries))


def reverse(mv: Multivector) -> Multivector:
    algebra = mv.algebra
    return _map_blades(mv, lambda b: (b, algebra.reverse_sign(b)))


def involute(mv: Multivector) -> Multivector:
    algebra = mv.algebra
    return _map_blades(mv, lambda b: (b, algebra.involution_sign(b)))


def conjugate(mv: Multivector) -> Multivector:
    algebra = mv.algebra
    return _map_blades(mv, lambda b: (b, algebra.conjugate_sign(b)))


def grade_select(mv: Multivector, k: int) -> Multivector:
    algebra = mv.algebra
    return _map_blades(mv, lambda b: (b, 1) if algebra.grade(b) == k else None)


def dual(mv: Multivector) -> Multivector:
    """Poincaré dual through the right complement (metric-free)."""
    return _map_blades(mv, mv.algebra.complement)


def undual(mv: Multivector) -> Multivector:
    """Inverse of dual, through the left complement."""
    return _map_blades(mv, mv.algebra.left_complement)


def regressive_product(a: Multivector, b: Multivector) -> Multivector:
    """Regressive (vee) product a ∨ b = undual(dual(a) ∧ dual(b)). Used for joins."""
    _check_same_algebra(a, b)
    return undual(exterior_product(dual(a), dual(b)))

