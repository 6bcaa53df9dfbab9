"""
Tests for symbolic multivectors and their canonical form.

Nothing here touches numbers: every check is on the structure of the
reduced term list (blade, exact coefficient, indeterminate ids).
"""

from fractions import Fraction

import pytest

from pga_sym.algebra import (
    Indeterminate,
    Monomial,
    Multivector,
    Term,
    add,
    as_rational,
    canonicalize,
    conjugate,
    dual,
    exterior_product,
    geometric_product,
    grade_select,
    involute,
    left_contraction,
    negate,
    raw_product,
    regressive_product,
    reverse,
    scalar_product,
    scale,
    subtract,
    undual,
)
from pga_sym.algebra.symbolic import ONE
from pga_sym.core import AlgebraMismatchError, MultivectorShapeError, Rational
from pga_sym.core.constants import (
    BLADE_E0, BLADE_E1, BLADE_E2, BLADE_E3,
    BLADE_E12, BLADE_E0123,
)


def vector(algebra, base_id=0):
    """Symbolic grade-1 element x0*e0 + x1*e1 + ... with ids from base_id."""
    blades = [1 << i for i in range(algebra.dimension)]
    return Multivector.from_entries(
        algebra, [(blade, 1, (base_id + i,)) for i, blade in enumerate(blades)]
    )


def blade(algebra, b, value=1):
    return Multivector.constant(algebra, value, b)


# =============================================================================
# Rational lifting
# =============================================================================

class TestAsRational:
    """Python numbers lift to exact rationals."""

    def test_int_and_fraction(self):
        assert as_rational(3) == Fraction(3)
        assert as_rational(Fraction(1, 3)) == Fraction(1, 3)

    def test_float_is_exact(self):
        assert as_rational(0.5) == Fraction(1, 2)
        assert as_rational(0.1) == Fraction(0.1)

    def test_result_type(self):
        assert isinstance(as_rational(2), Rational)
        assert isinstance(as_rational(0.25), Rational)

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            as_rational(True)

    def test_rejects_non_finite(self):
        with pytest.raises(ValueError, match="non-finite"):
            as_rational(float("nan"))
        with pytest.raises(ValueError):
            as_rational(float("inf"))

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            as_rational("1")


# =============================================================================
# Construction and validation
# =============================================================================

class TestMultivectorValidation:
    """The constructor validates array lengths and blade ranges."""

    def test_empty_is_zero(self, pga):
        mv = Multivector.zero(pga)
        assert mv.term_count == 0
        assert mv.blades() == ()
        assert mv.format() == "0"

    def test_monomial_out_of_range(self, pga):
        with pytest.raises(MultivectorShapeError, match="spans indeterminates"):
            Multivector(pga, [], [Monomial(1, ONE, 1, 0)], [])

    def test_term_monomial_out_of_range(self, pga):
        with pytest.raises(MultivectorShapeError, match="references monomial"):
            Multivector(pga, [], [], [Term(1, 0, 0)])

    def test_blade_out_of_range(self, pga):
        with pytest.raises(MultivectorShapeError, match="out of range"):
            Multivector(pga, [], [Monomial(1, ONE, 0, 0)], [Term(1, 0, 16)])

    def test_invalid_sign(self, pga):
        with pytest.raises(MultivectorShapeError, match="sign"):
            Multivector(pga, [], [Monomial(0, ONE, 0, 0)], [])

    def test_invalid_count(self, pga):
        with pytest.raises(MultivectorShapeError, match="count"):
            Multivector(pga, [], [Monomial(1, ONE, 0, 0)], [Term(0, 0, 0)])

    def test_negative_source_id(self, pga):
        with pytest.raises(MultivectorShapeError, match="Negative source id"):
            Multivector(pga, [Indeterminate(-1)], [], [])

    def test_constant(self, pga):
        mv = Multivector.constant(pga, Fraction(1, 2), BLADE_E12)
        assert mv.is_constant
        assert mv.entries() == [(BLADE_E12, Fraction(1, 2), ())]

    def test_max_id(self, pga):
        assert Multivector.zero(pga).max_id() == -1
        assert vector(pga, base_id=3).max_id() == 6
        assert vector(pga, base_id=3).source_ids() == (3, 4, 5, 6)

    def test_format(self, pga):
        mv = Multivector.from_entries(pga, [(BLADE_E12, -1, (0, 3)), (BLADE_E0123, Fraction(1, 2), ())])
        assert mv.format() == "-x0*x3 e12 + 1/2 e0123"


# =============================================================================
# Canonicalization
# =============================================================================

class TestCanonicalize:
    """Canonical form: merged, zero-free, deterministically ordered."""

    def test_merges_identical_monomials(self, pga):
        mv = Multivector.from_entries(pga, [(BLADE_E1, 1, (0,)), (BLADE_E1, 2, (0,))])
        assert canonicalize(mv).entries() == [(BLADE_E1, Fraction(3), (0,))]

    def test_drops_exact_zeros(self, pga):
        mv = Multivector.from_entries(pga, [(BLADE_E1, 1, (0,)), (BLADE_E1, -1, (0,))])
        assert canonicalize(mv).term_count == 0

    def test_indeterminates_commute(self, pga):
        mv = Multivector.from_entries(pga, [(BLADE_E12, 1, (1, 0)), (BLADE_E12, 1, (0, 1))])
        assert canonicalize(mv).entries() == [(BLADE_E12, Fraction(2), (0, 1))]

    def test_order_blade_width_ids(self, pga):
        mv = Multivector.from_entries(pga, [
            (BLADE_E2, 1, (0,)),
            (BLADE_E1, 1, (1, 2)),
            (BLADE_E1, 1, (3,)),
            (BLADE_E1, 5, ()),
        ])
        assert canonicalize(mv).entries() == [
            (BLADE_E1, Fraction(5), ()),
            (BLADE_E1, Fraction(1), (3,)),
            (BLADE_E1, Fraction(1), (1, 2)),
            (BLADE_E2, Fraction(1), (0,)),
        ]

    def test_idempotent(self, pga):
        mv = geometric_product(vector(pga), vector(pga, 4))
        assert canonicalize(mv) == mv
        assert canonicalize(canonicalize(mv)) == canonicalize(mv)

    def test_folds_counts_and_multipliers(self, pga):
        mv = Multivector(
            pga,
            [Indeterminate(0, Fraction(3))],
            [Monomial(-1, Fraction(1, 2), 1, 0)],
            [Term(2, 0, BLADE_E1)],
        )
        assert canonicalize(mv).entries() == [(BLADE_E1, Fraction(-3), (0,))]


# =============================================================================
# Sums
# =============================================================================

class TestSums:
    """Addition, scaling and subtraction."""

    def test_add_merges(self, pga):
        result = add(blade(pga, BLADE_E1), blade(pga, BLADE_E1, 2))
        assert result.entries() == [(BLADE_E1, Fraction(3), ())]

    def test_subtract_self_is_zero(self, pga):
        v = vector(pga)
        assert subtract(v, v).term_count == 0

    def test_scale_and_negate(self, pga):
        v = vector(pga)
        assert scale(v, Fraction(1, 2)).entries()[0] == (BLADE_E0, Fraction(1, 2), (0,))
        assert negate(v).entries()[1] == (BLADE_E1, Fraction(-1), (1,))

    def test_scale_by_zero(self, pga):
        assert scale(vector(pga), 0).term_count == 0

    def test_mismatched_algebras(self, pga, euclidean3):
        with pytest.raises(AlgebraMismatchError):
            add(blade(pga, BLADE_E1), blade(euclidean3, 1))
        with pytest.raises(AlgebraMismatchError):
            geometric_product(blade(pga, BLADE_E1), blade(euclidean3, 1))


# =============================================================================
# Products
# =============================================================================

class TestProducts:
    """Products prune degenerate pairs and merge what remains."""

    def test_basis_squares(self, pga):
        assert geometric_product(blade(pga, BLADE_E1), blade(pga, BLADE_E1)).entries() == [
            (0, Fraction(1), ())
        ]
        assert geometric_product(blade(pga, BLADE_E0), blade(pga, BLADE_E0)).term_count == 0

    def test_raw_product_term_bound(self, pga):
        a = vector(pga)
        b = vector(pga, 4)
        raw = raw_product(a, b)
        assert raw.term_count <= a.term_count * b.term_count
        # e0 * e0 is pruned before merging
        assert raw.term_count == 15

    def test_output_blades_bounded(self, pga):
        a = add(vector(pga), geometric_product(vector(pga, 4), vector(pga, 8)))
        product = geometric_product(a, vector(pga, 12))
        assert len(product.blades()) <= pga.blade_count

    def test_vector_square_is_scalar(self, pga):
        v = vector(pga)
        assert geometric_product(v, v).entries() == [
            (0, Fraction(1), (1, 1)),
            (0, Fraction(1), (2, 2)),
            (0, Fraction(1), (3, 3)),
        ]

    def test_wedge_with_self_cancels(self, pga):
        v = vector(pga)
        assert exterior_product(v, v).term_count == 0

    def test_wedge_of_two_vectors_is_bivector(self, pga):
        product = exterior_product(vector(pga), vector(pga, 4))
        assert all(pga.grade(b) == 2 for b in product.blades())
        assert len(product.blades()) == 6
        # two terms per bivector: x_i*y_j - x_j*y_i
        assert product.term_count == 12

    def test_left_contraction(self, pga):
        e1 = blade(pga, BLADE_E1)
        e12 = blade(pga, BLADE_E12)
        assert left_contraction(e1, e12).entries() == [(BLADE_E2, Fraction(1), ())]
        assert left_contraction(e12, e1).term_count == 0

    def test_scalar_product(self, pga):
        v = vector(pga)
        w = vector(pga, 4)
        result = scalar_product(v, w)
        assert result.blades() == (0,)
        assert [ids for _, _, ids in result.entries()] == [(1, 5), (2, 6), (3, 7)]


# =============================================================================
# Blade-wise maps
# =============================================================================

class TestUnaryOperations:
    """Reversion, involution, conjugation, grade selection and duals."""

    def test_reverse(self, pga):
        assert reverse(blade(pga, BLADE_E12)).entries() == [(BLADE_E12, Fraction(-1), ())]
        assert reverse(blade(pga, BLADE_E1)).entries() == [(BLADE_E1, Fraction(1), ())]

    def test_involute(self, pga):
        assert involute(blade(pga, BLADE_E1)).entries() == [(BLADE_E1, Fraction(-1), ())]

    def test_conjugate(self, pga):
        assert conjugate(blade(pga, BLADE_E12)).entries() == [(BLADE_E12, Fraction(-1), ())]

    def test_grade_select(self, pga):
        v = vector(pga)
        mixed = add(v, geometric_product(v, vector(pga, 4)))
        assert grade_select(mixed, 1) == v
        assert grade_select(mixed, 3).term_count == 0

    def test_undual_inverts_dual(self, pga):
        for b in range(pga.blade_count):
            mv = blade(pga, b)
            assert undual(dual(mv)) == mv

    def test_dual_of_scalar_is_pseudoscalar(self, pga):
        assert dual(blade(pga, 0)).entries() == [(BLADE_E0123, Fraction(1), ())]

    def test_regressive_with_pseudoscalar_is_identity(self, pga):
        v = vector(pga)
        assert regressive_product(blade(pga, BLADE_E0123), v) == v

    def test_regressive_of_planes_is_empty_grade(self, pga):
        # Two planes span nothing: grade 1 + 1 - 4 < 0
        assert regressive_product(vector(pga), vector(pga, 4)).term_count == 0

    def test_regressive_mismatched(self, pga, euclidean3):
        with pytest.raises(AlgebraMismatchError):
            regressive_product(blade(pga, 1), blade(euclidean3, 1))
