"""
Generic geometric algebra and its symbolic layer.

Any metric signature (p, q, r) can be instantiated; the projective algebra in
pga_sym.pga is one instance.
"""

from .metric import (
    Metric,
    Algebra,
    reordering_sign,
)

from .symbolic import (
    Indeterminate,
    Monomial,
    Term,
    Multivector,
    ProductKind,
    as_rational,
    canonicalize,
    concatenate,
    add,
    subtract,
    negate,
    scale,
    raw_product,
    geometric_product,
    exterior_product,
    left_contraction,
    scalar_product,
    reverse,
    involute,
    conjugate,
    grade_select,
    dual,
    undual,
    regressive_product,
)

from .expression import (
    ExprOp,
    Expr,
    Basis,
    check_bindings,
    reduce,
)

__all__ = [
    # Metric
    "Metric",
    "Algebra",
    "reordering_sign",
    # Symbolic primitives
    "Indeterminate",
    "Monomial",
    "Term",
    "Multivector",
    "ProductKind",
    "as_rational",
    "canonicalize",
    "concatenate",
    "add",
    "subtract",
    "negate",
    "scale",
    "raw_product",
    "geometric_product",
    "exterior_product",
    "left_contraction",
    "scalar_product",
    "reverse",
    "involute",
    "conjugate",
    "grade_select",
    "dual",
    "undual",
    "regressive_product",
    # Expressions
    "ExprOp",
    "Expr",
    "Basis",
    "check_bindings",
    "reduce",
]
