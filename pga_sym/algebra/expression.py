"""
Expression trees over symbolic multivectors.

An Expr is purely structural: an operator tag plus its operands. Nothing is
multiplied out until reduce() interprets the tree, bottom-up, with the
canonicalizing operations of the symbolic module.

Leaves are either bound entities (their indeterminate expression at a base
id) or constants (multivectors without indeterminates such as basis blades,
the pseudoscalar, or lifted Python numbers).

Operators:
    a + b, a - b, -a        sum, difference, negation
    a * b                   geometric product
    a ^ b                   exterior (wedge) product, meet
    a & b                   regressive (vee) product, join
    a | b                   left contraction
    ~a                      reversion
    a / 2, 0.5 * a          scaling by a rational constant
"""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from ..core.exceptions import AlgebraMismatchError, BindingOverlapError, ExpressionError
from ..core.types import Blade, Number
from . import symbolic
from .metric import Algebra
from .symbolic import Multivector, as_rational

if TYPE_CHECKING:
    from ..core.base import BaseEntity


class ExprOp(Enum):
    """Closed set of expression node kinds."""

    BIND = "bind"
    CONSTANT = "constant"
    SUM = "sum"
    DIFFERENCE = "difference"
    NEGATE = "negate"
    SCALE = "scale"
    GEOMETRIC = "geometric"
    EXTERIOR = "exterior"
    REGRESSIVE = "regressive"
    LEFT_CONTRACTION = "left_contraction"
    SCALAR_PRODUCT = "scalar_product"
    REVERSE = "reverse"
    INVOLUTE = "involute"
    CONJUGATE = "conjugate"
    DUAL = "dual"
    UNDUAL = "undual"
    GRADE = "grade"


_BINARY = {
    ExprOp.SUM: symbolic.add,
    ExprOp.DIFFERENCE: symbolic.subtract,
    ExprOp.GEOMETRIC: symbolic.geometric_product,
    ExprOp.EXTERIOR: symbolic.exterior_product,
    ExprOp.REGRESSIVE: symbolic.regressive_product,
    ExprOp.LEFT_CONTRACTION: symbolic.left_contraction,
    ExprOp.SCALAR_PRODUCT: symbolic.scalar_product,
}

_UNARY = {
    ExprOp.NEGATE: symbolic.negate,
    ExprOp.REVERSE: symbolic.reverse,
    ExprOp.INVOLUTE: symbolic.involute,
    ExprOp.CONJUGATE: symbolic.conjugate,
    ExprOp.DUAL: symbolic.dual,
    ExprOp.UNDUAL: symbolic.undual,
}

Operand = Union["Expr", Number]


class Expr:
    """
    An immutable expression node.

    Attributes:
        op: Operator tag
        operands: Child expressions (empty for leaves)
        algebra: Algebra shared by every node in the tree
        payload: Leaf multivector, scale factor or grade, depending on op
        entity: Bound entity (BIND leaves only)
        base_id: First indeterminate id of the bound entity (BIND leaves only)
    """

    __slots__ = ("op", "operands", "algebra", "payload", "entity", "base_id", "_reduced")

    def __init__(
        self,
        op: ExprOp,
        operands: Tuple["Expr", ...],
        algebra: Algebra,
        payload: Any = None,
        entity: Optional["BaseEntity"] = None,
        base_id: Optional[int] = None,
    ):
        self.op = op
        self.operands = operands
        self.algebra = algebra
        self.payload = payload
        self.entity = entity
        self.base_id = base_id
        self._reduced: Optional[Multivector] = None

    # === Leaves ===

    @classmethod
    def bind(cls, entity: "BaseEntity", base_id: int) -> "Expr":
        """Leaf for an entity's indeterminate expression starting at base_id."""
        if base_id < 0:
            raise ExpressionError(f"base_id must be non-negative, got {base_id}")
        return cls(ExprOp.BIND, (), entity.algebra, entity.bind(base_id), entity, base_id)

    @classmethod
    def constant(cls, mv: Multivector) -> "Expr":
        if not mv.is_constant:
            raise ExpressionError("Constant leaves cannot reference indeterminates")
        return cls(ExprOp.CONSTANT, (), mv.algebra, mv)

    @classmethod
    def scalar(cls, algebra: Algebra, value: Number) -> "Expr":
        return cls.constant(Multivector.constant(algebra, value))

    @classmethod
    def blade(cls, algebra: Algebra, blade: Blade, value: Number = 1) -> "Expr":
        algebra.check_blade(blade)
        return cls.constant(Multivector.constant(algebra, value, blade))

    # === Node construction ===

    def _lift(self, other: Operand) -> "Expr":
        if isinstance(other, Expr):
            if other.algebra != self.algebra:
                raise AlgebraMismatchError(
                    f"Cannot combine expressions over {self.algebra} and {other.algebra}"
                )
            return other
        return Expr.scalar(self.algebra, as_rational(other))

    def _binary(self, op: ExprOp, other: Operand) -> "Expr":
        return Expr(op, (self, self._lift(other)), self.algebra)

    def _rbinary(self, op: ExprOp, other: Operand) -> "Expr":
        return Expr(op, (self._lift(other), self), self.algebra)

    def _unary(self, op: ExprOp, payload: Any = None) -> "Expr":
        return Expr(op, (self,), self.algebra, payload)

    def __add__(self, other: Operand) -> "Expr":
        return self._binary(ExprOp.SUM, other)

    def __radd__(self, other: Operand) -> "Expr":
        return self._rbinary(ExprOp.SUM, other)

    def __sub__(self, other: Operand) -> "Expr":
        return self._binary(ExprOp.DIFFERENCE, other)

    def __rsub__(self, other: Operand) -> "Expr":
        return self._rbinary(ExprOp.DIFFERENCE, other)

    def __mul__(self, other: Operand) -> "Expr":
        if isinstance(other, Expr):
            return self._binary(ExprOp.GEOMETRIC, other)
        return self._unary(ExprOp.SCALE, as_rational(other))

    def __rmul__(self, other: Operand) -> "Expr":
        return self._unary(ExprOp.SCALE, as_rational(other))

    def __truediv__(self, other: Number) -> "Expr":
        if isinstance(other, Expr):
            return NotImplemented
        divisor = as_rational(other)
        if divisor == 0:
            raise ZeroDivisionError("Cannot divide an expression by zero")
        return self._unary(ExprOp.SCALE, 1 / divisor)

    def __xor__(self, other: Operand) -> "Expr":
        return self._binary(ExprOp.EXTERIOR, other)

    def __rxor__(self, other: Operand) -> "Expr":
        return self._rbinary(ExprOp.EXTERIOR, other)

    def __and__(self, other: Operand) -> "Expr":
        return self._binary(ExprOp.REGRESSIVE, other)

    def __rand__(self, other: Operand) -> "Expr":
        return self._rbinary(ExprOp.REGRESSIVE, other)

    def __or__(self, other: Operand) -> "Expr":
        return self._binary(ExprOp.LEFT_CONTRACTION, other)

    def __ror__(self, other: Operand) -> "Expr":
        return self._rbinary(ExprOp.LEFT_CONTRACTION, other)

    def __neg__(self) -> "Expr":
        return self._unary(ExprOp.NEGATE)

    def __pos__(self) -> "Expr":
        return self

    def __invert__(self) -> "Expr":
        return self._unary(ExprOp.REVERSE)

    def reverse(self) -> "Expr":
        return self._unary(ExprOp.REVERSE)

    def involute(self) -> "Expr":
        return self._unary(ExprOp.INVOLUTE)

    def conjugate(self) -> "Expr":
        return self._unary(ExprOp.CONJUGATE)

    def dual(self) -> "Expr":
        return self._unary(ExprOp.DUAL)

    def undual(self) -> "Expr":
        return self._unary(ExprOp.UNDUAL)

    def grade(self, k: int) -> "Expr":
        if not 0 <= k <= self.algebra.dimension:
            raise ExpressionError(f"Grade {k} out of range for {self.algebra}")
        return self._unary(ExprOp.GRADE, k)

    def scalar_product(self, other: Operand) -> "Expr":
        return self._binary(ExprOp.SCALAR_PRODUCT, other)

    # === Reduction ===

    def reduce(self) -> Multivector:
        return reduce(self)

    @property
    def shape(self) -> Tuple[Blade, ...]:
        """Blades of the reduced result, ascending."""
        return reduce(self).blades()

    def leaves(self) -> List["Expr"]:
        """BIND leaves in depth-first order, each node visited once."""
        seen = set()
        out = []
        stack = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            if node.op is ExprOp.BIND:
                out.append(node)
            stack.extend(reversed(node.operands))
        return out

    def __repr__(self) -> str:
        if self.op is ExprOp.BIND:
            return f"Expr(bind {type(self.entity).__name__} @ {self.base_id})"
        if self.op is ExprOp.CONSTANT:
            return f"Expr({self.payload.format()})"
        inner = ", ".join(repr(o) for o in self.operands)
        return f"Expr({self.op.value}: {inner})"


def check_bindings(expr: Expr) -> None:
    """
    Raise BindingOverlapError if distinct entities share indeterminate ids.

    The same entity bound twice at the same base id is allowed; it simply
    refers to the same storage.
    """
    ranges: Dict[Tuple[int, int], Tuple[int, int]] = {}
    for leaf in expr.leaves():
        key = (id(leaf.entity), leaf.base_id)
        ranges[key] = (leaf.base_id, leaf.base_id + leaf.entity.ind_count)

    spans = sorted(ranges.items(), key=lambda item: item[1])
    for (key_a, (lo_a, hi_a)), (key_b, (lo_b, hi_b)) in zip(spans, spans[1:]):
        if lo_b < hi_a:
            raise BindingOverlapError(
                f"Id ranges [{lo_a}, {hi_a}) and [{lo_b}, {hi_b}) of distinct bindings overlap"
            )


def reduce(expr: Expr, validate: bool = True) -> Multivector:
    """
    Reduce an expression tree to one canonical multivector.

    The result depends only on the tree structure and indeterminate ids,
    never on numeric values. Reduced sub-trees are memoised on their nodes,
    so shared sub-expressions are reduced once.

    Args:
        expr: Root of the tree
        validate: Check that distinct bindings use disjoint id ranges

    Raises:
        BindingOverlapError: If validate is set and two bindings overlap
    """
    if validate:
        check_bindings(expr)
    return _reduce(expr)


def _reduce(node: Expr) -> Multivector:
    if node._reduced is not None:
        return node._reduced

    op = node.op
    if op in (ExprOp.BIND, ExprOp.CONSTANT):
        result = symbolic.canonicalize(node.payload)
    elif op in _BINARY:
        lhs, rhs = node.operands
        result = _BINARY[op](_reduce(lhs), _reduce(rhs))
    elif op in _UNARY:
        result = _UNARY[op](_reduce(node.operands[0]))
    elif op is ExprOp.SCALE:
        result = symbolic.scale(_reduce(node.operands[0]), node.payload)
    elif op is ExprOp.GRADE:
        result = symbolic.grade_select(_reduce(node.operands[0]), node.payload)
    else:
        raise ExpressionError(f"Unknown expression operator {op}")

    node._reduced = result
    return result


class Basis:
    """
    Basis-blade accessor for one algebra.

    Example:
        >>> e = Basis(Algebra(Metric(3, 0, 1)))
        >>> e[0b0011]          # e01
        >>> e.ps, e.ips        # pseudoscalar and its inverse
    """

    def __init__(self, algebra: Algebra):
        self.algebra = algebra

    def __getitem__(self, blade: Blade) -> Expr:
        return Expr.blade(self.algebra, blade)

    def __len__(self) -> int:
        return self.algebra.blade_count

    @property
    def ps(self) -> Expr:
        return Expr.blade(self.algebra, self.algebra.pseudoscalar)

    @property
    def ips(self) -> Expr:
        blade, sign = self.algebra.pseudoscalar_inverse
        return Expr.blade(self.algebra, blade, sign)

    def __repr__(self) -> str:
        return f"Basis({self.algebra})"
