"""
Motor operations for Projective Geometric Algebra (PGA).

A Motor represents a rigid body motion (rotation + translation). Motors are
elements of the even subalgebra:

    M = s + e01 + e02 + e12 + e03 + e13 + e23 + e0123

Special cases store their parameters directly instead of blade values:

- Rotor(theta, x, y, z): rotation by theta about the axis (x, y, z) through
  the origin, stored as (cos θ/2, sin θ/2, x, y, z) and bound as

      R = cos(θ/2) + sin(θ/2) * (x*e32 + y*e13 + z*e21)

- Translator(d, x, y, z): translation by d along (x, y, z), bound as

      T = 1 - d/2 * (x*e01 + y*e02 + z*e03)

Both are applied through the sandwich product X' = M X ~M. A rotor turns
counter-clockwise when the axis points towards the viewer.

exp and log map between lines (the Lie algebra) and motors (the group).
Lines square to dual numbers s + p*I, whose square roots and inverses have
closed forms, so both maps need only two symbolic evaluations.
"""

from __future__ import annotations
from fractions import Fraction
from typing import Optional, Tuple

import torch

from ..algebra.symbolic import Multivector, canonicalize
from ..core.base import BaseEntity, default_dtype, stack_values
from ..core.constants import (
    BLADE_S,
    BLADE_E01, BLADE_E02, BLADE_E03, BLADE_E12, BLADE_E13, BLADE_E23,
    BLADE_E0123,
)
from ..core.types import Value
from ..engine.compute import compute
from ..engine.entity import Entity
from ..utils.config import get_default_config
from .algebra import DUAL_NUMBER_ELEMENTS, MOTOR_ELEMENTS, pga_algebra
from .primitives import Line


MINUS_HALF = Fraction(-1, 2)


class Rotor(BaseEntity):
    """
    Rotation about an axis through the origin.

    Storage: (cos θ/2, sin θ/2, x, y, z). The half-angle sine and cosine are
    computed once at construction, not per evaluation. The axis is used as
    given; call normalize() for a non-unit axis.
    """

    algebra = pga_algebra
    elements = (BLADE_S, BLADE_E12, BLADE_E13, BLADE_E23)
    SIZE = 5

    def __init__(self, theta: Value, x: Value, y: Value, z: Value):
        theta, x, y, z = stack_values(theta, x, y, z).unbind(-1)
        half = 0.5 * theta
        super().__init__(torch.stack([torch.cos(half), torch.sin(half), x, y, z], dim=-1))

    def bind(self, base_id: int) -> Multivector:
        c, s, x, y, z = range(base_id, base_id + 5)
        return canonicalize(Multivector.from_entries(pga_algebra, [
            (BLADE_S, 1, (c,)),
            (BLADE_E12, -1, (s, z)),
            (BLADE_E13, 1, (s, y)),
            (BLADE_E23, -1, (s, x)),
        ]))

    def normalize(self) -> "Rotor":
        """
        Scale the axis to unit length, in place.

        A zero axis produces NaN; it is not checked.
        """
        axis = self.data[..., 2:5]
        self.data[..., 2:5] = axis / torch.linalg.norm(axis, dim=-1, keepdim=True)
        return self

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Rotor":
        """
        Recover (cos θ/2, sin θ/2, axis) from scalar and e12/e13/e23 values.

        sin θ/2 is taken non-negative; a zero bivector part keeps a zero axis.
        """
        v = entity.select(BLADE_S, BLADE_E12, BLADE_E13, BLADE_E23)
        scaled_axis = torch.stack([-v[..., 3], v[..., 2], -v[..., 1]], dim=-1)
        sin_half = torch.linalg.norm(scaled_axis, dim=-1)
        axis = torch.where(
            sin_half[..., None] > 0, scaled_axis / sin_half[..., None], scaled_axis
        )
        return cls.from_data(torch.cat([v[..., 0:1], sin_half[..., None], axis], dim=-1))

    @property
    def angle(self) -> torch.Tensor:
        return 2.0 * torch.atan2(self.data[..., 1], self.data[..., 0])

    @property
    def axis(self) -> torch.Tensor:
        return self.data[..., 2:5]


class Translator(BaseEntity):
    """
    Translation by a distance along a direction.

    Storage: (d, x, y, z). The displacement is d * (x, y, z); the direction
    is used as given unless normalize() is called.
    """

    algebra = pga_algebra
    elements = (BLADE_S, BLADE_E01, BLADE_E02, BLADE_E03)
    SIZE = 4

    def __init__(self, d: Value, x: Value, y: Value, z: Value):
        super().__init__(stack_values(d, x, y, z))

    def bind(self, base_id: int) -> Multivector:
        d, x, y, z = range(base_id, base_id + 4)
        return canonicalize(Multivector.from_entries(pga_algebra, [
            (BLADE_S, 1, ()),
            (BLADE_E01, MINUS_HALF, (d, x)),
            (BLADE_E02, MINUS_HALF, (d, y)),
            (BLADE_E03, MINUS_HALF, (d, z)),
        ]))

    def normalize(self) -> "Translator":
        """Scale the direction to unit length, in place. A zero direction produces NaN."""
        direction = self.data[..., 1:4]
        self.data[..., 1:4] = direction / torch.linalg.norm(direction, dim=-1, keepdim=True)
        return self

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Translator":
        """Recover the displacement from -2 * (e01, e02, e03) / scalar."""
        v = entity.select(BLADE_S, BLADE_E01, BLADE_E02, BLADE_E03)
        displacement = -2.0 * v[..., 1:4] / v[..., 0:1]
        d = torch.linalg.norm(displacement, dim=-1)
        direction = torch.where(d[..., None] > 0, displacement / d[..., None], displacement)
        return cls.from_data(torch.cat([d[..., None], direction], dim=-1))

    @property
    def displacement(self) -> torch.Tensor:
        return self.data[..., 0:1] * self.data[..., 1:4]


class Motor(Entity):
    """
    General rigid motion on the even blades
    (1, e01, e02, e12, e03, e13, e23, e0123).

    Args:
        data: Tensor of shape (..., 8) in MOTOR_ELEMENTS order
    """

    algebra = pga_algebra
    elements = MOTOR_ELEMENTS

    def __init__(self, data: torch.Tensor):
        super().__init__(pga_algebra, MOTOR_ELEMENTS, data)

    @classmethod
    def identity(
        cls,
        batch_shape: Tuple[int, ...] = (),
        dtype: Optional[torch.dtype] = None,
        device: Optional[torch.device] = None,
    ) -> "Motor":
        data = torch.zeros(*batch_shape, 8, dtype=dtype or default_dtype(), device=device)
        data[..., 0] = 1.0
        return cls(data)

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Motor":
        return cls(entity.select(*MOTOR_ELEMENTS))

    @property
    def scalar(self) -> torch.Tensor:
        return self.data[..., 0]

    @property
    def pseudoscalar(self) -> torch.Tensor:
        return self.data[..., 7]


class DualNumber(Entity):
    """a + b*I, with I the pseudoscalar (I² = 0)."""

    algebra = pga_algebra
    elements = DUAL_NUMBER_ELEMENTS

    def __init__(self, real: Value, ideal: Value):
        super().__init__(pga_algebra, DUAL_NUMBER_ELEMENTS, stack_values(real, ideal))

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "DualNumber":
        return cls.from_data(entity.select(*DUAL_NUMBER_ELEMENTS))

    @property
    def real(self) -> torch.Tensor:
        return self.data[..., 0]

    @property
    def ideal(self) -> torch.Tensor:
        return self.data[..., 1]


# =============================================================================
# exp / log
# =============================================================================

def _square(x):
    return x * x


def _exp_combine(real, ideal, inv_norm, line):
    return real + ideal * inv_norm * line


def _log_combine(scale, inv_norm, line):
    return scale * inv_norm * line


def _square_parts(line: Line) -> Tuple[torch.Tensor, torch.Tensor]:
    sq = compute(_square, line)
    return sq.component(BLADE_S), sq.component(BLADE_E0123)


def exp(line: BaseEntity) -> Motor:
    """
    Exponential map from a line (bivector) to a motor.

    With L² = s + p*I, the norm |L| = u + v*I has u = sqrt(-s) and
    v = -p / (2u), and

        exp(L) = cos(u) - v*sin(u)*I + (sin(u) + v*cos(u)*I) * L / |L|

    exp(-θ/2 * L) for a unit line L through the origin is the rotor turning
    by θ about L. A line with zero direction (s = 0) divides by zero and
    yields non-finite values.

    Args:
        line: Line, or any entity whose bivector part is used

    Returns:
        Motor
    """
    if not isinstance(line, Line):
        line = Line.from_entity(line)

    s, p = _square_parts(line)
    u = torch.sqrt(-s)
    v = -p / (2.0 * u)

    real = DualNumber(torch.cos(u), -v * torch.sin(u))
    ideal = DualNumber(torch.sin(u), v * torch.cos(u))
    inv_norm = DualNumber(1.0 / u, -v / (u * u))
    return Motor.from_entity(compute(_exp_combine, real, ideal, inv_norm, line))


def log(motor: BaseEntity, eps: Optional[float] = None) -> Line:
    """
    Logarithm of a normalized motor, the inverse of exp.

    Splits M into its scalar s1, pseudoscalar p1 and bivector part L. With
    L² = a + b*I, the norm of L is s2 + p2*I where s2 = sqrt(-a) and
    p2 = -b / (2*s2). The angle is u = atan2(s2, s1) in both branches;
    taking it from atan2(-p1, p2) instead returns -L whenever v < 0. The
    ideal part v is p2 / s1, or -p1 / s2 when |s1| < eps (half-turns).

    Args:
        motor: Motor, or any entity with even-grade blades
        eps: Threshold on |s1|; the configured log_epsilon when None

    Returns:
        Line L with exp(L) = M
    """
    if eps is None:
        eps = get_default_config().log_epsilon
    if not isinstance(motor, Motor):
        motor = Motor.from_entity(motor)

    s1 = motor.scalar
    p1 = motor.pseudoscalar
    line = Line.from_entity(motor)

    a, b = _square_parts(line)
    s2 = torch.sqrt(-a)
    p2 = -b / (2.0 * s2)

    near_zero = torch.abs(s1) < eps
    u = torch.atan2(s2, s1)
    v = torch.where(near_zero, -p1 / s2, p2 / s1)

    scale = DualNumber(u, v)
    inv_norm = DualNumber(1.0 / s2, -p2 / (s2 * s2))
    return Line.from_entity(compute(_log_combine, scale, inv_norm, line))
