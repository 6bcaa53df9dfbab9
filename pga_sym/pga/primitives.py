"""
Geometric primitives of G(3,0,1) as entities.

Each primitive stores plain Euclidean coordinates and binds them to the
blades of its dual representation:

- Plane(d, x, y, z):   d*e0 + x*e1 + y*e2 + z*e3
  (the plane x*X + y*Y + z*Z + d = 0)
- Point(x, y, z):      x*e032 + y*e013 + z*e021 + e123
                     = -z*e012 + y*e013 - x*e023 + 1*e123
- Vector(x, y, z):     the ideal point x*e032 + y*e013 + z*e021
- Line(d, m):          mx*e01 + my*e02 + mz*e03 + dx*e23 + dy*e31 + dz*e12
                     = mx*e01 + my*e02 + dz*e12 + mz*e03 - dy*e13 + dx*e23
  Plücker coordinates: direction d, moment m = p × d for any point p on
  the line. Joining point P to point Q gives direction Q - P.

Converting back from a generic entity applies the same sign flips; a point
is first divided by its e123 weight.
"""

from __future__ import annotations
import torch

from ..algebra.symbolic import Multivector, canonicalize
from ..core.base import BaseEntity, stack_values
from ..core.constants import (
    BLADE_E0, BLADE_E1, BLADE_E2, BLADE_E3,
    BLADE_E01, BLADE_E02, BLADE_E03, BLADE_E12, BLADE_E13, BLADE_E23,
    BLADE_E012, BLADE_E013, BLADE_E023, BLADE_E123,
)
from ..core.types import Value
from .algebra import pga_algebra


class Plane(BaseEntity):
    """
    Plane x*X + y*Y + z*Z + d = 0, stored as (d, x, y, z).

    Storage slot i is the coefficient of elements[i].
    """

    algebra = pga_algebra
    elements = (BLADE_E0, BLADE_E1, BLADE_E2, BLADE_E3)
    SIZE = 4

    def __init__(self, d: Value, x: Value, y: Value, z: Value):
        super().__init__(stack_values(d, x, y, z))

    @property
    def is_blade_mapped(self) -> bool:
        return True

    def bind(self, base_id: int) -> Multivector:
        return Multivector.from_entries(
            pga_algebra,
            [(blade, 1, (base_id + i,)) for i, blade in enumerate(self.elements)],
        )

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Plane":
        return cls.from_data(entity.select(*cls.elements))

    @property
    def normal(self) -> torch.Tensor:
        return self.data[..., 1:4]

    @property
    def distance(self) -> torch.Tensor:
        return self.data[..., 0]


class Point(BaseEntity):
    """
    Euclidean point stored as (x, y, z); its weight e123 is the constant 1.

    from_entity divides by the e123 weight, so a zero weight (an ideal
    point) yields non-finite coordinates.
    """

    algebra = pga_algebra
    elements = (BLADE_E012, BLADE_E013, BLADE_E023, BLADE_E123)
    SIZE = 3

    def __init__(self, x: Value, y: Value, z: Value):
        super().__init__(stack_values(x, y, z))

    def bind(self, base_id: int) -> Multivector:
        return canonicalize(Multivector.from_entries(pga_algebra, [
            (BLADE_E012, -1, (base_id + 2,)),
            (BLADE_E013, 1, (base_id + 1,)),
            (BLADE_E023, -1, (base_id,)),
            (BLADE_E123, 1, ()),
        ]))

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Point":
        v = entity.select(*cls.elements)
        w = v[..., 3]
        x = -v[..., 2] / w
        y = v[..., 1] / w
        z = -v[..., 0] / w
        return cls.from_data(torch.stack([x, y, z], dim=-1))

    @property
    def x(self) -> torch.Tensor:
        return self.data[..., 0]

    @property
    def y(self) -> torch.Tensor:
        return self.data[..., 1]

    @property
    def z(self) -> torch.Tensor:
        return self.data[..., 2]


class Vector(BaseEntity):
    """Direction (x, y, z) as an ideal point, a point with zero weight."""

    algebra = pga_algebra
    elements = (BLADE_E012, BLADE_E013, BLADE_E023)
    SIZE = 3

    def __init__(self, x: Value, y: Value, z: Value):
        super().__init__(stack_values(x, y, z))

    def bind(self, base_id: int) -> Multivector:
        return canonicalize(Multivector.from_entries(pga_algebra, [
            (BLADE_E012, -1, (base_id + 2,)),
            (BLADE_E013, 1, (base_id + 1,)),
            (BLADE_E023, -1, (base_id,)),
        ]))

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Vector":
        v = entity.select(*cls.elements)
        return cls.from_data(torch.stack([-v[..., 2], v[..., 1], -v[..., 0]], dim=-1))


class Line(BaseEntity):
    """
    Line in Plücker coordinates, stored as (dx, dy, dz, mx, my, mz).

    Direction d and moment m satisfy d · m = 0 for a Euclidean line. A line
    with zero direction is ideal (a line at infinity).
    """

    algebra = pga_algebra
    elements = (BLADE_E01, BLADE_E02, BLADE_E12, BLADE_E03, BLADE_E13, BLADE_E23)
    SIZE = 6

    def __init__(self, dx: Value, dy: Value, dz: Value, mx: Value, my: Value, mz: Value):
        super().__init__(stack_values(dx, dy, dz, mx, my, mz))

    def bind(self, base_id: int) -> Multivector:
        return canonicalize(Multivector.from_entries(pga_algebra, [
            (BLADE_E01, 1, (base_id + 3,)),
            (BLADE_E02, 1, (base_id + 4,)),
            (BLADE_E12, 1, (base_id + 2,)),
            (BLADE_E03, 1, (base_id + 5,)),
            (BLADE_E13, -1, (base_id + 1,)),
            (BLADE_E23, 1, (base_id,)),
        ]))

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Line":
        v = entity.select(BLADE_E23, BLADE_E13, BLADE_E12, BLADE_E01, BLADE_E02, BLADE_E03)
        return cls.from_data(torch.stack(
            [v[..., 0], -v[..., 1], v[..., 2], v[..., 3], v[..., 4], v[..., 5]], dim=-1
        ))

    @property
    def direction(self) -> torch.Tensor:
        return self.data[..., 0:3]

    @property
    def moment(self) -> torch.Tensor:
        return self.data[..., 3:6]
