"""
Geometric transformations and incidence operations.

Every operation is a compute() call, so each one runs as a compiled,
cached program with only the terms that survive simplification:

- transform(m, x):  sandwich m x ~m, returning the type of x
- compose(a, b):    motor product a * b (b is applied first)
- meet(a, b):       exterior product (intersection)
- join(a, b):       regressive product (span)
- project(x, onto): (onto | x) * onto
- rotate / translate: conveniences built on the above
"""

from __future__ import annotations
from typing import Optional, Sequence

from ..core.base import BaseEntity
from ..core.constants import BLADE_E123
from ..core.types import Value
from ..engine.compute import compute
from ..engine.entity import Entity
from .motors import Motor, Rotor, Translator
from .primitives import Line, Plane, Point, Vector


def _sandwich(m, x):
    return m * x * ~m


def _product(a, b):
    return a * b


def _triple_product(a, b, c):
    return a * b * c


def _meet(a, b):
    return a ^ b


def _join(a, b):
    return a & b


def _project(x, onto):
    return (onto | x) * onto


def _reverse(x):
    return ~x


_PRIMITIVE_BY_GRADE = {1: Plane, 2: Line, 3: Point}


def as_primitive(entity: Entity) -> BaseEntity:
    """
    Convert a single-grade generic entity to Plane, Line, Point or Vector.

    Anything else is returned unchanged. A grade-3 result whose e123 weight
    is zero everywhere (an ideal point) converts to a Vector; a batch mixing
    finite and ideal points stays a Point, with non-finite rows where the
    weight vanishes.
    """
    grades = {entity.algebra.grade(blade) for blade in entity.elements}
    if len(grades) == 1:
        grade = grades.pop()
        if grade == 3 and bool((entity.component(BLADE_E123) == 0).all()):
            return Vector.from_entity(entity)
        primitive = _PRIMITIVE_BY_GRADE.get(grade)
        if primitive is not None:
            return primitive.from_entity(entity)
    return entity


def transform(motor: BaseEntity, x: BaseEntity) -> BaseEntity:
    """
    Apply a motor (or rotor, translator) to an entity: M x ~M.

    Args:
        motor: Motor, Rotor or Translator; assumed normalized
        x: Entity to transform

    Returns:
        Entity of the same type as x
    """
    return type(x).from_entity(compute(_sandwich, motor, x))


def compose(*motors: BaseEntity) -> Motor:
    """
    Product of motors, left to right: compose(a, b) applies b, then a.
    """
    if not motors:
        raise ValueError("compose() needs at least one motor")
    result = motors[0]
    for motor in motors[1:]:
        result = compute(_product, result, motor)
    return Motor.from_entity(result)


def reverse(x: BaseEntity) -> BaseEntity:
    """Reversion ~x; for a normalized motor this is its inverse."""
    return type(x).from_entity(compute(_reverse, x))


def meet(a: BaseEntity, b: BaseEntity) -> BaseEntity:
    """
    Intersection a ^ b.

    plane ^ plane is a line, plane ^ line is a point.
    """
    return as_primitive(compute(_meet, a, b))


def join(a: BaseEntity, b: BaseEntity) -> BaseEntity:
    """
    Span a & b.

    point & point is a line (direction b - a), point & line is a plane.
    """
    return as_primitive(compute(_join, a, b))


def project(x: BaseEntity, onto: BaseEntity) -> BaseEntity:
    """
    Orthogonal projection of x onto a plane or line.

    Args:
        x: Entity to project (e.g. a Point)
        onto: Normalized Plane or Line

    Returns:
        Entity of the same type as x
    """
    return type(x).from_entity(compute(_project, x, onto))


def rotate(
    x: BaseEntity,
    theta: Value,
    axis: Sequence[Value],
    center: Optional[Sequence[Value]] = None,
) -> BaseEntity:
    """
    Rotate x by theta about an axis through the origin or through center.

    Args:
        x: Entity to rotate
        theta: Angle in radians
        axis: Unit axis (x, y, z)
        center: Point the axis passes through; the origin when None
    """
    rotor = Rotor(theta, *axis)
    if center is None:
        return transform(rotor, x)
    cx, cy, cz = center
    to_origin = Translator(-1.0, cx, cy, cz)
    from_origin = Translator(1.0, cx, cy, cz)
    motor = Motor.from_entity(compute(_triple_product, from_origin, rotor, to_origin))
    return transform(motor, x)


def translate(x: BaseEntity, d: Value, direction: Sequence[Value]) -> BaseEntity:
    """Translate x by d along direction."""
    return transform(Translator(d, *direction), x)

