"""
PGA (Projective Geometric Algebra) module.

Instantiates the symbolic engine for G(3,0,1): basis blades, the entity
catalog (planes, points, vectors, lines, rotors, translators, motors),
exp/log between lines and motors, and rigid transformations.
"""

from .algebra import (
    pga_metric,
    pga_algebra,
    e,
    one,
    e0, e1, e2, e3,
    e01, e02, e03, e12, e13, e23,
    e012, e013, e023, e123,
    e0123,
    ps,
    ips,
    MOTOR_ELEMENTS,
    DUAL_NUMBER_ELEMENTS,
)

from .primitives import (
    Plane,
    Point,
    Vector,
    Line,
)

from .motors import (
    Rotor,
    Translator,
    Motor,
    DualNumber,
    exp,
    log,
)

from .transforms import (
    as_primitive,
    transform,
    compose,
    reverse,
    meet,
    join,
    project,
    rotate,
    translate,
)

__all__ = [
    # Algebra
    "pga_metric",
    "pga_algebra",
    "e",
    "one",
    "e0", "e1", "e2", "e3",
    "e01", "e02", "e03", "e12", "e13", "e23",
    "e012", "e013", "e023", "e123",
    "e0123",
    "ps",
    "ips",
    "MOTOR_ELEMENTS",
    "DUAL_NUMBER_ELEMENTS",
    # Primitives
    "Plane",
    "Point",
    "Vector",
    "Line",
    # Motors
    "Rotor",
    "Translator",
    "Motor",
    "DualNumber",
    "exp",
    "log",
    # Transforms
    "as_primitive",
    "transform",
    "compose",
    "reverse",
    "meet",
    "join",
    "project",
    "rotate",
    "translate",
]
