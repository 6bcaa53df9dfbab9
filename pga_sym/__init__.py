"""
PGA-Sym: symbolic geometric algebra with minimal-operation evaluation

A PyTorch library that compiles geometric computations (rotation,
translation, projection, meet/join of points, lines and planes) into exact
formulas before any number is touched. Expressions over entity bindings are
reduced to a canonical sum of rational-scaled monomials, so evaluation
performs exactly one multiply-accumulate per surviving term.

Key Features:
- Any metric signature (p, q, r), with the projective algebra G(3,0,1) built in
- Exact rational coefficients and term merging
- Batched, broadcasting evaluation on torch tensors
- Cached compiled programs
- Closed-form exp/log between lines and motors

API Design:
- All entities inherit from BaseEntity and store a (..., K) tensor
- compute(fn, *entities) returns a generic Entity on the result's blades
- Specialised types convert back with Type.from_entity(entity)

Example:
    >>> import math
    >>> from pga_sym import compute
    >>> from pga_sym.pga import Point, Rotor, transform
    >>> p = transform(Rotor(math.pi / 2, 0, 0, 1), Point(1, 0, 0))
    >>> p.data  # tensor([0., 1., 0.])
"""

__version__ = "0.1.0"
__author__ = "PGA-Sym Contributors"

from . import core
from . import algebra
from . import utils
from . import engine
from . import pga

from .engine import compute, Engine, Entity, Scalar
from .algebra import Metric, Algebra, Expr

__all__ = [
    "core",
    "algebra",
    "utils",
    "engine",
    "pga",
    "compute",
    "Engine",
    "Entity",
    "Scalar",
    "Metric",
    "Algebra",
    "Expr",
]
