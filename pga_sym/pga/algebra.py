"""
The projective geometric algebra G(3,0,1).

Four basis vectors: the null vector e0 (e0² = 0, bit 0) and the Euclidean
e1, e2, e3 (e_i² = +1). Its 16 blades:

    Grade 0: 1                          (scalar)
    Grade 1: e0, e1, e2, e3             (planes)
    Grade 2: e01, e02, e12, e03, e13, e23   (lines)
    Grade 3: e012, e013, e023, e123     (points)
    Grade 4: e0123                      (pseudoscalar I)

Every blade is exposed as a constant expression, usable inside compute():

    >>> from pga_sym.pga.algebra import e, e0, e12
    >>> compute(lambda p: p ^ e0, plane)
"""

from ..algebra.expression import Basis, Expr
from ..algebra.metric import Algebra, Metric
from ..core.constants import (
    BLADE_S,
    BLADE_E0, BLADE_E1, BLADE_E2, BLADE_E3,
    BLADE_E01, BLADE_E02, BLADE_E03, BLADE_E12, BLADE_E13, BLADE_E23,
    BLADE_E012, BLADE_E013, BLADE_E023, BLADE_E123,
    BLADE_E0123,
)


pga_metric = Metric(3, 0, 1)
pga_algebra = Algebra(pga_metric)

# Accessor by bitmask: e[0b0011] is e01
e = Basis(pga_algebra)

one = e[BLADE_S]
e0 = e[BLADE_E0]
e1 = e[BLADE_E1]
e2 = e[BLADE_E2]
e3 = e[BLADE_E3]
e01 = e[BLADE_E01]
e02 = e[BLADE_E02]
e03 = e[BLADE_E03]
e12 = e[BLADE_E12]
e13 = e[BLADE_E13]
e23 = e[BLADE_E23]
e012 = e[BLADE_E012]
e013 = e[BLADE_E013]
e023 = e[BLADE_E023]
e123 = e[BLADE_E123]
e0123 = e[BLADE_E0123]

# I and the element treated as its inverse (I * ips = 0 since e0 is null)
ps: Expr = e.ps
ips: Expr = e.ips

# Even subalgebra: scalar, six bivectors, pseudoscalar
MOTOR_ELEMENTS = (
    BLADE_S,
    BLADE_E01, BLADE_E02, BLADE_E12, BLADE_E03, BLADE_E13, BLADE_E23,
    BLADE_E0123,
)

DUAL_NUMBER_ELEMENTS = (BLADE_S, BLADE_E0123)
