"""
Tests for PGA geometric primitives: planes, points, vectors and lines.

Covers the blade layout of each primitive, conversion to and from generic
entities, and the join/meet/project incidence operations.
"""

import pytest
import torch

from pga_sym.core import MultivectorShapeError
from pga_sym.core.constants import (
    BLADE_E0, BLADE_E1, BLADE_E2, BLADE_E3,
    BLADE_E01, BLADE_E02, BLADE_E03, BLADE_E12, BLADE_E13, BLADE_E23,
    BLADE_E012, BLADE_E013, BLADE_E023, BLADE_E123,
)
from pga_sym.engine import Entity
from pga_sym.pga import (
    Line,
    Plane,
    Point,
    Vector,
    as_primitive,
    join,
    meet,
    project,
    translate,
)


def _t(*values):
    return torch.tensor(values, dtype=torch.float64)


# =============================================================================
# Planes
# =============================================================================

class TestPlane:
    """Plane x*X + y*Y + z*Z + d = 0 on blades e0..e3."""

    def test_storage(self):
        p = Plane(1.0, 2.0, 3.0, 4.0)
        assert p.elements == (BLADE_E0, BLADE_E1, BLADE_E2, BLADE_E3)
        assert torch.allclose(p.normal, _t(2.0, 3.0, 4.0))
        assert p.distance.item() == 1.0

    def test_blade_mapped_select(self):
        p = Plane(1.0, 2.0, 3.0, 4.0)
        assert p.is_blade_mapped
        assert torch.allclose(p.select(BLADE_E3, BLADE_E12), _t(4.0, 0.0))

    def test_round_trip(self):
        p = Plane(1.0, 2.0, 3.0, 4.0)
        ent = p.to_entity()
        assert ent.elements == (BLADE_E0, BLADE_E1, BLADE_E2, BLADE_E3)
        assert torch.allclose(Plane.from_entity(ent).data, p.data)

    def test_wrong_storage(self):
        with pytest.raises(MultivectorShapeError):
            Plane.from_data(torch.zeros(3))


# =============================================================================
# Points and vectors
# =============================================================================

class TestPoint:
    """Point (x, y, z) with the constant weight e123."""

    def test_blades(self):
        ent = Point(1.0, 2.0, 3.0).to_entity()
        assert ent.elements == (BLADE_E012, BLADE_E013, BLADE_E023, BLADE_E123)
        assert torch.allclose(ent.data, _t(-3.0, 2.0, -1.0, 1.0))

    def test_storage_excludes_weight(self):
        p = Point(1.0, 2.0, 3.0)
        assert p.size == 3
        assert p.ind_count == 3
        assert not p.is_blade_mapped

    def test_properties(self):
        p = Point(1.0, 2.0, 3.0)
        assert p.x.item() == 1.0
        assert p.y.item() == 2.0
        assert p.z.item() == 3.0

    def test_round_trip(self):
        p = Point(1.0, -2.0, 0.5)
        assert torch.allclose(Point.from_entity(p.to_entity()).data, p.data)

    def test_weighted_entity_is_normalized(self, pga):
        ent = Entity(pga, (BLADE_E012, BLADE_E013, BLADE_E023, BLADE_E123), [-6.0, 4.0, -2.0, 2.0])
        assert torch.allclose(Point.from_entity(ent).data, _t(1.0, 2.0, 3.0))

    def test_zero_weight_is_not_finite(self, pga):
        ent = Entity(pga, (BLADE_E012,), [1.0])
        assert not torch.isfinite(Point.from_entity(ent).data).all()

    def test_select_goes_through_binding(self):
        p = Point(1.0, 2.0, 3.0)
        assert p.component(BLADE_E123).item() == 1.0
        assert p.component(BLADE_E023).item() == -1.0

    def test_batched(self, random_points, batch_size):
        p = Point(random_points[:, 0], random_points[:, 1], random_points[:, 2])
        assert p.batch_shape == (batch_size,)
        assert torch.allclose(Point.from_entity(p.to_entity()).data, random_points)

    def test_mixed_scalar_and_tensor(self):
        p = Point(torch.tensor([1.0, 2.0], dtype=torch.float64), 0.0, 5.0)
        assert p.data.shape == (2, 3)
        assert torch.allclose(p.z, _t(5.0, 5.0))

    def test_dtype_follows_tensors(self):
        p = Point(torch.tensor(1.0, dtype=torch.float32), 2.0, 3.0)
        assert p.dtype == torch.float32

    def test_integer_tensors_use_default_dtype(self):
        p = Point(torch.tensor(1), torch.tensor(2), torch.tensor(3))
        assert p.dtype == torch.float64


class TestVector:
    """Ideal points: directions without weight."""

    def test_blades(self):
        ent = Vector(1.0, 2.0, 3.0).to_entity()
        assert ent.elements == (BLADE_E012, BLADE_E013, BLADE_E023)
        assert torch.allclose(ent.data, _t(-3.0, 2.0, -1.0))

    def test_round_trip(self):
        v = Vector(1.0, 2.0, 3.0)
        assert torch.allclose(Vector.from_entity(v.to_entity()).data, v.data)

    def test_translation_invariant(self):
        v = Vector(1.0, 2.0, 3.0)
        moved = translate(v, 5.0, (1.0, 0.0, 0.0))
        assert torch.allclose(moved.data, v.data)


# =============================================================================
# Lines
# =============================================================================

class TestLine:
    """Plücker lines: direction d and moment m = p × d."""

    def test_blades(self):
        ent = Line(1.0, 2.0, 3.0, 4.0, 5.0, 6.0).to_entity()
        assert ent.elements == (BLADE_E01, BLADE_E02, BLADE_E12, BLADE_E03, BLADE_E13, BLADE_E23)
        # mx, my, dz, mz, -dy, dx
        assert torch.allclose(ent.data, _t(4.0, 5.0, 3.0, 6.0, -2.0, 1.0))

    def test_round_trip(self):
        line = Line(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
        assert torch.allclose(Line.from_entity(line.to_entity()).data, line.data)

    def test_properties(self):
        line = Line(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
        assert torch.allclose(line.direction, _t(1.0, 2.0, 3.0))
        assert torch.allclose(line.moment, _t(4.0, 5.0, 6.0))

    def test_wrong_storage(self):
        with pytest.raises(MultivectorShapeError, match="expects storage"):
            Line.from_data(torch.zeros(2, 5))


# =============================================================================
# Join, meet and projection
# =============================================================================

class TestJoin:
    """join(a, b) = a & b, the span of its arguments."""

    def test_two_points(self):
        line = join(Point(0.0, 1.0, 0.0), Point(1.0, 1.0, 0.0))
        assert isinstance(line, Line)
        assert torch.allclose(line.direction, _t(1.0, 0.0, 0.0))
        assert torch.allclose(line.moment, _t(0.0, 0.0, -1.0))

    def test_origin_to_z(self):
        line = join(Point(0.0, 0.0, 0.0), Point(0.0, 0.0, 1.0))
        assert torch.allclose(line.data, _t(0.0, 0.0, 1.0, 0.0, 0.0, 0.0))

    def test_direction_is_difference(self, random_points):
        p = Point(random_points[:, 0], random_points[:, 1], random_points[:, 2])
        q = Point(1.0, 2.0, 3.0)
        line = join(p, q)
        assert torch.allclose(line.direction, _t(1.0, 2.0, 3.0) - random_points)
        expected_moment = torch.cross(random_points, line.direction, dim=-1)
        assert torch.allclose(line.moment, expected_moment)

    def test_point_and_line(self):
        z_axis = Line(0.0, 0.0, 1.0, 0.0, 0.0, 0.0)
        plane = join(Point(1.0, 0.0, 0.0), z_axis)
        assert isinstance(plane, Plane)
        assert torch.allclose(plane.normal.abs(), _t(0.0, 1.0, 0.0))
        assert torch.allclose(plane.distance, torch.tensor(0.0, dtype=torch.float64))


class TestMeet:
    """meet(a, b) = a ^ b, the intersection of its arguments."""

    def test_two_planes(self):
        line = meet(Plane(0.0, 1.0, 0.0, 0.0), Plane(0.0, 0.0, 1.0, 0.0))
        assert isinstance(line, Line)
        assert torch.allclose(line.data, _t(0.0, 0.0, 1.0, 0.0, 0.0, 0.0))

    def test_plane_and_line(self):
        # Plane z = 1 with the z axis
        point = meet(Plane(-1.0, 0.0, 0.0, 1.0), Line(0.0, 0.0, 1.0, 0.0, 0.0, 0.0))
        assert isinstance(point, Point)
        assert torch.allclose(point.data, _t(0.0, 0.0, 1.0))

    def test_parallel_planes_meet_at_infinity(self):
        line = meet(Plane(0.0, 0.0, 0.0, 1.0), Plane(-1.0, 0.0, 0.0, 1.0))
        assert torch.allclose(line.direction, _t(0.0, 0.0, 0.0))

    def test_ideal_point_is_vector(self):
        # Planes x = 0 and x = 1 meet at infinity; the plane y = 0 cuts that
        # line in the ideal point along z
        ideal_line = meet(Plane(0.0, 1.0, 0.0, 0.0), Plane(-1.0, 1.0, 0.0, 0.0))
        direction = meet(ideal_line, Plane(0.0, 0.0, 1.0, 0.0))
        assert isinstance(direction, Vector)
        assert torch.allclose(direction.data, _t(0.0, 0.0, -1.0))


class TestProject:
    """project(x, onto) = (onto | x) * onto."""

    def test_point_onto_plane(self):
        p = project(Point(1.0, 2.0, 5.0), Plane(0.0, 0.0, 0.0, 1.0))
        assert isinstance(p, Point)
        assert torch.allclose(p.data, _t(1.0, 2.0, 0.0))

    def test_point_onto_line(self):
        z_axis = Line(0.0, 0.0, 1.0, 0.0, 0.0, 0.0)
        p = project(Point(1.0, 0.0, 3.0), z_axis)
        assert torch.allclose(p.data, _t(0.0, 0.0, 3.0))

    def test_batched(self, random_points):
        p = Point(random_points[:, 0], random_points[:, 1], random_points[:, 2])
        projected = project(p, Plane(0.0, 0.0, 0.0, 1.0))
        assert torch.allclose(projected.data[:, :2], random_points[:, :2])
        assert torch.allclose(projected.z, torch.zeros(len(random_points), dtype=torch.float64))


class TestAsPrimitive:
    """Single-grade results map back to primitives."""

    def test_grade_one(self, pga):
        ent = Entity(pga, (BLADE_E1,), [2.0])
        assert isinstance(as_primitive(ent), Plane)

    def test_zero_weight_grade_three(self, pga):
        ent = Entity(pga, (BLADE_E012, BLADE_E123), [2.0, 0.0])
        assert isinstance(as_primitive(ent), Vector)
        ent = Entity(pga, (BLADE_E012, BLADE_E123), [2.0, 1.0])
        assert isinstance(as_primitive(ent), Point)

    def test_mixed_grades_unchanged(self, pga):
        ent = Entity(pga, (0, BLADE_E1), [1.0, 2.0])
        assert as_primitive(ent) is ent
