"""Tests for the geometry primitives.

Covers:
  - Vector3 algebra (midpoint, cross/dot identities, normalize, planar angle)
  - CoordinateFrame construction, orthonormality and rigid projection
  - Degenerate input (zero vectors, colinear axes)
  - Metric midpoint helpers and the clamped arccosine
  - Image-plane vertex angle
"""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from posture_coach.exceptions import DegenerateGeometryError
from posture_coach.geometry import utils
from posture_coach.geometry.frame import CoordinateFrame
from posture_coach.geometry.image_plane import PixelPoint, vertex_angle
from posture_coach.geometry.vector import ZERO, Vector3
from posture_coach.landmarks import Landmark


# ============================================================================
# Fixtures
# ============================================================================

def _random_vectors(n: int, seed: int = 7) -> list:
    rng = np.random.RandomState(seed)
    return [Vector3.from_array(v) for v in rng.uniform(-2.0, 2.0, size=(n, 3))]


def _skewed_frame() -> CoordinateFrame:
    """Frame from two non-perpendicular axes and an off-origin anchor."""
    return CoordinateFrame(
        (Vector3(0.2, -0.1, 1.0), "z"),
        (Vector3(1.0, 0.3, 0.4), "x"),
        Vector3(0.5, -0.25, 1.5),
    )


# ============================================================================
# Test: Vector3
# ============================================================================

class TestVector3:

    def test_midpoint_of_point_with_itself(self):
        for p in _random_vectors(5):
            assert p.midpoint(p) == p

    def test_midpoint_is_symmetric(self):
        p, q = _random_vectors(2)
        assert p.midpoint(q).isclose(q.midpoint(p))

    def test_cross_is_anticommutative(self):
        a, b = _random_vectors(2)
        assert a.cross(b).isclose(-b.cross(a))

    def test_cross_is_perpendicular_to_operands(self):
        a, b = _random_vectors(2, seed=3)
        c = a.cross(b)
        assert a.dot(c) == pytest.approx(0.0, abs=1e-12)
        assert b.dot(c) == pytest.approx(0.0, abs=1e-12)

    def test_cross_follows_right_hand_rule(self):
        x, y = Vector3(1, 0, 0), Vector3(0, 1, 0)
        assert x.cross(y) == Vector3(0, 0, 1)

    def test_dot_is_symmetric(self):
        a, b = _random_vectors(2)
        assert a.dot(b) == pytest.approx(b.dot(a))

    def test_magnitude(self):
        assert Vector3(3, 4, 12).magnitude() == pytest.approx(13.0)

    def test_normalize_gives_unit_vector(self):
        for v in _random_vectors(10):
            assert v.normalize().magnitude() == pytest.approx(1.0)

    def test_normalize_zero_raises(self):
        with pytest.raises(DegenerateGeometryError):
            ZERO.normalize()

    def test_normalize_tiny_vector_raises(self):
        with pytest.raises(DegenerateGeometryError):
            Vector3(1e-12, 0.0, -1e-12).normalize()

    def test_operations_do_not_mutate(self):
        a, b = Vector3(1, 2, 3), Vector3(-4, 5, 0.5)
        a.subtract(b), a.cross(b), a.midpoint(b), a.normalize()
        assert a == Vector3(1, 2, 3)
        assert b == Vector3(-4, 5, 0.5)

    def test_planar_angle(self):
        origin = Vector3(0, 0, 0)
        assert origin.angle(Vector3(1, 1, 5)) == pytest.approx(45.0)
        assert origin.angle(Vector3(0, -2, 0)) == pytest.approx(-90.0)
        assert origin.angle(Vector3(0, -2, 0), absolute=True) == pytest.approx(90.0)

    def test_planar_distance_ignores_z(self):
        assert Vector3(0, 0, 0).planar_distance(Vector3(3, 4, 100)) == pytest.approx(5.0)

    def test_format(self):
        assert str(Vector3(1, -0.5, 0.125)) == "(1.00, -0.50, 0.12)"
        assert Vector3(1, 2, 3).format(1) == "(1.0, 2.0, 3.0)"

    def test_from_landmark(self):
        class _Lm:
            x, y, z = 0.1, 0.2, 0.3
        assert Vector3.from_landmark(_Lm()) == Vector3(0.1, 0.2, 0.3)


# ============================================================================
# Test: CoordinateFrame
# ============================================================================

class TestCoordinateFrame:

    def test_axes_are_orthonormal(self):
        frame = _skewed_frame()
        basis = frame.basis
        np.testing.assert_allclose(basis @ basis.T, np.eye(3), atol=1e-12)

    def test_third_axis_takes_unused_label(self):
        frame = CoordinateFrame(
            (Vector3(0, 0, 2), "z"), (Vector3(5, 0, 0), "x"), ZERO,
        )
        assert frame.z_axis.isclose(Vector3(0, 0, 1))
        assert frame.x_axis.isclose(Vector3(1, 0, 0))
        # z × x = y
        assert frame.y_axis.isclose(Vector3(0, 1, 0))

    def test_second_axis_keeps_its_direction(self):
        frame = CoordinateFrame(
            (Vector3(1, 0, 0), "x"), (Vector3(1, 1, 0), "y"), ZERO,
        )
        assert frame.y_axis.isclose(Vector3(0, 1, 0))
        assert frame.z_axis.isclose(Vector3(0, 0, 1))

    def test_origin_maps_to_zero(self):
        frame = _skewed_frame()
        assert frame.convert(frame.origin).isclose(ZERO, abs_tol=1e-12)

    def test_convert_preserves_distances(self):
        frame = _skewed_frame()
        points = _random_vectors(6, seed=11)
        for p in points:
            for q in points:
                local = frame.convert(p).distance(frame.convert(q))
                assert local == pytest.approx(p.distance(q), abs=1e-12)

    def test_convert_is_repeatable(self):
        frame = _skewed_frame()
        p = Vector3(0.3, 0.9, -1.2)
        assert frame.convert(p) == frame.convert(p)

    def test_convert_identity_frame(self):
        frame = CoordinateFrame(
            (Vector3(1, 0, 0), "x"), (Vector3(0, 1, 0), "y"), Vector3(1, 1, 1),
        )
        assert frame.convert(Vector3(2, 3, 4)).isclose(Vector3(1, 2, 3))

    def test_colinear_axes_raise(self):
        with pytest.raises(DegenerateGeometryError):
            CoordinateFrame(
                (Vector3(1, 2, 3), "x"), (Vector3(-2, -4, -6), "y"), ZERO,
            )

    def test_nearly_colinear_axes_raise(self):
        with pytest.raises(DegenerateGeometryError):
            CoordinateFrame(
                (Vector3(1, 0, 0), "x"), (Vector3(1, 1e-8, 0), "y"), ZERO,
            )
        frame = CoordinateFrame(
            (Vector3(1, 0, 0), "x"), (Vector3(1, 1e-4, 0), "y"), ZERO,
        )
        assert frame.y_axis.isclose(Vector3(0, 1, 0))

    def test_keep_second_axis_exact(self):
        frame = CoordinateFrame(
            (Vector3(0.3, 0, 1), "z"), (Vector3(2, 0, 0), "x"), ZERO,
            keep_second=True,
        )
        assert frame.x_axis.isclose(Vector3(1, 0, 0))
        assert frame.z_axis.isclose(Vector3(0, 0, 1))
        assert frame.y_axis.isclose(Vector3(0, 1, 0))

    def test_keep_second_preserves_handedness(self):
        axes = ((Vector3(0.3, -0.2, 1), "z"), (Vector3(1, 0.4, 0.1), "x"))
        default = CoordinateFrame(*axes, ZERO)
        kept = CoordinateFrame(*axes, ZERO, keep_second=True)
        np.testing.assert_allclose(kept.basis @ kept.basis.T, np.eye(3), atol=1e-12)
        assert np.linalg.det(kept.basis) == pytest.approx(np.linalg.det(default.basis))
        # the derived third axis is shared
        assert kept.y_axis.isclose(default.y_axis)

    def test_zero_axis_raises(self):
        with pytest.raises(DegenerateGeometryError):
            CoordinateFrame((ZERO, "x"), (Vector3(0, 1, 0), "y"), ZERO)

    def test_repeated_label_rejected(self):
        with pytest.raises(ValueError):
            CoordinateFrame((Vector3(1, 0, 0), "x"), (Vector3(0, 1, 0), "x"), ZERO)

    def test_unknown_label_rejected(self):
        with pytest.raises(ValueError):
            CoordinateFrame((Vector3(1, 0, 0), "x"), (Vector3(0, 1, 0), "w"), ZERO)

    def test_convert_many(self):
        frame = _skewed_frame()
        points = _random_vectors(3)
        assert frame.convert_many(points) == [frame.convert(p) for p in points]


# ============================================================================
# Test: Metric helpers
# ============================================================================

class TestGeometryUtils:

    def _landmarks(self) -> np.ndarray:
        lm = np.zeros((33, 3))
        lm[Landmark.LEFT_HIP] = [-0.1, 0.0, 0.2]
        lm[Landmark.RIGHT_HIP] = [0.1, 0.2, 0.0]
        lm[Landmark.LEFT_KNEE] = [0.0, 0.5, 0.1]
        lm[Landmark.RIGHT_KNEE] = [0.4, 0.5, -0.1]
        return lm

    def test_midpoint_raw(self):
        mid = utils.hips_midpoint(self._landmarks())
        assert mid.isclose(Vector3(0.0, 0.1, 0.1))

    def test_midpoint_through_frame_projects_first(self):
        lm = self._landmarks()
        frame = _skewed_frame()
        expected = frame.convert(utils.knees_midpoint(lm))
        assert utils.knees_midpoint(lm, frame).isclose(expected, abs_tol=1e-12)

    def test_bilateral_difference(self):
        diff = utils.bilateral_difference(self._landmarks(), "knees")
        assert diff.isclose(Vector3(-0.4, 0.0, 0.2))

    def test_named_midpoints_read_their_landmarks(self):
        lm = np.arange(99, dtype=float).reshape(33, 3)
        expected = (lm[Landmark.LEFT_WRIST] + lm[Landmark.RIGHT_WRIST]) / 2.0
        np.testing.assert_allclose(utils.wrists_midpoint(lm).to_array(), expected)
        expected = (lm[Landmark.LEFT_FOOT_INDEX] + lm[Landmark.RIGHT_FOOT_INDEX]) / 2.0
        np.testing.assert_allclose(utils.foot_indices_midpoint(lm).to_array(), expected)

    def test_arccosine_degrees(self):
        assert utils.arccosine(0.5) == pytest.approx(60.0)

    def test_arccosine_radians(self):
        assert utils.arccosine(0.0, degrees=False) == pytest.approx(math.pi / 2)

    def test_arccosine_clamps_overshoot(self):
        assert utils.arccosine(1.0000000002) == pytest.approx(0.0)
        assert utils.arccosine(-1.0000000002) == pytest.approx(180.0)

    def test_arccosine_absolute(self):
        assert utils.arccosine(-0.5, absolute=True) == pytest.approx(60.0)


# ============================================================================
# Test: Image-plane helpers
# ============================================================================

class TestImagePlane:

    def test_right_angle_at_vertex(self):
        angle = vertex_angle(PixelPoint(0, 0), PixelPoint(0, 100), PixelPoint(300, 100))
        assert angle == pytest.approx(90.0)

    def test_obtuse_angle_is_folded(self):
        # 135° at the vertex folds to 45° (|cos| is used)
        angle = vertex_angle(PixelPoint(-1, 1), PixelPoint(0, 0), PixelPoint(1, 0))
        assert angle == pytest.approx(45.0)

    def test_zero_length_side_raises(self):
        with pytest.raises(DegenerateGeometryError):
            vertex_angle(PixelPoint(5, 5), PixelPoint(5, 5), PixelPoint(9, 9))


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
