"""Unit tests for host-side vector, point and color algebra.

Tests cover:
- Vector arithmetic, dot and cross products
- Normalization (including the zero vector)
- Affine point rules
- Tolerance-based equality
- Color clamping, packing and Schur product
"""

import math

import numpy as np
import pytest

from src.whitted.core.vector import (
    BLACK,
    EPSILON,
    WHITE,
    Color,
    Point3,
    Vector3,
    pack_rgb,
)


class TestVector3:
    """Tests for Vector3 arithmetic."""

    def test_add_sub(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(4.0, 5.0, 6.0)
        assert a + b == Vector3(5.0, 7.0, 9.0)
        assert b - a == Vector3(3.0, 3.0, 3.0)

    def test_scalar_multiply_and_divide(self):
        v = Vector3(1.0, -2.0, 3.0)
        assert v * 2.0 == Vector3(2.0, -4.0, 6.0)
        assert 2.0 * v == Vector3(2.0, -4.0, 6.0)
        assert v / 2.0 == Vector3(0.5, -1.0, 1.5)
        assert -v == Vector3(-1.0, 2.0, -3.0)

    def test_dot(self):
        assert Vector3(1.0, 2.0, 3.0).dot(Vector3(4.0, -5.0, 6.0)) == pytest.approx(12.0)

    def test_cross_right_handed(self):
        x = Vector3(1.0, 0.0, 0.0)
        y = Vector3(0.0, 1.0, 0.0)
        assert x.cross(y) == Vector3(0.0, 0.0, 1.0)
        assert y.cross(x) == Vector3(0.0, 0.0, -1.0)

    @pytest.mark.parametrize(
        "v, w",
        [
            ((1.0, 2.0, 3.0), (-4.0, 0.5, 2.0)),
            ((0.3, -7.0, 1.1), (2.0, 2.0, -9.0)),
            ((10.0, 0.0, 0.0), (0.0, 0.0, 3.0)),
        ],
    )
    def test_cross_is_perpendicular(self, v, w):
        """cross(v, w) is perpendicular to both v and w."""
        v, w = Vector3(*v), Vector3(*w)
        c = v.cross(w)
        assert abs(c.dot(v)) < 1e-9
        assert abs(c.dot(w)) < 1e-9

    def test_schur(self):
        assert Vector3(1.0, 2.0, 3.0).schur(Vector3(2.0, 3.0, 4.0)) == Vector3(2.0, 6.0, 12.0)

    def test_length(self):
        assert Vector3(3.0, 4.0, 0.0).length() == pytest.approx(5.0)
        assert Vector3(3.0, 4.0, 0.0).length_squared() == pytest.approx(25.0)

    @pytest.mark.parametrize(
        "components",
        [(3.0, 4.0, 0.0), (1e-5, 2e-5, -3e-5), (-100.0, 250.0, 7.0)],
    )
    def test_normalize_unit_length(self, components):
        assert abs(Vector3(*components).normalize().length() - 1.0) < 1e-9

    def test_normalize_zero_vector(self):
        """Normalizing the zero vector returns the zero vector, not NaN."""
        zero = Vector3(0.0, 0.0, 0.0)
        result = zero.normalize()
        assert result == zero
        assert not any(math.isnan(c) for c in result)

    def test_tolerance_equality(self):
        a = Vector3(1.0, 2.0, 3.0)
        assert a == Vector3(1.0 + EPSILON / 2, 2.0, 3.0)
        assert a != Vector3(1.0 + 1e-6, 2.0, 3.0)

    def test_vector_not_equal_to_point(self):
        assert Vector3(1.0, 2.0, 3.0) != Point3(1.0, 2.0, 3.0)


class TestPoint3:
    """Tests for affine point operations."""

    def test_point_minus_point_is_vector(self):
        d = Point3(3.0, 2.0, 1.0) - Point3(1.0, 1.0, 1.0)
        assert isinstance(d, Vector3)
        assert d == Vector3(2.0, 1.0, 0.0)

    def test_point_plus_vector_is_point(self):
        p = Point3(1.0, 1.0, 1.0) + Vector3(1.0, 2.0, 3.0)
        assert isinstance(p, Point3)
        assert p == Point3(2.0, 3.0, 4.0)

    def test_point_minus_vector_is_point(self):
        p = Point3(1.0, 1.0, 1.0) - Vector3(1.0, 2.0, 3.0)
        assert isinstance(p, Point3)
        assert p == Point3(0.0, -1.0, -2.0)

    def test_adding_points_is_rejected(self):
        with pytest.raises(TypeError):
            Point3(1.0, 0.0, 0.0) + Point3(0.0, 1.0, 0.0)

    def test_distance(self):
        assert Point3(0.0, 0.0, 10.0).distance_to(Point3(0.0, 0.0, 5.0)) == pytest.approx(5.0)


class TestColor:
    """Tests for Color operations."""

    def test_add_and_scale(self):
        c = Color(0.1, 0.2, 0.3) + Color(0.1, 0.1, 0.1)
        assert c == Color(0.2, 0.3, 0.4)
        assert c * 2.0 == Color(0.4, 0.6, 0.8)
        assert 0.5 * c == Color(0.1, 0.15, 0.2)

    def test_schur_product(self):
        assert Color(0.5, 1.0, 0.2) * Color(0.5, 0.5, 1.0) == Color(0.25, 0.5, 0.2)

    def test_values_may_exceed_one(self):
        c = Color(0.8, 0.8, 0.8) + Color(0.8, 0.8, 0.8)
        assert c.r == pytest.approx(1.6)

    def test_clamp(self):
        assert Color(1.5, -0.2, 0.5).clamp() == Color(1.0, 0.0, 0.5)

    def test_is_black_is_exact(self):
        assert BLACK.is_black()
        assert not Color(0.0, 0.0, 1e-12).is_black()

    def test_to_rgb(self):
        assert WHITE.to_rgb() == 0xFFFFFF
        assert BLACK.to_rgb() == 0x000000
        assert Color(1.0, 0.0, 0.0).to_rgb() == 0xFF0000
        assert Color(2.0, -1.0, 0.0).to_rgb() == 0xFF0000

    def test_to_rgb_rounds_half_up(self):
        # 0.5 * 255 = 127.5 rounds up to 128
        assert Color(0.5, 0.5, 0.5).to_rgb() == 0x808080

    def test_from_rgb(self):
        assert Color.from_rgb(0xFF0080) == Color(1.0, 0.0, 128 / 255)


class TestPackRgb:
    """Tests for the vectorized packing used by render()."""

    def test_matches_color_to_rgb(self):
        colors = [
            Color(0.5, 0.5, 0.5),
            Color(1.2, 0.3, -0.1),
            Color(0.0, 0.25, 0.75),
            Color(0.999, 0.001, 0.5),
        ]
        radiance = np.array([c.to_tuple() for c in colors], dtype=np.float64)
        packed = pack_rgb(radiance)
        assert packed.dtype == np.uint32
        assert [int(v) for v in packed] == [c.to_rgb() for c in colors]

    def test_keeps_leading_shape(self):
        radiance = np.zeros((4, 3, 3))
        radiance[..., 0] = 1.0
        packed = pack_rgb(radiance)
        assert packed.shape == (4, 3)
        assert np.all(packed == 0xFF0000)
