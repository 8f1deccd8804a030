"""Unit tests for kernel-side ray and vector utilities.

Tests cover:
- Ray construction normalizes the direction
- ray_at evaluation
- Safe normalization and cross product
- Reflection about a normal
- Face-forward orientation of normals
"""

import taichi as ti


class TestRay:
    """Tests for the Ray dataclass."""

    def test_make_ray_normalizes_direction(self):
        """Rays built with make_ray always have a unit direction."""
        from src.whitted.core.ray import length, make_ray, ray_at, vec3

        dir_len = ti.field(dtype=ti.f64, shape=())
        point = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
            dir_len[None] = length(ray.direction)
            point[None] = ray_at(ray, 5.0)

        test_kernel()
        assert abs(dir_len[None] - 1.0) < 1e-12
        p = point[None]
        assert abs(p[0] - 1.0) < 1e-12
        assert abs(p[1]) < 1e-12
        assert abs(p[2] + 5.0) < 1e-12


class TestVectorUtilities:
    """Tests for vector helper functions."""

    def test_normalize_zero_vector(self):
        """Normalizing a zero vector yields the zero vector."""
        from src.whitted.core.ray import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        r = result[None]
        assert r[0] == 0.0 and r[1] == 0.0 and r[2] == 0.0

    def test_normalize_unit_length(self):
        from src.whitted.core.ray import length, normalize, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = length(normalize(vec3(-3.0, 12.0, 4.0)))

        test_kernel()
        assert abs(result[None] - 1.0) < 1e-9

    def test_cross_perpendicular(self):
        """cross(v, w) is perpendicular to v and w."""
        from src.whitted.core.ray import cross, dot, vec3

        dot_v = ti.field(dtype=ti.f64, shape=())
        dot_w = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(1.0, 2.0, 3.0)
            w = vec3(-4.0, 0.5, 2.0)
            c = cross(v, w)
            dot_v[None] = dot(c, v)
            dot_w[None] = dot(c, w)

        test_kernel()
        assert abs(dot_v[None]) < 1e-9
        assert abs(dot_w[None]) < 1e-9

    def test_reflect(self):
        """A ray hitting a floor at 45 degrees bounces up at 45 degrees."""
        from src.whitted.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-12
        assert abs(r[1] - 1.0) < 1e-12
        assert abs(r[2]) < 1e-12

    def test_face_forward_flips_normal(self):
        """Normals pointing along the ray are flipped to oppose it."""
        from src.whitted.core.ray import face_forward, vec3

        kept = ti.Vector.field(3, dtype=ti.f64, shape=())
        kept_front = ti.field(dtype=ti.i32, shape=())
        flipped = ti.Vector.field(3, dtype=ti.f64, shape=())
        flipped_front = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            n1, f1 = face_forward(vec3(0.0, 1.0, 0.0), vec3(0.0, -1.0, 0.0))
            n2, f2 = face_forward(vec3(0.0, 1.0, 0.0), vec3(0.0, 1.0, 0.0))
            kept[None] = n1
            kept_front[None] = f1
            flipped[None] = n2
            flipped_front[None] = f2

        test_kernel()
        assert kept[None][1] == 1.0
        assert kept_front[None] == 1
        assert flipped[None][1] == -1.0
        assert flipped_front[None] == 0

    def test_is_black(self):
        from src.whitted.core.ray import is_black, vec3

        black = ti.field(dtype=ti.i32, shape=())
        not_black = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            black[None] = is_black(vec3(0.0, 0.0, 0.0))
            not_black[None] = is_black(vec3(0.0, 0.1, 0.0))

        test_kernel()
        assert black[None] == 1
        assert not_black[None] == 0
