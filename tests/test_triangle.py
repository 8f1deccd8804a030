"""Unit tests for triangle intersection (Möller–Trumbore).

Tests cover:
- Hit at the centroid
- Misses outside each barycentric bound
- Parallel rays
- Precomputed face normal and its orientation
"""

import taichi as ti

# Triangle in the y = 0 plane
A = (-5.0, 0.0, 0.0)
B = (5.0, 0.0, 0.0)
C = (0.0, 0.0, 10.0)


def _run_hit_triangle(origin, direction, a=A, b=B, c=C):
    """Run hit_triangle in a kernel and return (hit, t, point, normal, front_face)."""
    from src.whitted.core.ray import vec3
    from src.whitted.geometry.sphere import INF, T_MIN
    from src.whitted.geometry.triangle import hit_triangle, make_triangle

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    point = ti.Vector.field(3, dtype=ti.f64, shape=())
    normal = ti.Vector.field(3, dtype=ti.f64, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel():
        tri = make_triangle(
            vec3(a[0], a[1], a[2]),
            vec3(b[0], b[1], b[2]),
            vec3(c[0], c[1], c[2]),
        )
        rec = hit_triangle(
            vec3(origin[0], origin[1], origin[2]),
            vec3(direction[0], direction[1], direction[2]),
            tri,
            T_MIN,
            INF,
        )
        hit[None] = rec.hit
        t_val[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal
        front_face[None] = rec.front_face

    test_kernel()
    return hit[None], t_val[None], point[None], normal[None], front_face[None]


class TestTriangleNormal:
    """Tests for the precomputed face normal."""

    def test_face_normal(self):
        """normalize((b - a) x (c - a)) for the reference triangle is -y."""
        from src.whitted.core.ray import vec3
        from src.whitted.geometry.triangle import triangle_normal

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = triangle_normal(
                vec3(A[0], A[1], A[2]), vec3(B[0], B[1], B[2]), vec3(C[0], C[1], C[2])
            )

        test_kernel()
        n = result[None]
        # (10, 0, 0) x (5, 0, 10) = (0, -100, 0)
        assert abs(n[0]) < 1e-12
        assert abs(n[1] + 1.0) < 1e-12
        assert abs(n[2]) < 1e-12


class TestTriangleIntersection:
    """Tests for ray-triangle intersection."""

    def test_hit_at_centroid(self):
        """Ray from (0, 10, 10/3) straight down hits the centroid at t=10."""
        hit, t, p, n, front = _run_hit_triangle((0.0, 10.0, 10.0 / 3.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert abs(t - 10.0) < 1e-9
        assert abs(p[0]) < 1e-9
        assert abs(p[1]) < 1e-9
        assert abs(p[2] - 10.0 / 3.0) < 1e-9
        # Face normal is -y, flipped to oppose the downward ray
        assert abs(n[1] - 1.0) < 1e-9
        assert front == 0

    def test_miss_outside_bounds(self):
        """Ray from (10, 5, 0) straight down passes beside the triangle."""
        hit, *_ = _run_hit_triangle((10.0, 5.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_miss_beyond_third_vertex(self):
        """Past vertex c the barycentric sum exceeds 1."""
        hit, *_ = _run_hit_triangle((0.0, 5.0, 11.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_miss_behind_edge_ab(self):
        hit, *_ = _run_hit_triangle((0.0, 5.0, -1.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_parallel_ray_misses(self):
        hit, *_ = _run_hit_triangle((0.0, 1.0, 2.0), (1.0, 0.0, 0.0))
        assert hit == 0

    def test_triangle_behind_ray_misses(self):
        hit, *_ = _run_hit_triangle((0.0, 10.0, 3.0), (0.0, 1.0, 0.0))
        assert hit == 0

    def test_hit_from_below_keeps_face_normal(self):
        hit, t, p, n, front = _run_hit_triangle((0.0, -2.0, 3.0), (0.0, 1.0, 0.0))
        assert hit == 1
        assert abs(t - 2.0) < 1e-9
        assert abs(n[1] + 1.0) < 1e-9
        assert front == 1
