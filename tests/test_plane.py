"""Unit tests for plane intersection.

Tests cover:
- Ray hitting a plane head-on
- Parallel rays (on and off the plane) miss
- Plane behind the ray
- Normal orientation against the incoming ray
"""

import taichi as ti


def _run_hit_plane(origin, direction, plane_point, plane_normal):
    """Run hit_plane in a kernel and return (hit, t, point, normal, front_face)."""
    from src.whitted.geometry.plane import Plane, hit_plane
    from src.whitted.geometry.sphere import INF, T_MIN
    from src.whitted.core.ray import vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    point = ti.Vector.field(3, dtype=ti.f64, shape=())
    normal = ti.Vector.field(3, dtype=ti.f64, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel():
        plane = Plane(
            point=vec3(plane_point[0], plane_point[1], plane_point[2]),
            normal=vec3(plane_normal[0], plane_normal[1], plane_normal[2]),
        )
        rec = hit_plane(
            vec3(origin[0], origin[1], origin[2]),
            vec3(direction[0], direction[1], direction[2]),
            plane,
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


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def test_hit_from_above(self):
        """Floor y=0, ray from (0, 10, 0) straight down hits at t=10."""
        hit, t, p, n, front = _run_hit_plane(
            (0.0, 10.0, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)
        )
        assert hit == 1
        assert abs(t - 10.0) < 1e-9
        assert abs(p[0]) < 1e-9 and abs(p[1]) < 1e-9 and abs(p[2]) < 1e-9
        assert abs(n[1] - 1.0) < 1e-9
        assert front == 1

    def test_parallel_on_plane_misses(self):
        """A ray lying in the plane is parallel and misses."""
        hit, *_ = _run_hit_plane(
            (1.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)
        )
        assert hit == 0

    def test_parallel_above_plane_misses(self):
        hit, *_ = _run_hit_plane(
            (0.0, 3.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)
        )
        assert hit == 0

    def test_plane_behind_ray_misses(self):
        hit, *_ = _run_hit_plane(
            (0.0, 10.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)
        )
        assert hit == 0

    def test_hit_from_below_flips_normal(self):
        """Seen from below, the reported normal points down toward the ray."""
        hit, t, p, n, front = _run_hit_plane(
            (0.0, -4.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)
        )
        assert hit == 1
        assert abs(t - 4.0) < 1e-9
        assert abs(n[1] + 1.0) < 1e-9
        assert front == 0

    def test_oblique_hit(self):
        """Ray at 45 degrees travels sqrt(2) * height to the plane."""
        s = 0.5**0.5
        hit, t, p, *_ = _run_hit_plane(
            (0.0, 2.0, 0.0), (s, -s, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)
        )
        assert hit == 1
        assert abs(t - 2.0 * 2.0**0.5) < 1e-9
        assert abs(p[0] - 2.0) < 1e-9
