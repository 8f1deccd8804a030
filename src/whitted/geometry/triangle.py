"""Triangle primitive with Möller–Trumbore intersection.

A triangle is defined by its three vertices a, b, c. Its face normal is
normalize((b - a) x (c - a)), computed once when the scene is built and stored
next to the vertices, so the counter-clockwise winding decides which side is
the front face.

The Möller–Trumbore test solves
    origin + t * d = a + u * (b - a) + v * (c - a)
with Cramer's rule, rejecting the ray as soon as one barycentric coordinate
falls outside the triangle:
1. det = dot(ab, d x ac); near zero means the ray is parallel to the face
2. u = dot(origin - a, d x ac) / det must lie in [0, 1]
3. v = dot(d, (origin - a) x ab) / det must satisfy v >= 0 and u + v <= 1
4. t = dot(ac, (origin - a) x ab) / det must lie in (t_min, t_max)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.whitted.geometry.triangle import Triangle, hit_triangle
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import cross, face_forward, normalize, vec3
from src.whitted.geometry.sphere import PARALLEL_EPSILON, HitRecord, make_miss


@ti.dataclass
class Triangle:
    """A triangle with a precomputed face normal.

    Attributes:
        a: First vertex (vec3).
        b: Second vertex (vec3).
        c: Third vertex (vec3).
        normal: normalize((b - a) x (c - a)) (vec3).
    """

    a: vec3
    b: vec3
    c: vec3
    normal: vec3


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    tri: Triangle,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-triangle intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        tri: The triangle to test intersection against.
        t_min: Exclusive lower bound on t (self-intersection threshold).
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord. The normal is the triangle's face normal, flipped if
        needed so that it opposes the ray.
    """
    result = make_miss()

    ab = tri.b - tri.a
    ac = tri.c - tri.a

    pvec = cross(ray_direction, ac)
    det = tm.dot(ab, pvec)

    if ti.abs(det) >= PARALLEL_EPSILON:
        inv_det = 1.0 / det

        tvec = ray_origin - tri.a
        u = tm.dot(tvec, pvec) * inv_det

        if u >= 0.0 and u <= 1.0:
            qvec = cross(tvec, ab)
            v = tm.dot(ray_direction, qvec) * inv_det

            if v >= 0.0 and u + v <= 1.0:
                t = tm.dot(ac, qvec) * inv_det

                if t > t_min and t < t_max:
                    normal, front_face = face_forward(tri.normal, ray_direction)
                    result = HitRecord(
                        hit=1,
                        t=t,
                        point=ray_origin + t * ray_direction,
                        normal=normal,
                        front_face=front_face,
                    )

    return result


@ti.func
def triangle_normal(a: vec3, b: vec3, c: vec3) -> vec3:
    """Compute the unit face normal normalize((b - a) x (c - a))."""
    return normalize(cross(b - a, c - a))


@ti.func
def make_triangle(a: vec3, b: vec3, c: vec3) -> Triangle:
    """Create a triangle from three vertices, computing its face normal."""
    return Triangle(a=a, b=b, c=c, normal=triangle_normal(a, b, c))
