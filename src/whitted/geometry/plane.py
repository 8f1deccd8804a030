"""Infinite plane primitive with ray-plane intersection.

A plane is defined by:
- point: Any point lying on the plane
- normal: Unit normal of the plane (normalized when the scene is built)

Ray-plane intersection solves dot(origin + t * d - point, normal) = 0:
    t = dot(point - origin, normal) / dot(normal, d)

A denominator close to zero means the ray runs parallel to the plane (or
inside it) and is reported as a miss.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.whitted.geometry.plane import Plane, hit_plane
    >>> # Floor plane y = 0
    >>> # plane = Plane(point=vec3(0, 0, 0), normal=vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import face_forward, vec3
from src.whitted.geometry.sphere import PARALLEL_EPSILON, HitRecord, make_miss


@ti.dataclass
class Plane:
    """An infinite plane through a point with a unit normal.

    Attributes:
        point: A point on the plane (vec3).
        normal: The unit normal of the plane (vec3).
    """

    point: vec3
    normal: vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test intersection against.
        t_min: Exclusive lower bound on t (self-intersection threshold).
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord. The normal is the plane's constant normal, flipped if
        needed so that it opposes the ray.
    """
    denom = tm.dot(plane.normal, ray_direction)

    result = make_miss()

    # Ray not parallel to plane
    if ti.abs(denom) >= PARALLEL_EPSILON:
        t = tm.dot(plane.point - ray_origin, plane.normal) / denom

        if t > t_min and t < t_max:
            normal, front_face = face_forward(plane.normal, ray_direction)
            result = HitRecord(
                hit=1,
                t=t,
                point=ray_origin + t * ray_direction,
                normal=normal,
                front_face=front_face,
            )

    return result


@ti.func
def make_plane(point: vec3, normal: vec3) -> Plane:
    """Create a plane from a point and a unit normal."""
    return Plane(point=point, normal=normal)
