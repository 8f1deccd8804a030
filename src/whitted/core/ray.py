"""Ray data structure and vector utilities for Taichi kernels.

This module provides the Ray dataclass and the vector helpers shared by the
intersection solvers, the camera and the shading engine. All operations are
Taichi functions and run inside kernels.

Scene values are double precision, so every vector type here is built on
``ti.f64`` and Taichi must be initialized with ``default_fp=ti.f64`` so that
float literals inside kernels match.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.whitted.core.ray import make_ray, ray_at, vec3
    >>> # Inside a kernel:
    >>> # ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    >>> # point = ray_at(ray, 5.0)  # (0, 0, -5): the direction was normalized
"""

import taichi as ti
import taichi.math as tm

# Scalar and 3D vector types used by every kernel-side structure
real = ti.f64
vec3 = ti.types.vector(3, real)


@ti.dataclass
class Ray:
    """Origin plus unit direction.

    Build rays with make_ray(), which normalizes the direction, so that the
    ``t`` reported by every solver is a distance in scene units.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: real) -> vec3:
    """Position at parameter t: origin + t * direction."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Build a Ray, normalizing ``direction`` (which need not be unit length)."""
    return Ray(origin=origin, direction=normalize(direction))


# =============================================================================
# Vector Helpers
# =============================================================================


@ti.func
def length(v: vec3) -> real:
    return tm.sqrt(tm.dot(v, v))


@ti.func
def length_squared(v: vec3) -> real:
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Unit vector along v, or the zero vector when v has zero length."""
    unit = vec3(0.0, 0.0, 0.0)
    n = length(v)
    if n > 0.0:
        unit = v / n
    return unit


@ti.func
def dot(a: vec3, b: vec3) -> real:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Right-handed cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def reflect(d: vec3, n: vec3) -> vec3:
    """Mirror direction d about the unit normal n: R = D - 2 (N . D) N.

    Works for either orientation of n, since flipping n leaves R unchanged.
    """
    return d - 2.0 * tm.dot(n, d) * n


@ti.func
def face_forward(normal: vec3, direction: vec3):
    """Orient a normal so that it opposes a ray direction.

    Args:
        normal: The geometric normal (unit length).
        direction: The direction of the incoming ray.

    Returns:
        A tuple (oriented_normal, front_face) where front_face is 1 if the
        geometric normal already opposed the ray, 0 if it was flipped.
    """
    oriented = normal
    front_face = 1
    if tm.dot(direction, normal) > 0.0:
        oriented = -normal
        front_face = 0
    return oriented, front_face


@ti.func
def is_black(c: vec3) -> ti.i32:
    """1 if every channel of c is exactly zero, else 0."""
    black = 0
    if c.x == 0.0 and c.y == 0.0 and c.z == 0.0:
        black = 1
    return black
