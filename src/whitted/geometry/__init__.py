"""Geometry module for shape primitives.

This module provides the analytic primitives and their intersection solvers:

Components:
    sphere: Sphere primitive, the shared HitRecord, and intersection epsilons
    plane: Infinite plane primitive
    triangle: Triangle primitive (Möller–Trumbore)

All intersection routines are Taichi functions (@ti.func) that never fail:
a miss is a HitRecord with hit == 0. Each solver accepts an exclusive
(t_min, t_max) interval so the scene query can shrink t_max to the closest
hit found so far.

Ray-object intersection follows the pattern:
    rec = hit_shape(ray_origin, ray_direction, shape, t_min, t_max)

Returned normals are unit length and always oppose the incoming ray.
"""

from .plane import Plane, hit_plane, make_plane
from .sphere import (
    INF,
    PARALLEL_EPSILON,
    T_MIN,
    HitRecord,
    Sphere,
    hit_sphere,
    make_miss,
    make_sphere,
)
from .triangle import Triangle, hit_triangle, make_triangle, triangle_normal

__all__ = [
    "HitRecord",
    "make_miss",
    "T_MIN",
    "PARALLEL_EPSILON",
    "INF",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "Plane",
    "hit_plane",
    "make_plane",
    "Triangle",
    "hit_triangle",
    "make_triangle",
    "triangle_normal",
]
