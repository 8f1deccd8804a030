"""Core rendering module.

Components:
    vector: Host-side Vector3, Point3 and Color value types
    ray: Kernel-side Ray structure and vector utilities
    integrator: Whitted shading, reflection and the render entry points

Scene values are double precision on both sides of the host/kernel boundary.
"""

from .ray import (
    Ray,
    cross,
    dot,
    face_forward,
    is_black,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    real,
    reflect,
    vec3,
)
from .vector import BLACK, EPSILON, WHITE, Color, Point3, Vector3, pack_rgb

# Note: integrator is NOT imported here because it declares Taichi fields.
# Import it directly after ti.init():
#   from src.whitted.core.integrator import render, get_pixel_color

__all__ = [
    "Vector3",
    "Point3",
    "Color",
    "BLACK",
    "WHITE",
    "EPSILON",
    "pack_rgb",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "real",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "face_forward",
    "is_black",
]
