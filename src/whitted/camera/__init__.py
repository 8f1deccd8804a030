"""Camera module for view and ray generation.

Components:
    basis: Camera placement and its orthonormal (u, v, w) frame (pure Python)
    pinhole: Pinhole camera state fields and primary-ray generation

Pixel (i, j) maps to the image plane at unit distance in front of the
camera, with i = 0 the left column and j = 0 the bottom row. Every pixel gets
exactly one ray through its center.
"""

from .basis import Camera, Orthonormal

# Note: pinhole is NOT imported here because it declares Taichi fields, which
# must not be created before ti.init(). Import it directly when needed:
#   from src.whitted.camera.pinhole import setup_camera, get_ray

__all__ = [
    "Camera",
    "Orthonormal",
]
