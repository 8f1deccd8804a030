"""Pinhole camera primary-ray generation.

The camera state lives in 0-d Taichi fields so that kernels can read it. The
frame itself is computed on the host (see ``camera/basis.py``) and uploaded
once per render with setup_camera().

For pixel (i, j) of a W x H image the ray passes through the image plane at
unit distance in front of the camera:
    pixel_h = tan(radians(fov) / 2)
    pixel_w = pixel_h * W / H
    a = pixel_w * ((i - W/2) + 0.5) / (W/2)
    b = pixel_h * ((j - H/2) + 0.5) / (H/2)
    direction = normalize(u * a + v * b - w)

Row j = 0 is the bottom row of the scene. Flipping to top-down image rows is
left to the image exporter.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.whitted.camera.pinhole import setup_camera, get_ray
    >>> setup_camera(camera, width=640, height=480)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(320, 240)  # Ray just off the image center
"""

import math

import taichi as ti

from src.whitted.camera.basis import Camera, Orthonormal
from src.whitted.core.ray import Ray, make_ray, real, vec3

# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

# Camera origin (lookfrom)
_camera_origin = ti.Vector.field(3, dtype=real, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=real, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=real, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=real, shape=())  # Backward (opposite view)

# Half extents of the image plane at unit distance
_pixel_w = ti.field(dtype=real, shape=())
_pixel_h = ti.field(dtype=real, shape=())

# Image size in pixels
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def setup_camera(
    camera: Camera,
    width: int,
    height: int,
    basis: Orthonormal | None = None,
) -> Orthonormal:
    """Upload camera state for an image of the given size.

    Args:
        camera: Camera placement and field of view.
        width: Image width in pixels.
        height: Image height in pixels.
        basis: Precomputed frame for the camera. Computed when omitted.

    Returns:
        The frame that was uploaded.

    Raises:
        ValueError: If width or height is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}x{height}")

    if basis is None:
        basis = Orthonormal.from_camera(camera)

    pixel_h = math.tan(math.radians(camera.fov) / 2.0)
    pixel_w = pixel_h * width / height

    _camera_origin[None] = camera.lookfrom.to_tuple()
    _camera_u[None] = basis.u.to_tuple()
    _camera_v[None] = basis.v.to_tuple()
    _camera_w[None] = basis.w.to_tuple()
    _pixel_w[None] = pixel_w
    _pixel_h[None] = pixel_h
    _image_width[None] = width
    _image_height[None] = height

    return basis


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position in world space."""
    return _camera_origin[None]


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate the primary ray through the center of pixel (i, j).

    Args:
        i: Column index, 0 is the left edge.
        j: Row index, 0 is the bottom edge.

    Returns:
        A Ray from the camera position with a unit direction.
    """
    half_w = ti.cast(_image_width[None], real) / 2.0
    half_h = ti.cast(_image_height[None], real) / 2.0

    a = _pixel_w[None] * ((ti.cast(i, real) - half_w) + 0.5) / half_w
    b = _pixel_h[None] * ((ti.cast(j, real) - half_h) + 0.5) / half_h

    direction = _camera_u[None] * a + _camera_v[None] * b - _camera_w[None]
    return make_ray(get_camera_origin(), direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w (3-tuples), the image plane half
        extents as ``pixel_size`` (pixel_w, pixel_h) and the image size as
        ``resolution`` (width, height).
    """

    def _as_tuple(field: ti.Field) -> tuple[float, float, float]:
        value = field[None]
        return (float(value[0]), float(value[1]), float(value[2]))

    return {
        "origin": _as_tuple(_camera_origin),
        "u": _as_tuple(_camera_u),
        "v": _as_tuple(_camera_v),
        "w": _as_tuple(_camera_w),
        "pixel_size": (float(_pixel_w[None]), float(_pixel_h[None])),
        "resolution": (int(_image_width[None]), int(_image_height[None])),
    }
