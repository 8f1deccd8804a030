"""Camera placement and its orthonormal basis.

The camera is described by a look-at triple and a field of view. From it the
renderer derives the right-handed orthonormal frame (u, v, w):
- w: points from lookat toward lookfrom (opposite the view direction)
- u: points right in the image plane, normalize(up x w)
- v: points up in the image plane, w x u (unit by construction)

This module is pure Python and safe to import before Taichi is initialized.

Example:
    >>> from src.whitted.camera.basis import Camera, Orthonormal
    >>> from src.whitted.core.vector import Point3, Vector3
    >>> camera = Camera(
    ...     lookfrom=Point3(0.0, 0.0, 5.0),
    ...     lookat=Point3(0.0, 0.0, 0.0),
    ...     up=Vector3(0.0, 1.0, 0.0),
    ...     fov=45.0,
    ... )
    >>> basis = Orthonormal.from_camera(camera)
    >>> basis.w
    Vector3(x=0.0, y=0.0, z=1.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.vector import Point3, Vector3


@dataclass(frozen=True)
class Camera:
    """A pinhole camera placement.

    Attributes:
        lookfrom: Camera position in world space.
        lookat: Point the camera is looking at.
        up: Approximate up direction (need not be perpendicular to the view).
        fov: Vertical field of view in degrees, 0 < fov < 180.

    Raises:
        ValueError: If fov is out of range or lookfrom equals lookat.
    """

    lookfrom: Point3
    lookat: Point3
    up: Vector3
    fov: float

    def __post_init__(self) -> None:
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Camera fov must be in (0, 180) degrees, got {self.fov}")
        if (self.lookfrom - self.lookat).length() == 0.0:
            raise ValueError("Camera lookfrom and lookat must be distinct points")


@dataclass(frozen=True)
class Orthonormal:
    """Right-handed camera frame.

    Attributes:
        u: Right direction in world space.
        v: Up direction in world space.
        w: Backward direction (opposite the view direction).
    """

    u: Vector3
    v: Vector3
    w: Vector3

    @classmethod
    def from_camera(cls, camera: Camera) -> Orthonormal:
        """Build the frame for a camera.

        If ``up`` is parallel to the view direction the cross product is zero
        and so are u and v; every primary ray then points along -w.
        """
        w = (camera.lookfrom - camera.lookat).normalize()
        u = camera.up.cross(w).normalize()
        v = w.cross(u)
        return cls(u=u, v=v, w=w)
