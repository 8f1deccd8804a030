"""Host-side vector, point and color algebra.

These immutable value types describe scenes on the Python side (camera
placement, shape geometry, light and material colors) before the scene is
uploaded into Taichi fields. Kernel-side math lives in ``core/ray.py``.

Affine rules are enforced by the operators:
    - Point3 - Point3 -> Vector3
    - Point3 + Vector3 -> Point3
    - Point3 - Vector3 -> Point3
    - Point3 + Point3 -> TypeError

Equality is tolerance based (each component within EPSILON), so values that
went through different floating-point paths still compare equal.

Example:
    >>> from src.whitted.core.vector import Point3, Vector3
    >>> eye = Point3(0.0, 0.0, 5.0)
    >>> target = Point3(0.0, 0.0, 0.0)
    >>> (eye - target).normalize()
    Vector3(x=0.0, y=0.0, z=1.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

# Per-component tolerance used by __eq__
EPSILON = 1e-9


def _close(a: tuple[float, float, float], b: tuple[float, float, float]) -> bool:
    return all(abs(p - q) < EPSILON for p, q in zip(a, b))


@dataclass(frozen=True, eq=False, slots=True)
class Vector3:
    """A free 3D direction or displacement (no position semantics)."""

    x: float
    y: float
    z: float

    def __add__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3:
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return _close(self.to_tuple(), other.to_tuple())

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Right-handed cross product ``self x other``."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def schur(self, other: Vector3) -> Vector3:
        """Component-wise product."""
        return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vector3:
        """Return the unit vector with the same direction.

        A zero-length vector normalizes to the zero vector instead of
        producing NaNs.
        """
        length = self.length()
        if length == 0.0:
            return Vector3(0.0, 0.0, 0.0)
        return Vector3(self.x / length, self.y / length, self.z / length)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True, eq=False, slots=True)
class Point3:
    """An affine position in 3D space."""

    x: float
    y: float
    z: float

    def __add__(self, other: Vector3) -> Point3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Point3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Point3 | Vector3) -> Vector3 | Point3:
        if isinstance(other, Point3):
            return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector3):
            return Point3(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point3):
            return NotImplemented
        return _close(self.to_tuple(), other.to_tuple())

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def distance_to(self, other: Point3) -> float:
        return (self - other).length()

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True, eq=False, slots=True)
class Color:
    """An RGB radiance triple.

    Channels may exceed [0, 1] while light is being accumulated. Only
    ``clamp()`` and ``to_rgb()`` map a color into displayable range, and they
    are meant for the final pixel write.
    """

    r: float
    g: float
    b: float

    def __add__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color(self.r - other.r, self.g - other.g, self.b - other.b)

    def __mul__(self, other: float | Color) -> Color:
        # Color * Color is the Schur (component-wise) product
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b)
        if isinstance(other, (int, float)):
            return Color(self.r * other, self.g * other, self.b * other)
        return NotImplemented

    def __rmul__(self, scalar: float) -> Color:
        return self.__mul__(scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return _close(self.to_tuple(), other.to_tuple())

    def __iter__(self) -> Iterator[float]:
        return iter((self.r, self.g, self.b))

    def is_black(self) -> bool:
        return self.r == 0.0 and self.g == 0.0 and self.b == 0.0

    def clamp(self) -> Color:
        """Clamp each channel to [0, 1]."""
        return Color(
            min(1.0, max(0.0, self.r)),
            min(1.0, max(0.0, self.g)),
            min(1.0, max(0.0, self.b)),
        )

    def to_rgb(self) -> int:
        """Pack the clamped color as a 24-bit ``0xRRGGBB`` integer.

        Each clamped channel is scaled by 255 and rounded half-up.
        """
        c = self.clamp()
        red = math.floor(c.r * 255.0 + 0.5)
        green = math.floor(c.g * 255.0 + 0.5)
        blue = math.floor(c.b * 255.0 + 0.5)
        return (red << 16) | (green << 8) | blue

    @classmethod
    def from_rgb(cls, packed: int) -> Color:
        """Inverse of ``to_rgb`` up to 8-bit quantization."""
        return cls(
            ((packed >> 16) & 0xFF) / 255.0,
            ((packed >> 8) & 0xFF) / 255.0,
            (packed & 0xFF) / 255.0,
        )

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)


def pack_rgb(radiance: npt.NDArray[np.floating]) -> npt.NDArray[np.uint32]:
    """Vectorized ``Color.to_rgb`` over an array of shape (..., 3).

    Args:
        radiance: Unclamped RGB values, last axis is the channel.

    Returns:
        Array of packed ``0xRRGGBB`` values with the channel axis removed.
    """
    clamped = np.clip(np.asarray(radiance, dtype=np.float64), 0.0, 1.0)
    channels = np.floor(clamped * 255.0 + 0.5).astype(np.uint32)
    return (channels[..., 0] << 16) | (channels[..., 1] << 8) | channels[..., 2]
