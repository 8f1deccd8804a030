"""Immutable scene description.

A Scene is the complete, read-only input of a render: image size, camera,
ambient light, reflection depth, lights and shapes. It is produced by the
scene file parser, by scene_from_dict(), or by code such as the Cornell box
builder, and never changes afterwards.

Shapes and lights are closed variants tagged by ShapeKind and LightKind. The
kernel side dispatches on the tag; the host side uploads each record into the
matching Taichi fields (see ``scene/intersection.py`` and ``scene/lights.py``).

Example:
    >>> from src.whitted.scene.description import Material, Scene, SphereInfo
    >>> red = Material(diffuse=Color(0.8, 0.1, 0.1))
    >>> scene = Scene(
    ...     width=320,
    ...     height=240,
    ...     camera=camera,
    ...     shapes=(SphereInfo(Point3(0.0, 0.0, 0.0), 1.0, red),),
    ... )
    >>> data = scene_to_dict(scene)  # JSON-ready
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar, Union

from src.whitted.camera.basis import Camera
from src.whitted.core.vector import BLACK, Color, Point3, Vector3

# Default number of nested shading evaluations per pixel
DEFAULT_MAX_DEPTH = 5

# Default Blinn-Phong exponent
DEFAULT_SHININESS = 10.0

DEFAULT_OUTPUT = "output.png"


class ShapeKind(IntEnum):
    """Tag of the shape variant, shared by the host and the kernels."""

    SPHERE = 0
    PLANE = 1
    TRIANGLE = 2


class LightKind(IntEnum):
    """Tag of the light variant, shared by the host and the kernels."""

    DIRECTIONAL = 0
    POINT = 1


# =============================================================================
# Materials
# =============================================================================


@dataclass(frozen=True)
class Material:
    """Surface reflectance for Whitted shading.

    Attributes:
        diffuse: Lambertian reflectance, also scales the ambient light.
        specular: Blinn-Phong highlight color and mirror reflectance.
        shininess: Blinn-Phong exponent (non-negative).
    """

    diffuse: Color = field(default_factory=lambda: BLACK)
    specular: Color = field(default_factory=lambda: BLACK)
    shininess: float = DEFAULT_SHININESS

    def __post_init__(self) -> None:
        if self.shininess < 0.0:
            raise ValueError(f"Shininess must be non-negative, got {self.shininess}")


# =============================================================================
# Shapes
# =============================================================================


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (positive).
        material: Surface material.
    """

    kind: ClassVar[ShapeKind] = ShapeKind.SPHERE

    center: Point3
    radius: float
    material: Material = field(default_factory=Material)

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class PlaneInfo:
    """An infinite plane in the scene.

    The normal is normalized on construction.

    Attributes:
        point: Any point on the plane.
        normal: The plane normal (unit length after construction).
        material: Surface material.
    """

    kind: ClassVar[ShapeKind] = ShapeKind.PLANE

    point: Point3
    normal: Vector3
    material: Material = field(default_factory=Material)

    def __post_init__(self) -> None:
        if self.normal.length() == 0.0:
            raise ValueError("Plane normal must be non-zero")
        object.__setattr__(self, "normal", self.normal.normalize())


@dataclass(frozen=True)
class TriangleInfo:
    """A triangle in the scene.

    The face normal normalize((b - a) x (c - a)) is computed on construction,
    so counter-clockwise vertices seen from the front give the front face.

    Attributes:
        a: First vertex.
        b: Second vertex.
        c: Third vertex.
        material: Surface material.
        normal: Face normal (derived, not an init argument).
    """

    kind: ClassVar[ShapeKind] = ShapeKind.TRIANGLE

    a: Point3
    b: Point3
    c: Point3
    material: Material = field(default_factory=Material)
    normal: Vector3 = field(init=False)

    def __post_init__(self) -> None:
        normal = (self.b - self.a).cross(self.c - self.a).normalize()
        object.__setattr__(self, "normal", normal)


Shape = Union[SphereInfo, PlaneInfo, TriangleInfo]


# =============================================================================
# Lights
# =============================================================================


@dataclass(frozen=True)
class DirectionalLight:
    """A light infinitely far away.

    Attributes:
        direction: The direction the light travels (from the light into the
            scene). Shading uses L = normalize(-direction).
        color: Light intensity.
    """

    kind: ClassVar[LightKind] = LightKind.DIRECTIONAL

    direction: Vector3
    color: Color

    def __post_init__(self) -> None:
        if self.direction.length() == 0.0:
            raise ValueError("Directional light direction must be non-zero")


@dataclass(frozen=True)
class PointLight:
    """A point light without distance attenuation.

    Attributes:
        position: Light position in world space.
        color: Light intensity.
    """

    kind: ClassVar[LightKind] = LightKind.POINT

    position: Point3
    color: Color


Light = Union[DirectionalLight, PointLight]


# =============================================================================
# Scene
# =============================================================================


@dataclass(frozen=True, eq=False)
class Scene:
    """Complete, immutable render input.

    Lights and shapes keep their insertion order; the nearest-hit query
    resolves exact ties in favor of the earlier shape.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        camera: Camera placement and field of view.
        ambient: Ambient light, scaled by each material's diffuse color.
        max_depth: Maximum number of nested shading evaluations (>= 1).
            1 disables mirror reflection.
        lights: Ordered lights.
        shapes: Ordered shapes.
        output: Suggested output file name.

    Raises:
        ValueError: If the image size is not positive or max_depth < 1.
    """

    width: int
    height: int
    camera: Camera
    ambient: Color = field(default_factory=lambda: BLACK)
    max_depth: int = DEFAULT_MAX_DEPTH
    lights: tuple[Light, ...] = ()
    shapes: tuple[Shape, ...] = ()
    output: str = DEFAULT_OUTPUT

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        # Accept any sequence but store tuples
        object.__setattr__(self, "lights", tuple(self.lights))
        object.__setattr__(self, "shapes", tuple(self.shapes))

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


# =============================================================================
# Dictionary Round Trip
# =============================================================================


def _vec(values: Sequence[float]) -> Vector3:
    x, y, z = values
    return Vector3(float(x), float(y), float(z))


def _point(values: Sequence[float]) -> Point3:
    x, y, z = values
    return Point3(float(x), float(y), float(z))


def _color(values: Sequence[float]) -> Color:
    r, g, b = values
    return Color(float(r), float(g), float(b))


def _material_to_dict(material: Material) -> dict[str, Any]:
    return {
        "diffuse": list(material.diffuse.to_tuple()),
        "specular": list(material.specular.to_tuple()),
        "shininess": material.shininess,
    }


def _material_from_dict(data: dict[str, Any]) -> Material:
    return Material(
        diffuse=_color(data.get("diffuse", [0.0, 0.0, 0.0])),
        specular=_color(data.get("specular", [0.0, 0.0, 0.0])),
        shininess=float(data.get("shininess", DEFAULT_SHININESS)),
    )


def shape_to_dict(shape: Shape) -> dict[str, Any]:
    """Export one shape to a dictionary.

    Raises:
        TypeError: If ``shape`` is not a known shape record.
    """
    if isinstance(shape, SphereInfo):
        data: dict[str, Any] = {
            "type": "sphere",
            "center": list(shape.center.to_tuple()),
            "radius": shape.radius,
        }
    elif isinstance(shape, PlaneInfo):
        data = {
            "type": "plane",
            "point": list(shape.point.to_tuple()),
            "normal": list(shape.normal.to_tuple()),
        }
    elif isinstance(shape, TriangleInfo):
        data = {
            "type": "triangle",
            "a": list(shape.a.to_tuple()),
            "b": list(shape.b.to_tuple()),
            "c": list(shape.c.to_tuple()),
        }
    else:
        raise TypeError(f"Unknown shape type: {type(shape).__name__}")
    data["material"] = _material_to_dict(shape.material)
    return data


def shape_from_dict(data: dict[str, Any]) -> Shape:
    """Load one shape from a dictionary.

    Raises:
        ValueError: If the shape type is unknown.
    """
    material = _material_from_dict(data.get("material", {}))
    shape_type = data.get("type")
    if shape_type == "sphere":
        return SphereInfo(_point(data["center"]), float(data["radius"]), material)
    if shape_type == "plane":
        return PlaneInfo(_point(data["point"]), _vec(data["normal"]), material)
    if shape_type == "triangle":
        return TriangleInfo(_point(data["a"]), _point(data["b"]), _point(data["c"]), material)
    raise ValueError(f"Unknown shape type: {shape_type!r}")


def light_to_dict(light: Light) -> dict[str, Any]:
    """Export one light to a dictionary.

    Raises:
        TypeError: If ``light`` is not a known light record.
    """
    if isinstance(light, DirectionalLight):
        return {
            "type": "directional",
            "direction": list(light.direction.to_tuple()),
            "color": list(light.color.to_tuple()),
        }
    if isinstance(light, PointLight):
        return {
            "type": "point",
            "position": list(light.position.to_tuple()),
            "color": list(light.color.to_tuple()),
        }
    raise TypeError(f"Unknown light type: {type(light).__name__}")


def light_from_dict(data: dict[str, Any]) -> Light:
    """Load one light from a dictionary.

    Raises:
        ValueError: If the light type is unknown.
    """
    light_type = data.get("type")
    if light_type == "directional":
        return DirectionalLight(_vec(data["direction"]), _color(data["color"]))
    if light_type == "point":
        return PointLight(_point(data["position"]), _color(data["color"]))
    raise ValueError(f"Unknown light type: {light_type!r}")


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    """Export a scene to a dictionary (for JSON serialization).

    Returns:
        A dictionary with size, camera, ambient, max_depth, output, lights
        and shapes keys.
    """
    camera = scene.camera
    return {
        "width": scene.width,
        "height": scene.height,
        "output": scene.output,
        "max_depth": scene.max_depth,
        "ambient": list(scene.ambient.to_tuple()),
        "camera": {
            "lookfrom": list(camera.lookfrom.to_tuple()),
            "lookat": list(camera.lookat.to_tuple()),
            "up": list(camera.up.to_tuple()),
            "fov": camera.fov,
        },
        "lights": [light_to_dict(light) for light in scene.lights],
        "shapes": [shape_to_dict(shape) for shape in scene.shapes],
    }


def scene_from_dict(data: dict[str, Any]) -> Scene:
    """Load a scene from a dictionary.

    Args:
        data: Dictionary in the layout produced by scene_to_dict(). Only
            width, height and camera are required.

    Returns:
        The immutable Scene.

    Raises:
        KeyError: If a required key is missing.
        ValueError: If a value is invalid.
    """
    cam = data["camera"]
    camera = Camera(
        lookfrom=_point(cam["lookfrom"]),
        lookat=_point(cam["lookat"]),
        up=_vec(cam.get("up", [0.0, 1.0, 0.0])),
        fov=float(cam["fov"]),
    )
    return Scene(
        width=int(data["width"]),
        height=int(data["height"]),
        camera=camera,
        ambient=_color(data.get("ambient", [0.0, 0.0, 0.0])),
        max_depth=int(data.get("max_depth", DEFAULT_MAX_DEPTH)),
        lights=tuple(light_from_dict(item) for item in data.get("lights", [])),
        shapes=tuple(shape_from_dict(item) for item in data.get("shapes", [])),
        output=str(data.get("output", DEFAULT_OUTPUT)),
    )
