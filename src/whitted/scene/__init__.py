"""Scene module for scene description, loading and ray-scene queries.

Components:
    description: Immutable Scene value with shape, light and material records
    parser: Text scene format reader
    cornell_box: Cornell box demo scene
    intersection: Shape storage in Taichi fields and the nearest-hit query
    lights: Light storage and the (L, max_distance) accessor

Scene data is organized for kernel access:
    - Structure-of-Arrays layout in one shape table, in insertion order
    - Closed ShapeKind / LightKind tags dispatched inside the kernels
"""

from .cornell_box import BOX_SIZE, CornellBoxParams, create_cornell_box_scene
from .description import (
    DirectionalLight,
    Light,
    LightKind,
    Material,
    PlaneInfo,
    PointLight,
    Scene,
    Shape,
    ShapeKind,
    SphereInfo,
    TriangleInfo,
    scene_from_dict,
    scene_to_dict,
)
from .parser import SceneParseError, parse_scene, parse_scene_file

# Note: intersection and lights are NOT imported here because they declare
# Taichi fields. Import them directly after ti.init().

__all__ = [
    # Description module
    "Scene",
    "Material",
    "Shape",
    "ShapeKind",
    "SphereInfo",
    "PlaneInfo",
    "TriangleInfo",
    "Light",
    "LightKind",
    "DirectionalLight",
    "PointLight",
    "scene_to_dict",
    "scene_from_dict",
    # Parser module
    "SceneParseError",
    "parse_scene",
    "parse_scene_file",
    # Cornell box module
    "CornellBoxParams",
    "create_cornell_box_scene",
    "BOX_SIZE",
]
