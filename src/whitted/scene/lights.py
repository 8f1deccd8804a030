"""Light storage and the uniform light accessor.

Lights are stored in insertion order in Taichi fields, tagged by LightKind.
The shading code never branches on the light kind itself: it asks
light_frame() for the pair (L, max_distance) at a surface point.

    DIRECTIONAL   L = normalize(-direction)        max_distance = inf
    POINT         L = normalize(position - point)  max_distance = |position - point|

A directional light's ``direction`` is the direction its light travels, so the
vector toward the light is its negation. Point lights do not attenuate with
distance.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.whitted.scene.lights import load_lights, light_frame
    >>> load_lights(scene.lights)
    >>> # Use light_frame(k, point) within a Taichi kernel
"""

from collections.abc import Iterable

import taichi as ti

from src.whitted.core.ray import length, normalize, real, vec3
from src.whitted.geometry.sphere import INF
from src.whitted.scene.description import DirectionalLight, Light, LightKind, PointLight

_DIRECTIONAL = int(LightKind.DIRECTIONAL)
_POINT = int(LightKind.POINT)

# Maximum number of lights supported in the scene
MAX_LIGHTS = 64

# Light storage: Structure of Arrays layout
# light_vectors holds the travel direction (DIRECTIONAL) or position (POINT)
light_kinds = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_vectors = ti.Vector.field(3, dtype=real, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=real, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def add_light(light: Light) -> int:
    """Append a light to the scene.

    Args:
        light: A DirectionalLight or PointLight.

    Returns:
        The index of the added light.

    Raises:
        TypeError: If the light is not one of the known variants.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    if isinstance(light, DirectionalLight):
        vector = light.direction.to_tuple()
    elif isinstance(light, PointLight):
        vector = light.position.to_tuple()
    else:
        raise TypeError(f"Unknown light type: {type(light).__name__}")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_kinds[idx] = int(light.kind)
    light_vectors[idx] = vector
    light_colors[idx] = light.color.to_tuple()
    num_lights[None] = idx + 1
    return idx


def load_lights(lights: Iterable[Light]) -> int:
    """Replace all lights with the given ones, preserving order.

    Returns:
        The number of lights loaded.
    """
    clear_lights()
    for light in lights:
        add_light(light)
    return get_light_count()


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def light_frame(k: ti.i32, point: vec3):
    """Direction toward light k and the distance to it.

    Args:
        k: Light index.
        point: The surface point being shaded.

    Returns:
        A tuple (L, max_distance) with L unit length. Occluders at or beyond
        max_distance along L do not shadow the point.
        max_distance is measured from the surface point itself, not from the
        offset shadow-ray origin.
    """
    to_light = vec3(0.0, 0.0, 0.0)
    max_distance = INF
    if light_kinds[k] == _DIRECTIONAL:
        to_light = normalize(-light_vectors[k])
    else:
        offset = light_vectors[k] - point
        max_distance = length(offset)
        to_light = normalize(offset)
    return to_light, max_distance


@ti.func
def get_light_color(k: ti.i32) -> vec3:
    return light_colors[k]
