"""Local illumination terms for Whitted shading.

A surface material has three parameters (see ``scene/description.py``):
diffuse color, specular color and shininess. For one unoccluded light with
unit direction L toward it and the viewer along V:

    ambient   = ambient_light * diffuse
    diffuse   = max(0, N . L) * light * diffuse
    specular  = max(0, N . H)^shininess * light * specular,  H = normalize(L + V)

Products of colors are component-wise. None of the terms is clamped to
[0, 1]; that only happens when the final pixel is written.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.whitted.materials.phong import lambert_diffuse
    >>> # Use within a Taichi kernel:
    >>> # color = lambert_diffuse(normal, to_light, light_color, diffuse)
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import normalize, real, vec3


@ti.func
def ambient_term(ambient: vec3, diffuse: vec3) -> vec3:
    """Ambient light scaled by the diffuse color."""
    return ambient * diffuse


@ti.func
def lambert_diffuse(normal: vec3, to_light: vec3, light_color: vec3, diffuse: vec3) -> vec3:
    """Evaluate the Lambertian diffuse term.

    Args:
        normal: Unit surface normal.
        to_light: Unit direction from the surface toward the light.
        light_color: Light intensity.
        diffuse: Material diffuse color.

    Returns:
        max(0, N . L) * light_color * diffuse. Zero when the light is behind
        the surface.
    """
    n_dot_l = tm.max(0.0, tm.dot(normal, to_light))
    return n_dot_l * light_color * diffuse


@ti.func
def blinn_phong_specular(
    normal: vec3,
    to_light: vec3,
    to_viewer: vec3,
    light_color: vec3,
    specular: vec3,
    shininess: real,
) -> vec3:
    """Evaluate the Blinn-Phong specular term.

    Args:
        normal: Unit surface normal.
        to_light: Unit direction from the surface toward the light.
        to_viewer: Unit direction from the surface toward the viewer, i.e.
            the negated incoming ray direction.
        light_color: Light intensity.
        specular: Material specular color.
        shininess: Blinn-Phong exponent.

    Returns:
        max(0, N . H)^shininess * light_color * specular.
    """
    half_vector = normalize(to_light + to_viewer)
    n_dot_h = tm.max(0.0, tm.dot(normal, half_vector))
    return tm.pow(n_dot_h, shininess) * light_color * specular
