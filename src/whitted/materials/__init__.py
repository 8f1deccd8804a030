"""Materials module for Whitted local illumination.

Components:
    phong: Ambient, Lambertian diffuse and Blinn-Phong specular terms

Mirror reflection is driven by the specular color as well, but the reflected
ray is traced by the integrator (``core/integrator.py``).
"""

from .phong import ambient_term, blinn_phong_specular, lambert_diffuse

__all__ = [
    "ambient_term",
    "lambert_diffuse",
    "blinn_phong_specular",
]
