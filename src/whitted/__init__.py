"""Taichi-based Whitted-style ray tracer.

This package renders static scenes of spheres, planes and triangles lit by
directional and point lights, with:
- Ambient, Lambertian diffuse and Blinn-Phong specular shading
- Hard shadows from shadow rays
- Bounded recursive mirror reflection

Subpackages:
    core: Vector algebra, rays, and the shading/render loop
    geometry: Shape primitives and intersection algorithms
    camera: Camera basis and primary-ray generation
    scene: Scene description, parser, storage and nearest-hit query
    materials: Local illumination terms
    preview: Image export
"""

__version__ = "0.1.0"
