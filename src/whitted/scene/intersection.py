"""Scene storage and the nearest-hit query.

Every shape of a scene is stored in one table, in insertion order, using a
Structure of Arrays layout in Taichi fields. The kind tag selects which of the
geometry columns are meaningful:

    kind       point_a   point_b   point_c   normal         radius
    SPHERE     center    -         -         -              radius
    PLANE      point     -         -         unit normal    -
    TRIANGLE   a         b         c         face normal    -

Material columns (diffuse, specular, shininess) are filled for every shape.

intersect_scene() scans the table linearly and keeps the closest hit. Each
solver is called with t_max set to the closest t found so far and only
accepts strictly smaller values, so when two shapes are hit at exactly the
same t the one inserted first wins. The same query serves primary, shadow
and reflection rays.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.whitted.scene.intersection import load_shapes, intersect_scene
    >>> load_shapes(scene.shapes)
    >>> # Use intersect_scene within a Taichi kernel
"""

from collections.abc import Iterable

import taichi as ti

from src.whitted.core.ray import real, vec3
from src.whitted.geometry.plane import Plane, hit_plane
from src.whitted.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss
from src.whitted.geometry.triangle import Triangle, hit_triangle
from src.whitted.scene.description import (
    PlaneInfo,
    Shape,
    ShapeKind,
    SphereInfo,
    TriangleInfo,
)

# Kind tags as plain ints for use inside kernels
_SPHERE = int(ShapeKind.SPHERE)
_PLANE = int(ShapeKind.PLANE)
_TRIANGLE = int(ShapeKind.TRIANGLE)


@ti.dataclass
class Intersection:
    """Record of a ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any shape (1 if hit, 0 if miss).
        t: Distance along the ray to the hit. Only valid if hit == 1.
        shape_id: Index of the hit shape in the scene table, -1 on a miss.
        point: The hit point. Only valid if hit == 1.
        normal: Unit surface normal, oriented to oppose the incoming ray.
            Only valid if hit == 1.
        front_face: 1 if the geometric normal already opposed the ray.
        ray_origin: Origin of the incoming ray.
        ray_direction: Unit direction of the incoming ray.
    """

    hit: ti.i32
    t: real
    shape_id: ti.i32
    point: vec3
    normal: vec3
    front_face: ti.i32
    ray_origin: vec3
    ray_direction: vec3


# Maximum number of shapes supported in the scene
MAX_SHAPES = 4096

# Shape storage: Structure of Arrays layout
shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_point_a = ti.Vector.field(3, dtype=real, shape=MAX_SHAPES)
shape_point_b = ti.Vector.field(3, dtype=real, shape=MAX_SHAPES)
shape_point_c = ti.Vector.field(3, dtype=real, shape=MAX_SHAPES)
shape_normals = ti.Vector.field(3, dtype=real, shape=MAX_SHAPES)
shape_radii = ti.field(dtype=real, shape=MAX_SHAPES)

# Material storage, indexed by shape id
shape_diffuse = ti.Vector.field(3, dtype=real, shape=MAX_SHAPES)
shape_specular = ti.Vector.field(3, dtype=real, shape=MAX_SHAPES)
shape_shininess = ti.field(dtype=real, shape=MAX_SHAPES)

num_shapes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all shapes.

    Only the count is reset; stale field data is overwritten by later adds.
    """
    num_shapes[None] = 0


def add_shape(shape: Shape) -> int:
    """Append a shape (with its material) to the scene table.

    Args:
        shape: A SphereInfo, PlaneInfo or TriangleInfo.

    Returns:
        The index of the added shape.

    Raises:
        TypeError: If the shape is not one of the known variants.
        RuntimeError: If the maximum number of shapes is exceeded.
    """
    if not isinstance(shape, (SphereInfo, PlaneInfo, TriangleInfo)):
        raise TypeError(f"Unknown shape type: {type(shape).__name__}")

    idx = num_shapes[None]
    if idx >= MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")

    if isinstance(shape, SphereInfo):
        shape_point_a[idx] = shape.center.to_tuple()
        shape_radii[idx] = shape.radius
    elif isinstance(shape, PlaneInfo):
        shape_point_a[idx] = shape.point.to_tuple()
        shape_normals[idx] = shape.normal.to_tuple()
    else:
        shape_point_a[idx] = shape.a.to_tuple()
        shape_point_b[idx] = shape.b.to_tuple()
        shape_point_c[idx] = shape.c.to_tuple()
        shape_normals[idx] = shape.normal.to_tuple()
    shape_kinds[idx] = int(shape.kind)

    material = shape.material
    shape_diffuse[idx] = material.diffuse.to_tuple()
    shape_specular[idx] = material.specular.to_tuple()
    shape_shininess[idx] = material.shininess

    num_shapes[None] = idx + 1
    return idx


def load_shapes(shapes: Iterable[Shape]) -> int:
    """Replace the scene table with the given shapes, preserving order.

    Returns:
        The number of shapes loaded.
    """
    clear_scene()
    for shape in shapes:
        add_shape(shape)
    return get_shape_count()


def get_shape_count() -> int:
    """Get the number of shapes in the scene."""
    return int(num_shapes[None])


def get_shape_kind(idx: int) -> ShapeKind:
    """Get the kind tag of a stored shape."""
    if not 0 <= idx < get_shape_count():
        raise IndexError(f"Shape index {idx} out of range")
    return ShapeKind(int(shape_kinds[idx]))


# =============================================================================
# Kernel-side Queries
# =============================================================================


@ti.func
def _make_miss_intersection(ray_origin: vec3, ray_direction: vec3) -> Intersection:
    """Create an Intersection indicating no hit."""
    return Intersection(
        hit=0,
        t=0.0,
        shape_id=-1,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        ray_origin=ray_origin,
        ray_direction=ray_direction,
    )


@ti.func
def _hit_shape(
    i: ti.i32, ray_origin: vec3, ray_direction: vec3, t_min: real, t_max: real
) -> HitRecord:
    """Dispatch to the solver for shape i."""
    kind = shape_kinds[i]
    rec = make_miss()
    if kind == _SPHERE:
        sphere = Sphere(center=shape_point_a[i], radius=shape_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
    elif kind == _PLANE:
        plane = Plane(point=shape_point_a[i], normal=shape_normals[i])
        rec = hit_plane(ray_origin, ray_direction, plane, t_min, t_max)
    elif kind == _TRIANGLE:
        tri = Triangle(
            a=shape_point_a[i],
            b=shape_point_b[i],
            c=shape_point_c[i],
            normal=shape_normals[i],
        )
        rec = hit_triangle(ray_origin, ray_direction, tri, t_min, t_max)
    return rec


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: real,
    t_max: real,
) -> Intersection:
    """Find the closest intersection along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        The Intersection with the smallest t in (t_min, t_max), or a miss
        record (hit == 0, shape_id == -1).
    """
    closest_t = t_max
    result = _make_miss_intersection(ray_origin, ray_direction)

    n = num_shapes[None]
    for i in range(n):
        rec = _hit_shape(i, ray_origin, ray_direction, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = Intersection(
                hit=1,
                t=rec.t,
                shape_id=i,
                point=rec.point,
                normal=rec.normal,
                front_face=rec.front_face,
                ray_origin=ray_origin,
                ray_direction=ray_direction,
            )

    return result


@ti.func
def get_diffuse(shape_id: ti.i32) -> vec3:
    return shape_diffuse[shape_id]


@ti.func
def get_specular(shape_id: ti.i32) -> vec3:
    return shape_specular[shape_id]


@ti.func
def get_shininess(shape_id: ti.i32) -> real:
    return shape_shininess[shape_id]
