"""Sphere primitive and the hit record shared by all primitives.

Ray-sphere intersection reduces to a quadratic in t. The roots are taken in
the cancellation-free form (Ray Tracing Gems, ch. 7): the larger-magnitude
root comes from q = -(h + sign(h) sqrt(h^2 - ac)) and the other from c / q.
Both are the roots of the textbook formula; only the evaluation order differs,
which matters for spheres that are small or far from the ray origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.whitted.geometry.sphere import Sphere, hit_sphere
    >>> # Inside a kernel:
    >>> # ball = Sphere(center=vec3(0, 0, 0), radius=5.0)
    >>> # rec = hit_sphere(vec3(0, 0, -10), vec3(0, 0, 1), ball, T_MIN, INF)
    >>> # rec.t == 5.0
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import face_forward, normalize, real, vec3

# Smallest accepted ray parameter, rejects self-intersections at t ~ 0
T_MIN = 1e-6

# Threshold for near-parallel denominators and near-zero determinants
PARALLEL_EPSILON = 1e-8

# Open upper bound for unbounded queries
INF = float("inf")


@ti.dataclass
class Sphere:
    """Kernel-side sphere: center and (positive) radius."""

    center: vec3
    radius: real


@ti.dataclass
class HitRecord:
    """Result of intersecting one ray with one primitive.

    Fields other than ``hit`` are meaningful only when ``hit == 1``.

    Attributes:
        hit: 1 if the ray meets the primitive inside (t_min, t_max), else 0.
        t: Ray parameter of the hit.
        point: World-space hit position, origin + t * direction.
        normal: Unit normal at the hit, turned to face against the ray.
        front_face: 1 if the geometric normal already faced the ray, 0 if it
            was flipped (the ray arrived from the back or from inside).
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def make_miss() -> HitRecord:
    """HitRecord with hit == 0."""
    zero = vec3(0.0, 0.0, 0.0)
    return HitRecord(hit=0, t=0.0, point=zero, normal=zero, front_face=0)


@ti.func
def _solve_quadratic_robust(h: real, a: real, c: real, sqrt_d: real):
    """Ordered roots of a t^2 + 2 h t + c = 0 given sqrt(h^2 - a c).

    Returns:
        (near, far) with near <= far.
    """
    q = -(h + ti.select(h < 0.0, -sqrt_d, sqrt_d))

    near = 0.0
    far = 0.0
    if ti.abs(q) < 1e-12:
        # Degenerate (h and the discriminant both ~0): c / q is unusable
        near = -h / a
        far = near
    else:
        near = q / a
        far = c / q

    return ti.min(near, far), ti.max(near, far)


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: real,
    t_max: real,
) -> HitRecord:
    """Intersect a ray with a sphere.

    With oc = origin - center, points on the ray satisfy
    a t^2 + 2 h t + c = 0 where a = |d|^2, h = d . oc and
    c = |oc|^2 - radius^2. No real root means a miss. Otherwise the nearer
    root inside (t_min, t_max) wins and the farther one is the fallback, so a
    ray starting inside the sphere hits the far wall.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t (closest hit found so far).

    Returns:
        A HitRecord; check its hit field.
    """
    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    disc = h * h - a * c

    rec = make_miss()
    if disc >= 0.0:
        near, far = _solve_quadratic_robust(h, a, c, ti.sqrt(disc))

        found = 0
        t = near
        if near > t_min and near < t_max:
            found = 1
        elif far > t_min and far < t_max:
            t = far
            found = 1

        if found == 1:
            p = ray_origin + t * ray_direction
            normal, front_face = face_forward(normalize(p - sphere.center), ray_direction)
            rec = HitRecord(hit=1, t=t, point=p, normal=normal, front_face=front_face)

    return rec


@ti.func
def make_sphere(center: vec3, radius: real) -> Sphere:
    return Sphere(center=center, radius=radius)
