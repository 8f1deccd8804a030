"""Cornell box demo scene for Whitted rendering.

The box spans 0 to BOX_SIZE on every axis and is open toward the camera:
- Left wall: red, right wall: green, back wall and ceiling: white, each made
  of two triangles
- Floor: an infinite white plane at y = 0
- A mirror sphere and a diffuse sphere resting on the floor
- A point light just below the ceiling and a dim directional fill light
  shining into the box from the camera side

Example:
    >>> from src.whitted.scene.cornell_box import create_cornell_box_scene
    >>> scene = create_cornell_box_scene(256, 256)
    >>> len(scene.shapes)
    11
"""

from dataclasses import dataclass

from src.whitted.camera.basis import Camera
from src.whitted.core.vector import Color, Point3, Vector3
from src.whitted.scene.description import (
    DirectionalLight,
    Material,
    PlaneInfo,
    PointLight,
    Scene,
    Shape,
    SphereInfo,
    TriangleInfo,
)

# =============================================================================
# Cornell Box Parameters
# =============================================================================


@dataclass
class CornellBoxParams:
    """Parameters for configuring the Cornell box scene.

    Attributes:
        light_intensity: Scale applied to light_color for the point light.
        light_color: RGB color of the point light.
        left_wall_color: Diffuse color of the left wall (red by default).
        right_wall_color: Diffuse color of the right wall (green by default).
        back_wall_color: Diffuse color of the back wall, ceiling and floor.
        mirror_color: Specular color of the mirror sphere.
        ambient: Ambient light color.
        max_depth: Nested shading evaluations (reflection bounces + 1).

    Example:
        >>> params = CornellBoxParams(light_intensity=0.8, max_depth=3)
    """

    light_intensity: float = 1.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    left_wall_color: tuple[float, float, float] = (0.65, 0.05, 0.05)
    right_wall_color: tuple[float, float, float] = (0.12, 0.45, 0.15)
    back_wall_color: tuple[float, float, float] = (0.73, 0.73, 0.73)
    mirror_color: tuple[float, float, float] = (0.8, 0.8, 0.8)
    ambient: tuple[float, float, float] = (0.1, 0.1, 0.1)
    max_depth: int = 5


# =============================================================================
# Cornell Box Constants
# =============================================================================

# Classic Cornell box dimensions (approximately 555x555x555 units)
BOX_SIZE = 555.0

SPHERE_RADIUS = 90.0

# Classic eye position (278, 273, -800) as fractions of the box. Off the
# box diagonal, so no pixel ray lands exactly on a wall seam.
CAMERA_X_FRACTION = 278.0 / 555.0
CAMERA_Y_FRACTION = 273.0 / 555.0
CAMERA_Z = -800.0

# Fill light, traveling into the box and slightly downward
FILL_LIGHT_DIRECTION = (0.0, -0.3, 1.0)
FILL_LIGHT_COLOR = (0.2, 0.2, 0.2)

DIFFUSE_SPHERE_COLOR = (0.2, 0.3, 0.75)


def _quad(p0: Point3, p1: Point3, p2: Point3, p3: Point3, material: Material) -> list[Shape]:
    """Split the quad p0-p1-p2-p3 (in winding order) into two triangles."""
    return [TriangleInfo(p0, p1, p2, material), TriangleInfo(p0, p2, p3, material)]


# =============================================================================
# Cornell Box Factory
# =============================================================================


def create_cornell_box_scene(
    width: int = 512,
    height: int = 512,
    params: CornellBoxParams | None = None,
    box_size: float = BOX_SIZE,
) -> Scene:
    """Create the Cornell box scene.

    The coordinate system places the box origin at (0, 0, 0) with:
    - X-axis: left to right (0 to box_size)
    - Y-axis: floor to ceiling (0 to box_size)
    - Z-axis: front to back (0 to box_size), camera looks toward +Z

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        params: Optional CornellBoxParams. Defaults to CornellBoxParams().
        box_size: The size of the box in each dimension.

    Returns:
        An immutable Scene with 4 walls of 2 triangles each, a floor plane,
        2 spheres, a point light and a directional light.
    """
    if params is None:
        params = CornellBoxParams()

    s = box_size
    left = Material(diffuse=Color(*params.left_wall_color))
    right = Material(diffuse=Color(*params.right_wall_color))
    white = Material(diffuse=Color(*params.back_wall_color))

    shapes: list[Shape] = []

    # Walls wound counter-clockwise as seen from inside, so normals face in
    # Left wall - x = 0
    shapes += _quad(
        Point3(0.0, 0.0, 0.0), Point3(0.0, s, 0.0), Point3(0.0, s, s), Point3(0.0, 0.0, s), left
    )
    # Right wall - x = s
    shapes += _quad(
        Point3(s, 0.0, 0.0), Point3(s, 0.0, s), Point3(s, s, s), Point3(s, s, 0.0), right
    )
    # Back wall - z = s
    shapes += _quad(
        Point3(0.0, 0.0, s), Point3(0.0, s, s), Point3(s, s, s), Point3(s, 0.0, s), white
    )
    # Ceiling - y = s
    shapes += _quad(
        Point3(0.0, s, 0.0), Point3(s, s, 0.0), Point3(s, s, s), Point3(0.0, s, s), white
    )

    # Floor - infinite plane y = 0
    shapes.append(PlaneInfo(Point3(0.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0), white))

    # Mirror sphere - right side, toward the back
    mirror = Material(
        diffuse=Color(0.05, 0.05, 0.05),
        specular=Color(*params.mirror_color),
        shininess=200.0,
    )
    shapes.append(SphereInfo(Point3(s * 0.68, SPHERE_RADIUS, s * 0.62), SPHERE_RADIUS, mirror))

    # Diffuse sphere with a soft highlight - left side, toward the front
    matte = Material(
        diffuse=Color(*DIFFUSE_SPHERE_COLOR),
        specular=Color(0.2, 0.2, 0.2),
        shininess=20.0,
    )
    shapes.append(SphereInfo(Point3(s * 0.3, SPHERE_RADIUS, s * 0.35), SPHERE_RADIUS, matte))

    light_color = Color(*params.light_color) * params.light_intensity
    lights = (
        PointLight(Point3(s / 2.0, s - 20.0, s / 2.0), light_color),
        DirectionalLight(Vector3(*FILL_LIGHT_DIRECTION), Color(*FILL_LIGHT_COLOR)),
    )

    # Camera positioned outside the box, looking in through the open front
    camera = Camera(
        lookfrom=Point3(s * CAMERA_X_FRACTION, s * CAMERA_Y_FRACTION, CAMERA_Z),
        lookat=Point3(s * CAMERA_X_FRACTION, s * CAMERA_Y_FRACTION, s / 2.0),
        up=Vector3(0.0, 1.0, 0.0),
        fov=40.0,
    )

    return Scene(
        width=width,
        height=height,
        camera=camera,
        ambient=Color(*params.ambient),
        max_depth=params.max_depth,
        lights=lights,
        shapes=tuple(shapes),
        output="cornell_box.png",
    )
