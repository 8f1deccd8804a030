"""Unit tests for the Cornell box demo scene.

Tests cover:
- Shape and light layout
- Parameter overrides
- A small render lights the box
"""

import numpy as np
import pytest

from src.whitted.core.vector import Color, Point3
from src.whitted.scene.cornell_box import (
    BOX_SIZE,
    SPHERE_RADIUS,
    CornellBoxParams,
    create_cornell_box_scene,
)
from src.whitted.scene.description import (
    DirectionalLight,
    PlaneInfo,
    PointLight,
    SphereInfo,
    TriangleInfo,
)


class TestCornellBoxLayout:
    """Tests for the scene produced by create_cornell_box_scene."""

    def test_shape_counts(self):
        scene = create_cornell_box_scene()
        kinds = [type(shape) for shape in scene.shapes]
        assert len(scene.shapes) == 11
        assert kinds.count(TriangleInfo) == 8
        assert kinds.count(PlaneInfo) == 1
        assert kinds.count(SphereInfo) == 2

    def test_lights(self):
        scene = create_cornell_box_scene()
        point, fill = scene.lights
        assert isinstance(point, PointLight)
        assert isinstance(fill, DirectionalLight)
        assert point.position == Point3(BOX_SIZE / 2.0, BOX_SIZE - 20.0, BOX_SIZE / 2.0)

    def test_walls_face_into_box(self):
        """Every wall normal points toward the box center."""
        scene = create_cornell_box_scene()
        center = Point3(BOX_SIZE / 2.0, BOX_SIZE / 2.0, BOX_SIZE / 2.0)
        for shape in scene.shapes:
            if isinstance(shape, TriangleInfo):
                assert shape.normal.dot(center - shape.a) > 0.0

    def test_spheres_rest_on_floor(self):
        scene = create_cornell_box_scene()
        for shape in scene.shapes:
            if isinstance(shape, SphereInfo):
                assert shape.radius == SPHERE_RADIUS
                assert shape.center.y == SPHERE_RADIUS

    def test_wall_colors(self):
        scene = create_cornell_box_scene()
        left, right = scene.shapes[0], scene.shapes[2]
        assert left.material.diffuse == Color(0.65, 0.05, 0.05)
        assert right.material.diffuse == Color(0.12, 0.45, 0.15)

    def test_size_and_output(self):
        scene = create_cornell_box_scene(64, 32)
        assert (scene.width, scene.height) == (64, 32)
        assert scene.output == "cornell_box.png"


class TestCornellBoxParams:
    """Tests for CornellBoxParams overrides."""

    def test_light_intensity_scales_point_light(self):
        params = CornellBoxParams(light_intensity=0.5, light_color=(1.0, 0.8, 0.6))
        scene = create_cornell_box_scene(params=params)
        assert scene.lights[0].color == Color(0.5, 0.4, 0.3)

    def test_custom_colors_and_depth(self):
        params = CornellBoxParams(
            left_wall_color=(0.0, 0.0, 1.0),
            ambient=(0.0, 0.0, 0.0),
            max_depth=2,
        )
        scene = create_cornell_box_scene(params=params)
        assert scene.shapes[0].material.diffuse == Color(0.0, 0.0, 1.0)
        assert scene.ambient.is_black()
        assert scene.max_depth == 2

    def test_box_size(self):
        scene = create_cornell_box_scene(box_size=100.0)
        assert scene.camera.lookat == Point3(100.0 * 278.0 / 555.0, 100.0 * 273.0 / 555.0, 50.0)

    def test_camera_is_off_the_box_diagonal(self):
        """Corner rays must not line up with the wall and ceiling seams."""
        camera = create_cornell_box_scene().camera
        assert camera.lookfrom.x != pytest.approx(camera.lookfrom.y)
        assert camera.lookfrom.x != pytest.approx(BOX_SIZE - camera.lookfrom.y)


class TestCornellBoxRender:
    """Smoke test rendering the box."""

    def test_small_render(self):
        from src.whitted.core.integrator import render_radiance

        radiance = render_radiance(create_cornell_box_scene(16, 16))
        assert radiance.shape == (16, 16, 3)
        assert np.all(np.isfinite(radiance))
        assert np.all(radiance >= 0.0)
        # The camera looks into the box, so every pixel sees a surface
        assert np.all(radiance.sum(axis=-1) > 0.0)
