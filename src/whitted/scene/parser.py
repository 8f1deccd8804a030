"""Parser for the line-oriented text scene format.

Each non-empty line holds one instruction followed by its numeric arguments,
separated by whitespace. Lines starting with ``#`` are comments.

    size w h                        image size in pixels
    output file                     output image name (default output.png)
    camera fx fy fz ax ay az ux uy uz fov
    ambient r g b                   ambient light (default black)
    maxdepth n                      nested shading evaluations (default 5)
    diffuse r g b                   current diffuse color (default black)
    specular r g b                  current specular color (default black)
    shininess s                     current shininess (default 10)
    directional dx dy dz r g b      light traveling along (dx, dy, dz)
    point px py pz r g b            point light
    sphere x y z r
    maxverts n                      vertex capacity for ``vertex``
    vertex x y z
    tri i j k                       triangle from vertex indices
    plane px py pz nx ny nz

The material instructions set state that applies to every shape declared
after them. Unknown instructions are logged and skipped. ``size`` and
``camera`` are required.

Example:
    >>> from src.whitted.scene.parser import parse_scene
    >>> scene = parse_scene('''
    ... size 64 48
    ... camera 0 0 5 0 0 0 0 1 0 45
    ... diffuse 1 0 0
    ... sphere 0 0 0 1
    ... ''')
    >>> len(scene.shapes)
    1
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from src.whitted.camera.basis import Camera
from src.whitted.core.vector import BLACK, Color, Point3, Vector3
from src.whitted.scene.description import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_OUTPUT,
    DEFAULT_SHININESS,
    DirectionalLight,
    Light,
    Material,
    PlaneInfo,
    PointLight,
    Scene,
    Shape,
    SphereInfo,
    TriangleInfo,
)

logger = logging.getLogger(__name__)


class SceneParseError(ValueError):
    """A scene file could not be parsed.

    Attributes:
        filename: Name of the parsed file ("<string>" for in-memory text).
        line_number: 1-based line of the offending instruction, or None for
            errors about the file as a whole.
    """

    def __init__(self, message: str, filename: str = "<string>", line_number: int | None = None):
        self.filename = filename
        self.line_number = line_number
        location = filename if line_number is None else f"{filename}:{line_number}"
        super().__init__(f"{location}: {message}")


class _SceneBuilder:
    """Mutable parser state, frozen into a Scene by build()."""

    def __init__(self) -> None:
        self.size: tuple[int, int] | None = None
        self.camera: Camera | None = None
        self.output = DEFAULT_OUTPUT
        self.ambient = BLACK
        self.max_depth = DEFAULT_MAX_DEPTH
        self.diffuse = BLACK
        self.specular = BLACK
        self.shininess = DEFAULT_SHININESS
        self.max_verts = 0
        self.vertices: list[Point3] = []
        self.lights: list[Light] = []
        self.shapes: list[Shape] = []

        # name -> (argument count, handler)
        self.handlers: dict[str, tuple[int, Callable[[list[str]], None]]] = {
            "size": (2, self._size),
            "output": (1, self._output),
            "camera": (10, self._camera),
            "ambient": (3, self._ambient),
            "maxdepth": (1, self._maxdepth),
            "diffuse": (3, self._diffuse),
            "specular": (3, self._specular),
            "shininess": (1, self._shininess),
            "directional": (6, self._directional),
            "point": (6, self._point),
            "sphere": (4, self._sphere),
            "maxverts": (1, self._maxverts),
            "vertex": (3, self._vertex),
            "tri": (3, self._tri),
            "plane": (6, self._plane),
        }

    # -------------------------------------------------------------------------
    # Token conversion
    # -------------------------------------------------------------------------

    @staticmethod
    def _floats(args: list[str]) -> list[float]:
        try:
            return [float(token) for token in args]
        except ValueError as e:
            raise ValueError(f"expected numbers, got {' '.join(args)!r}") from e

    @staticmethod
    def _int(token: str) -> int:
        try:
            return int(token)
        except ValueError as e:
            raise ValueError(f"expected an integer, got {token!r}") from e

    def _material(self) -> Material:
        return Material(diffuse=self.diffuse, specular=self.specular, shininess=self.shininess)

    # -------------------------------------------------------------------------
    # Instructions
    # -------------------------------------------------------------------------

    def _size(self, args: list[str]) -> None:
        self.size = (self._int(args[0]), self._int(args[1]))

    def _output(self, args: list[str]) -> None:
        self.output = args[0]

    def _camera(self, args: list[str]) -> None:
        v = self._floats(args)
        self.camera = Camera(
            lookfrom=Point3(v[0], v[1], v[2]),
            lookat=Point3(v[3], v[4], v[5]),
            up=Vector3(v[6], v[7], v[8]),
            fov=v[9],
        )

    def _ambient(self, args: list[str]) -> None:
        self.ambient = Color(*self._floats(args))

    def _maxdepth(self, args: list[str]) -> None:
        depth = self._int(args[0])
        if depth < 1:
            raise ValueError(f"maxdepth must be at least 1, got {depth}")
        self.max_depth = depth

    def _diffuse(self, args: list[str]) -> None:
        self.diffuse = Color(*self._floats(args))

    def _specular(self, args: list[str]) -> None:
        self.specular = Color(*self._floats(args))

    def _shininess(self, args: list[str]) -> None:
        (value,) = self._floats(args)
        if value < 0.0:
            raise ValueError(f"shininess must be non-negative, got {value}")
        self.shininess = value

    def _directional(self, args: list[str]) -> None:
        v = self._floats(args)
        self.lights.append(DirectionalLight(Vector3(v[0], v[1], v[2]), Color(v[3], v[4], v[5])))

    def _point(self, args: list[str]) -> None:
        v = self._floats(args)
        self.lights.append(PointLight(Point3(v[0], v[1], v[2]), Color(v[3], v[4], v[5])))

    def _sphere(self, args: list[str]) -> None:
        v = self._floats(args)
        self.shapes.append(SphereInfo(Point3(v[0], v[1], v[2]), v[3], self._material()))

    def _maxverts(self, args: list[str]) -> None:
        count = self._int(args[0])
        if count < 0:
            raise ValueError(f"maxverts must be non-negative, got {count}")
        self.max_verts = count
        self.vertices = []

    def _vertex(self, args: list[str]) -> None:
        if len(self.vertices) >= self.max_verts:
            raise ValueError(f"too many vertices (maxverts is {self.max_verts})")
        self.vertices.append(Point3(*self._floats(args)))

    def _tri(self, args: list[str]) -> None:
        indices = [self._int(token) for token in args]
        for idx in indices:
            if not 0 <= idx < len(self.vertices):
                raise ValueError(
                    f"vertex index {idx} out of range ({len(self.vertices)} vertices defined)"
                )
        a, b, c = (self.vertices[idx] for idx in indices)
        self.shapes.append(TriangleInfo(a, b, c, self._material()))

    def _plane(self, args: list[str]) -> None:
        v = self._floats(args)
        self.shapes.append(
            PlaneInfo(Point3(v[0], v[1], v[2]), Vector3(v[3], v[4], v[5]), self._material())
        )

    # -------------------------------------------------------------------------
    # Driver
    # -------------------------------------------------------------------------

    def feed(self, tokens: list[str]) -> bool:
        """Apply one instruction. Returns False if it was not recognized."""
        name, args = tokens[0], tokens[1:]
        entry = self.handlers.get(name)
        if entry is None:
            return False
        arity, handler = entry
        if len(args) != arity:
            raise ValueError(f"{name} expects {arity} arguments, got {len(args)}")
        handler(args)
        return True

    def build(self) -> Scene:
        if self.size is None:
            raise ValueError("missing size instruction")
        if self.camera is None:
            raise ValueError("missing camera instruction")
        width, height = self.size
        return Scene(
            width=width,
            height=height,
            camera=self.camera,
            ambient=self.ambient,
            max_depth=self.max_depth,
            lights=tuple(self.lights),
            shapes=tuple(self.shapes),
            output=self.output,
        )


def parse_scene(text: str, filename: str = "<string>") -> Scene:
    """Parse a scene description held in a string.

    Args:
        text: The scene description.
        filename: Name reported in errors and log messages.

    Returns:
        The immutable Scene.

    Raises:
        SceneParseError: If an instruction is malformed or a required
            instruction is missing.
    """
    builder = _SceneBuilder()

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        tokens = line.split()
        try:
            recognized = builder.feed(tokens)
        except ValueError as e:
            raise SceneParseError(str(e), filename, line_number) from e
        if not recognized:
            logger.warning("%s:%d: ignoring instruction %r", filename, line_number, tokens[0])

    try:
        scene = builder.build()
    except ValueError as e:
        raise SceneParseError(str(e), filename) from e

    logger.info(
        "Parsed %s: %dx%d, %d shapes, %d lights",
        filename,
        scene.width,
        scene.height,
        len(scene.shapes),
        len(scene.lights),
    )
    return scene


def parse_scene_file(path: str | os.PathLike[str]) -> Scene:
    """Parse a scene description file.

    Args:
        path: Path to the scene file.

    Returns:
        The immutable Scene.

    Raises:
        OSError: If the file cannot be read.
        SceneParseError: If the file is malformed.
    """
    path = Path(path)
    return parse_scene(path.read_text(encoding="utf-8"), filename=str(path))
