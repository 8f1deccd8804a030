#!/usr/bin/env python3
"""Render a scene file with the Whitted ray tracer.

Reads a text scene description (see src/whitted/scene/parser.py), renders it
with one ray per pixel and writes the image. Without a scene file the
built-in Cornell box demo scene is rendered.

Usage:
    python -m examples.render_scene [scene] [options]

Options:
    --output OUTPUT     Output file path (default: the scene's output name)
    --width WIDTH       Override the image width in pixels
    --height HEIGHT     Override the image height in pixels
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --quiet             Suppress progress output
    --verbose           Log debug messages

Example:
    python -m examples.render_scene scenes/spheres.txt --output spheres.png
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene with the Whitted ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        nargs="?",
        default=None,
        help="Scene description file (default: built-in Cornell box)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path (default: the scene's output name)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Override the image width in pixels",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Override the image height in pixels",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages",
    )
    return parser.parse_args(argv)


def render_scene(
    scene_path: str | None = None,
    output_path: str | None = None,
    width: int | None = None,
    height: int | None = None,
    quiet: bool = False,
) -> Path:
    """Load, render and save a scene.

    Taichi must already be initialized.

    Args:
        scene_path: Scene description file, or None for the Cornell box.
        output_path: Output file path, or None for the scene's output name.
        width: Optional image width override.
        height: Optional image height override.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.whitted.core.integrator import render
    from src.whitted.preview.export import save_png
    from src.whitted.scene.cornell_box import create_cornell_box_scene
    from src.whitted.scene.parser import parse_scene_file

    if scene_path is None:
        scene = create_cornell_box_scene()
        if not quiet:
            print("Using built-in Cornell box scene")
    else:
        scene = parse_scene_file(scene_path)
        if not quiet:
            print(f"Loaded scene: {scene_path}")

    if width is not None or height is not None:
        scene = dataclasses.replace(
            scene,
            width=width if width is not None else scene.width,
            height=height if height is not None else scene.height,
        )

    if not quiet:
        print(
            f"Rendering {scene.width}x{scene.height} "
            f"({len(scene.shapes)} shapes, {len(scene.lights)} lights, "
            f"max depth {scene.max_depth})..."
        )

    start_time = time.time()
    pixels = render(scene)
    render_time = time.time() - start_time

    output_file = save_png(pixels, output_path or scene.output)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Render time: {render_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Scene values are double precision
    arch = ti.gpu if args.arch == "gpu" else ti.cpu
    ti.init(arch=arch, default_fp=ti.f64)

    try:
        render_scene(
            scene_path=args.scene,
            output_path=args.output,
            width=args.width,
            height=args.height,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError, RuntimeError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
