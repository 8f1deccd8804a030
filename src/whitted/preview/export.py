"""Image export for rendered pixel buffers.

render() produces a (height, width) array of packed ``0xRRGGBB`` integers in
scene row order: row 0 is the bottom of the scene. Image files store the top
row first, so the rows are flipped on export.

Supported formats:
    - PNG (8-bit RGB via Pillow), or any other format Pillow infers from the
      file extension

Example:
    >>> from src.whitted.core.integrator import render
    >>> from src.whitted.preview.export import save_png
    >>>
    >>> pixels = render(scene)
    >>> save_png(pixels, scene.output)
"""

from __future__ import annotations

import os
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def unpack_rgb(buffer: npt.NDArray[np.integer]) -> npt.NDArray[np.uint8]:
    """Split packed ``0xRRGGBB`` values into 8-bit channels.

    Args:
        buffer: Packed pixels of any shape.

    Returns:
        Array with a trailing channel axis of size 3 (R, G, B).
    """
    packed = np.asarray(buffer, dtype=np.uint32)
    return np.stack(
        [(packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF],
        axis=-1,
    ).astype(np.uint8)


def to_image_array(buffer: npt.NDArray[np.integer]) -> npt.NDArray[np.uint8]:
    """Convert a rendered buffer into a top-down RGB image array.

    Args:
        buffer: Packed pixels of shape (height, width), row 0 at the bottom.

    Returns:
        uint8 array of shape (height, width, 3), row 0 at the top.

    Raises:
        ValueError: If the buffer is not two-dimensional.
    """
    if np.ndim(buffer) != 2:
        raise ValueError(f"Expected a (height, width) buffer, got shape {np.shape(buffer)}")
    # Flip vertically (scene rows start at the bottom, images at the top)
    return np.ascontiguousarray(np.flipud(unpack_rgb(buffer)))


def save_png(buffer: npt.NDArray[np.integer], filepath: str | os.PathLike[str]) -> Path:
    """Save a rendered buffer as an image file.

    Args:
        buffer: Packed pixels of shape (height, width), row 0 at the bottom.
        filepath: Output path. The format follows the extension.

    Returns:
        The path written to.
    """
    path = Path(filepath)
    if path.parent != Path(""):
        path.parent.mkdir(parents=True, exist_ok=True)

    pil_image = PILImage.fromarray(to_image_array(buffer))
    pil_image.save(path)
    return path
