"""Preview module for output of rendered images.

Components:
    export: Unpacking of 24-bit RGB buffers and PNG export (Pillow)

Example:
    >>> from src.whitted.preview import save_png
    >>> save_png(render(scene), "output.png")
"""

from .export import save_png, to_image_array, unpack_rgb

__all__ = [
    "unpack_rgb",
    "to_image_array",
    "save_png",
]
