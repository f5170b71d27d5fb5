"""Markers pinned to heading/pitch positions inside panorama viewers."""

from panomark.core import PixelOffset, ViewingAngle, ViewportSize, get_fov, pov_to_pixel

__version__ = "0.1.0"

__all__ = [
    "PixelOffset",
    "ViewingAngle",
    "ViewportSize",
    "get_fov",
    "pov_to_pixel",
]
