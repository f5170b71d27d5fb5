"""Core components layer - pure projection math, no Qt."""

from panomark.core.fov import get_fov, documented_fov
from panomark.core.projection import (
    PixelOffset,
    ViewingAngle,
    ViewportSize,
    focal_length,
    image_plane_basis,
    pov_to_pixel,
)

__all__ = [
    "get_fov",
    "documented_fov",
    "PixelOffset",
    "ViewingAngle",
    "ViewportSize",
    "focal_length",
    "image_plane_basis",
    "pov_to_pixel",
]
