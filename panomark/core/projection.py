"""
Angular to planar projection of panorama viewing angles.

The viewer is modelled as a pinhole camera at the origin looking along its
current heading/pitch. A target heading/pitch is turned into a ray, the ray
is intersected with the image plane at focal distance f and the hit point
is expressed in the plane's right/up basis.

Design principles:
- Pure functions over small frozen value types; nothing is cached.
- "Not visible" is a normal result (None), not an exception.
- Only the viewer's zoom determines the focal length.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from panomark.core import geometry_utils
from panomark.core.fov import get_fov

if TYPE_CHECKING:
    from panomark.viewers.camera.camera_state import PanoramaPov

DEG_TO_RAD = math.pi / 180.0

# |n . d| below this means the ray runs parallel to the image plane.
PARALLEL_EPSILON = 1e-6


@dataclass(frozen=True)
class ViewingAngle:
    "Heading/pitch pair in degrees. Values are not normalized."
    heading: float = 0.0
    pitch: float = 0.0

    def rotated(self, delta_heading: float = 0.0, delta_pitch: float = 0.0) -> ViewingAngle:
        return ViewingAngle(self.heading + delta_heading, self.pitch + delta_pitch)

    def __str__(self) -> str:
        return f"Heading: {self.heading:.1f}, Pitch: {self.pitch:.1f}"


@dataclass(frozen=True)
class ViewportSize:
    """Pixel size of the viewer's rendering surface."""
    width: float
    height: float

    @property
    def center(self) -> PixelOffset:
        return PixelOffset(self.width / 2, self.height / 2)

    def validate(self) -> None:
        """Raise ValueError unless both dimensions are positive."""
        if not (self.width > 0 and self.height > 0):
            raise ValueError(f"Viewport must have a positive size, got {self.width}x{self.height}")


@dataclass(frozen=True)
class PixelOffset:
    """Pixel position relative to the top-left corner of the viewport."""
    left: float
    top: float

    def translated(self, dx: float, dy: float) -> PixelOffset:
        return PixelOffset(self.left + dx, self.top + dy)

    def rounded(self) -> Tuple[int, int]:
        return round(self.left), round(self.top)


def focal_length(zoom: float, viewport_width: float) -> float:
    """
    Distance from the camera to the image plane in pixels.

    :param zoom: Current zoom level of the viewer
    :param viewport_width: Width of the viewport in pixels
    :return: Focal length in pixels
    """
    fov = get_fov(zoom) * DEG_TO_RAD
    return (viewport_width / 2) / math.tan(fov / 2)


def image_plane_basis(
        current: ViewingAngle,
) -> Optional[Tuple[geometry_utils.Vector3, geometry_utils.Vector3]]:
    """
    Build the right/up basis of the image plane for a viewing direction.

    The up vector is unit length by construction. The right vector is
    normalized explicitly; None is returned if it collapses to zero.

    :param current: Viewing direction of the camera
    :return: (right, up) unit vectors, or None
    """
    h0 = current.heading * DEG_TO_RAD
    p0 = current.pitch * DEG_TO_RAD
    cos_p0, sin_p0 = math.cos(p0), math.sin(p0)
    cos_h0, sin_h0 = math.cos(h0), math.sin(h0)

    up = (-sin_p0 * sin_h0, -sin_p0 * cos_h0, cos_p0)
    right = (cos_p0 * cos_h0, -cos_p0 * sin_h0, 0.0)

    if geometry_utils.calculate_norm(right) == 0.0:
        return None
    return geometry_utils.normalize_vector(right), up


def pov_to_pixel(
        target: ViewingAngle,
        current: "PanoramaPov",
        viewport: ViewportSize,
) -> Optional[PixelOffset]:
    """
    Calculate the pixel position of a viewing angle on the viewport.

    :param target: Viewing angle whose position is requested
    :param current: Current point of view of the viewer (heading, pitch, zoom)
    :param viewport: Current viewport size
    :return: Offset from the top-left corner of the viewport, or None when
        the target cannot be projected (behind the camera or degenerate)
    :raises ValueError: if the viewport is empty
    """
    viewport.validate()

    f = focal_length(current.zoom, viewport.width)

    # Both directions on the sphere of radius f
    d = geometry_utils.spherical_to_cartesian(
        target.heading * DEG_TO_RAD, target.pitch * DEG_TO_RAD, f)
    n = geometry_utils.spherical_to_cartesian(
        current.heading * DEG_TO_RAD, current.pitch * DEG_TO_RAD, f)

    n_dot_d = geometry_utils.dot_product(n, d)
    n_dot_c = geometry_utils.dot_product(n, n)

    if abs(n_dot_d) < PARALLEL_EPSILON:
        return None

    t = n_dot_c / n_dot_d
    if t < 0.0:
        return None

    basis = image_plane_basis(ViewingAngle(current.heading, current.pitch))
    if basis is None:
        return None
    right, up = basis

    hit = geometry_utils.scale_vector(d, t)
    du = geometry_utils.dot_product(hit, right)
    dv = geometry_utils.dot_product(hit, up)

    # Screen y grows downwards
    return PixelOffset(viewport.width / 2 + du, viewport.height / 2 - dv)
