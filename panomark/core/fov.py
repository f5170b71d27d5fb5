"""Zoom level to horizontal field-of-view mapping."""
from __future__ import annotations

# Observed horizontal FOV of the panorama viewer at integer zoom levels.
# The documented curve (180 / 2^zoom) drifts visibly from these at low zoom.
CALIBRATED_FOV: dict[int, float] = {
    0: 126.5,
    1: 90.0,
    2: 53.0,
    3: 28.0,
    4: 14.25,
    5: 7.25,
}

LINEAR_ZOOM_LIMIT = 2.0


def get_fov(zoom: float) -> float:
    """
    Return the horizontal field-of-view angle (degrees) for a zoom level.

    Linear descent up to zoom 2, inverse exponential above. The constants
    are fitted to CALIBRATED_FOV and both branches meet at ~53 degrees.

    :param zoom: Zoom level (>= 0, fractional values allowed)
    :return: Field of view in degrees
    """
    if zoom <= LINEAR_ZOOM_LIMIT:
        return 126.5 - zoom * 36.75  # linear descent
    return 195.93 / 1.92 ** zoom


def documented_fov(zoom: float) -> float:
    """FOV according to the 180/2^zoom curve. Kept for comparison only."""
    return 180.0 / 2.0 ** zoom
