from __future__ import annotations

from typing import Literal

import logging

from panomark.core.fov import get_fov
from panomark.viewers.camera.camera_state import PanoramaPov, PovStateManager

logger = logging.getLogger(__name__)

ViewDirection = Literal['front', 'back', 'left', 'right', 'up', 'down']


class PovPreset:
    """POV preset configuration for standard views."""

    # Heading and pitch for each view, zoom is kept.
    ANGLES: dict[ViewDirection, tuple[float, float]] = {
        'front': (0.0, 0.0),
        'back': (180.0, 0.0),
        'left': (270.0, 0.0),
        'right': (90.0, 0.0),
        'up': (0.0, 90.0),
        'down': (0.0, -90.0),
    }


class PovController:
    """Handles point-of-view operations."""

    def __init__(self, state: PovStateManager | None = None, default_zoom: float = 1.0) -> None:
        self.state = state or PovStateManager()
        self._default_zoom = default_zoom
        self.state.set_zoom(default_zoom)

    @property
    def pov(self) -> PanoramaPov:
        return self.state.pov

    @property
    def fov(self) -> float:
        """Current horizontal field of view in degrees."""
        return get_fov(self.state.zoom)

    def add_pov_changed_callback(self, callback: callable) -> None:
        """Add a callback for POV changes."""
        self.state.add_pov_changed_callback(callback)

    def remove_pov_changed_callback(self, callback: callable) -> None:
        self.state.remove_pov_changed_callback(callback)

    def set_pov(self, heading: float, pitch: float, zoom: float | None = None) -> PanoramaPov:
        self.state.set_pov(heading, pitch, zoom)
        return self.state.pov

    def rotate(self, delta_heading: float, delta_pitch: float) -> PanoramaPov:
        """
        Rotate the view by delta angles

        :param delta_heading: Heading change in degrees
        :param delta_pitch: Pitch change in degrees
        return: New point of view
        """
        pov = self.state.pov
        self.state.set_pov(pov.heading + delta_heading, pov.pitch + delta_pitch)

        logger.debug(f"View rotation: {delta_heading}, {delta_pitch}")
        return self.state.pov

    def set_zoom(self, zoom: float) -> PanoramaPov:
        """Set the absolute zoom level (clamped to [0, max_zoom])."""
        self.state.set_zoom(zoom)
        logger.debug(f"Zoom level: {self.state.zoom}, fov: {self.fov:.2f}")
        return self.state.pov

    def zoom_by(self, delta: float) -> PanoramaPov:
        """Change the zoom level by delta (positive zooms in)."""
        return self.set_zoom(self.state.zoom + delta)

    def set_preset_view(self, view: ViewDirection) -> PanoramaPov:
        """Set the view to a preset direction keeping the zoom level."""
        view = view.lower()

        if view not in PovPreset.ANGLES:
            logger.warning(f"Invalid view direction: {view}")
            return self.state.pov

        heading, pitch = PovPreset.ANGLES[view]
        self.state.set_pov(heading, pitch)

        logger.info(f"Preset view: {view}, angles: {(heading, pitch)}")
        return self.state.pov

    def reset(self) -> PanoramaPov:
        """Reset to the front view at the default zoom."""
        self.state.set_pov(PanoramaPov(0.0, 0.0, self._default_zoom))
        return self.state.pov
