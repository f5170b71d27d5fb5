"""Point-of-view state management separated from UI concerns."""
from __future__ import annotations
from dataclasses import dataclass, replace
import logging

from panomark.core.projection import ViewingAngle

logger = logging.getLogger(__name__)

MIN_PITCH = -90.0
MAX_PITCH = 90.0
DEFAULT_MAX_ZOOM = 5.0


@dataclass(frozen=True)
class PanoramaPov:
    "Immutable point of view of a panorama viewer (degrees, zoom level)."
    heading: float = 0.0
    pitch: float = 0.0
    zoom: float = 1.0

    @property
    def angle(self) -> ViewingAngle:
        return ViewingAngle(self.heading, self.pitch)

    def normalized(self, max_zoom: float = DEFAULT_MAX_ZOOM) -> PanoramaPov:
        """Return a copy with heading in [0, 360), pitch and zoom clamped."""
        return PanoramaPov(
            heading=self.heading % 360,
            pitch=min(MAX_PITCH, max(MIN_PITCH, self.pitch)),
            zoom=min(max_zoom, max(0.0, self.zoom)),
        )

    def __str__(self) -> str:
        return f"Heading: {self.heading:.1f}, Pitch: {self.pitch:.1f}, Zoom: {self.zoom:.2f}"


class PovStateManager:
    """
    Manages the point of view (heading, pitch, zoom) independently.

    Responsible for:
    - Tracking the current POV, normalized.
    - Callbacks for POV changes.
    - Don't have concerns about UI.
    """

    def __init__(self, max_zoom: float = DEFAULT_MAX_ZOOM):
        self._max_zoom = max_zoom
        self._pov: PanoramaPov = PanoramaPov()
        self._on_pov_changed_callbacks: list[callable] = []

    @property
    def pov(self) -> PanoramaPov:
        """Get current point of view."""
        return self._pov

    @property
    def heading(self) -> float:
        return self._pov.heading

    @property
    def pitch(self) -> float:
        return self._pov.pitch

    @property
    def zoom(self) -> float:
        return self._pov.zoom

    @property
    def max_zoom(self) -> float:
        return self._max_zoom

    def set_pov(self, pov: PanoramaPov | float,
                pitch: float | None = None,
                zoom: float | None = None) -> None:
        """
        Set the point of view.

        :param pov: PanoramaPov object or heading value
        :param pitch: required when pov is a heading value
        :param zoom: optional zoom, keeps the current zoom if omitted
        """
        if isinstance(pov, PanoramaPov):
            new_pov = pov
        else:
            if pitch is None:
                raise TypeError("Pitch is required when pov is not a PanoramaPov object.")
            new_pov = PanoramaPov(pov, pitch, self._pov.zoom if zoom is None else zoom)

        new_pov = new_pov.normalized(self._max_zoom)
        if new_pov != self._pov:
            self._pov = new_pov
            self._notify_pov_changed()

    def set_zoom(self, zoom: float) -> None:
        self.set_pov(replace(self._pov, zoom=zoom))

    def add_pov_changed_callback(self, callback: callable) -> None:
        """
        Add a callback for POV changes.

        Callback signature: callback(pov: PanoramaPov)-> None
        """
        self._on_pov_changed_callbacks.append(callback)

    def remove_pov_changed_callback(self, callback: callable) -> None:
        """Remove a callback for POV changes."""
        self._on_pov_changed_callbacks.remove(callback)

    def _notify_pov_changed(self) -> None:
        """Notify callbacks of POV changes."""
        for callback in list(self._on_pov_changed_callbacks):
            try:
                callback(self._pov)
            except Exception as e:
                logger.exception(f"Error in callback: {e}")
