"""
PanoMarker - a marker pinned to a heading/pitch inside a panorama viewer.

The marker widget sits on top of the viewer's container. Whenever the
viewer's point of view or viewport size changes, the target angle is
projected again and the widget is moved so that its anchor lands on the
projected pixel.

Design principles:
- The viewer is referenced, never owned. Binding subscribes to the viewer's
  POV and resize callbacks, unbinding cancels both.
- The screen position is always derived from the last successful projection.
- A target that cannot be projected is hidden, or left at its last position
  when hide_when_not_visible is off.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from numbers import Real
from typing import Iterator

from PySide6 import QtCore

from panomark.app.app_settings_manager import AppSettingsManager
from panomark.core.projection import PixelOffset, ViewingAngle, ViewportSize, pov_to_pixel
from panomark.markers.marker_widget import MarkerWidget
from panomark.utils.log_util import log_io
from panomark.viewers.base_viewer import PanoramaViewerProtocol
from panomark.viewers.camera.camera_state import PanoramaPov

logger = logging.getLogger(__name__)


def _to_viewing_angle(position, pitch: float | None = None) -> ViewingAngle:
    if isinstance(position, ViewingAngle):
        return position
    if isinstance(position, PanoramaPov):
        return position.angle
    if isinstance(position, (tuple, list)) and len(position) == 2:
        return ViewingAngle(float(position[0]), float(position[1]))
    if isinstance(position, Real) and not isinstance(position, bool):
        if pitch is None:
            raise TypeError("Pitch is required when position is a heading value.")
        return ViewingAngle(float(position), float(pitch))
    raise TypeError(f"Unsupported marker position: {position!r}")


class PanoMarker:
    """
    Marker that can be placed inside a panorama viewer.

    Usage:
    >>> marker = PanoMarker(viewer, ViewingAngle(90, 10), title="Door")
    >>> marker.set_position(120, pitch=5)
    >>> marker.set_pano(None)  # remove from the viewer
    """

    def __init__(
            self,
            pano: PanoramaViewerProtocol | None = None,
            position: ViewingAngle | tuple[float, float] | None = None,
            *,
            marker_id: str | None = None,
            class_name: str | None = None,
            icon: str | None = None,
            title: str | None = None,
            visible: bool = True,
            size: QtCore.QSize | None = None,
            anchor: QtCore.QPoint | None = None,
            hide_when_not_visible: bool | None = None,
            settings_manager: AppSettingsManager | None = None,
    ) -> None:
        """
        :param pano: Viewer to display the marker in, or None
        :param position: Heading/pitch at which the marker is shown
        :param marker_id: Identifier, assigned as the widget's object name
        :param class_name: Style class, assigned as the widget's "class" property
        :param icon: Path to an image file
        :param title: Rollover text
        :param visible: Whether the marker is shown
        :param size: Widget size in pixels
        :param anchor: Pixel inside the widget that lands on the position
        :param hide_when_not_visible: Hide the widget while its position
            cannot be projected. Taken from the settings when None.
        :param settings_manager: Application settings manager
        """
        self.setting = settings_manager or AppSettingsManager()

        self._position = ViewingAngle() if position is None else _to_viewing_angle(position)
        self._id = marker_id
        self._class = class_name
        self._icon = icon
        self._title = title
        self._visible = bool(visible)

        default_size = self.setting.default_marker_size
        self._size = QtCore.QSize(size) if size is not None else QtCore.QSize(default_size, default_size)
        if anchor is not None:
            self._anchor = QtCore.QPoint(anchor)
        else:
            self._anchor = QtCore.QPoint(self._size.width() // 2, self._size.height() // 2)

        if hide_when_not_visible is None:
            hide_when_not_visible = self.setting.hide_when_not_visible
        self._hide_when_not_visible = hide_when_not_visible

        self._pano: PanoramaViewerProtocol | None = None
        self._last_offset: PixelOffset | None = None
        self._lock = threading.RLock()

        self._widget = self._create_widget()
        self.set_pano(pano)

    def __repr__(self) -> str:
        return f"PanoMarker(id={self._id!r}, position={self._position})"

    # =====================================================
    # Widget
    # =====================================================

    def _create_widget(self) -> MarkerWidget:
        widget = MarkerWidget(self._size)
        if self._id:
            widget.setObjectName(self._id)
        if self._class:
            widget.setProperty("class", self._class)
        if self._title:
            widget.setToolTip(self._title)
        widget.apply_icon(self._icon, use_default=self._needs_default_icon())
        widget.hide()
        return widget

    def _needs_default_icon(self) -> bool:
        # Without icon, id or class nothing would style the widget.
        return not (self._id or self._class or self._icon)

    @property
    def widget(self) -> MarkerWidget:
        return self._widget

    def is_displayed(self) -> bool:
        """True if the widget is currently shown inside a viewer."""
        return self._pano is not None and not self._widget.isHidden()

    def _update_display(self) -> None:
        show = self._visible and self._pano is not None
        if show and self._hide_when_not_visible:
            show = self._last_offset is not None
        self._widget.setVisible(show)

    # =====================================================
    # Drawing
    # =====================================================

    def draw(self) -> PixelOffset | None:
        """
        Project the position for the bound viewer and move the widget.

        :return: Projected pixel of the position, None if unbound or not
            visible
        """
        with self._lock:
            if self._pano is None:
                return None

            viewport: ViewportSize = self._pano.get_viewport_size()
            if viewport.width <= 0 or viewport.height <= 0:
                logger.debug("Skipping draw of %r, empty viewport", self)
                return None

            offset = pov_to_pixel(self._position, self._pano.get_pov(), viewport)
            if offset is not None:
                left, top = offset.translated(-self._anchor.x(), -self._anchor.y()).rounded()
                self._widget.move(left, top)
            self._last_offset = offset
            self._update_display()
            return offset

    def _on_pov_changed(self, pov: PanoramaPov) -> None:
        self.draw()

    def _on_viewport_resized(self, size: ViewportSize) -> None:
        self.draw()

    # =====================================================
    # Binding
    # =====================================================

    def get_pano(self) -> PanoramaViewerProtocol | None:
        return self._pano

    @log_io()
    def set_pano(self, pano: PanoramaViewerProtocol | None) -> None:
        """
        Add the marker to a viewer, or remove it with None.

        Binding to a new viewer unbinds from the previous one first.
        Unbinding an unbound marker does nothing.
        """
        with self._lock:
            if pano is not self._pano:
                self._detach()
                if pano is not None:
                    self._attach(pano)
            self.draw()
            self._update_display()

    def _attach(self, pano: PanoramaViewerProtocol) -> None:
        self._widget.setParent(pano.get_container())
        self._widget.raise_()
        pano.add_pov_changed_callback(self._on_pov_changed)
        pano.add_resize_callback(self._on_viewport_resized)
        self._pano = pano
        logger.debug("%r bound to %r", self, pano)

    def _detach(self) -> None:
        pano = self._pano
        if pano is None:
            return
        pano.remove_pov_changed_callback(self._on_pov_changed)
        pano.remove_resize_callback(self._on_viewport_resized)
        self._widget.hide()
        self._widget.setParent(None)
        self._pano = None
        self._last_offset = None
        logger.debug("%r unbound from %r", self, pano)

    @contextmanager
    def bound_to(self, pano: PanoramaViewerProtocol) -> Iterator[PanoMarker]:
        """Bind to pano for the duration of the block."""
        self.set_pano(pano)
        try:
            yield self
        finally:
            self.set_pano(None)

    def close(self) -> None:
        """Unbind and release the widget. The marker can't be used afterwards."""
        with self._lock:
            self._detach()
            self._widget.deleteLater()

    # =====================================================
    # Properties
    # =====================================================

    def get_position(self) -> ViewingAngle:
        return self._position

    @log_io()
    def set_position(self, position: ViewingAngle | tuple[float, float] | float,
                     pitch: float | None = None) -> None:
        """
        Move the marker to a new heading/pitch. The change is drawn immediately.

        :param position: ViewingAngle, (heading, pitch) pair or heading value
        :param pitch: required when position is a heading value
        """
        self._position = _to_viewing_angle(position, pitch)
        self.draw()

    def get_id(self) -> str | None:
        return self._id

    def get_class_name(self) -> str | None:
        return self._class

    def get_title(self) -> str:
        """Rollover text, or an empty string if not set."""
        return self._title or ""

    def set_title(self, title: str | None) -> None:
        self._title = title
        self._widget.setToolTip(title or "")

    def get_icon(self) -> str | None:
        return self._icon

    def set_icon(self, icon: str | None) -> None:
        self._icon = icon
        self._widget.apply_icon(icon, use_default=self._needs_default_icon())

    def get_visible(self) -> bool:
        return self._visible

    def set_visible(self, show: bool) -> None:
        """Show or hide the marker. Subscriptions are kept."""
        self._visible = bool(show)
        self._update_display()

    def get_size(self) -> QtCore.QSize:
        return QtCore.QSize(self._size)

    def get_anchor(self) -> QtCore.QPoint:
        return QtCore.QPoint(self._anchor)

    def get_hide_when_not_visible(self) -> bool:
        return self._hide_when_not_visible

    def set_hide_when_not_visible(self, hide: bool) -> None:
        self._hide_when_not_visible = bool(hide)
        self._update_display()
