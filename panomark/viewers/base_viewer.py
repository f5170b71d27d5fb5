"""Base viewer class for panorama viewers"""
from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from typing import Callable, Protocol

from PySide6 import QtCore, QtGui, QtWidgets

from panomark.app.app_settings_manager import AppSettingsManager
from panomark.core.projection import PixelOffset, ViewingAngle, ViewportSize, pov_to_pixel
from panomark.viewers.camera.camera_controller import PovController
from panomark.viewers.camera.camera_state import PanoramaPov, PovStateManager

logger = logging.getLogger(__name__)

# One wheel notch in QWheelEvent.angleDelta() units
WHEEL_NOTCH = 120


class PanoramaViewerProtocol(Protocol):
    """What a marker needs from the viewer it is bound to."""

    def get_pov(self) -> PanoramaPov: ...

    def get_viewport_size(self) -> ViewportSize: ...

    def get_container(self) -> QtWidgets.QWidget: ...

    def add_pov_changed_callback(self, callback: Callable[[PanoramaPov], None]) -> None: ...

    def remove_pov_changed_callback(self, callback: Callable[[PanoramaPov], None]) -> None: ...

    def add_resize_callback(self, callback: Callable[[ViewportSize], None]) -> None: ...

    def remove_resize_callback(self, callback: Callable[[ViewportSize], None]) -> None: ...


class ABCQtMeta(ABCMeta, type(QtWidgets.QWidget)):
    """
    Metaclass that combines ABCMeta and type(QWidget)
    """
    pass


class BaseViewer(QtWidgets.QWidget, metaclass=ABCQtMeta):
    """
    Base class for panorama viewers

    Provides common functionality:
    - POV state and controller
    - POV change and viewport resize notifications
    - Mouse drag panning, wheel zoom and keyboard navigation

    Subclasses should implement:
    - paint_scene(): Paint the view for the current POV
    """

    # Signals
    povChanged = QtCore.Signal(object)
    viewportResized = QtCore.Signal(object)

    def __init__(
            self,
            settings_manager: AppSettingsManager | None = None,
            parent: QtWidgets.QWidget | None = None,
    ) -> None:
        """
        Initialize the base viewer.
        :param settings_manager: Application settings manager
        :param parent: Parent widget
        """
        super().__init__(parent)
        self.setting = settings_manager or AppSettingsManager()

        self.pov_controller = PovController(PovStateManager(max_zoom=self.setting.max_zoom))
        self.pov_controller.add_pov_changed_callback(self._on_pov_changed)
        self._resize_callbacks: list[Callable[[ViewportSize], None]] = []

        self._dragging = False
        self._last_pos = QtCore.QPointF()

        self.setFocusPolicy(QtCore.Qt.StrongFocus)
        self.setMinimumSize(160, 120)

        logger.debug("Base viewer created.")

    @abstractmethod
    def paint_scene(self, painter: QtGui.QPainter) -> None:
        """
        Paint the scene for the current POV.

        Subclasses should implement this method. The painter is already
        active on this widget.
        """
        pass

    # =====================================================
    # Viewer interface used by markers
    # =====================================================

    def get_pov(self) -> PanoramaPov:
        return self.pov_controller.pov

    def get_viewport_size(self) -> ViewportSize:
        return ViewportSize(self.width(), self.height())

    def get_container(self) -> QtWidgets.QWidget:
        return self

    def add_pov_changed_callback(self, callback: Callable[[PanoramaPov], None]) -> None:
        self.pov_controller.add_pov_changed_callback(callback)

    def remove_pov_changed_callback(self, callback: Callable[[PanoramaPov], None]) -> None:
        self.pov_controller.remove_pov_changed_callback(callback)

    def add_resize_callback(self, callback: Callable[[ViewportSize], None]) -> None:
        """
        Add a callback for viewport resizes.

        Callback signature: callback(size: ViewportSize)-> None
        """
        self._resize_callbacks.append(callback)

    def remove_resize_callback(self, callback: Callable[[ViewportSize], None]) -> None:
        self._resize_callbacks.remove(callback)

    def project(self, angle: ViewingAngle) -> PixelOffset | None:
        """Pixel position of angle in the current view, None if not visible."""
        return pov_to_pixel(angle, self.get_pov(), self.get_viewport_size())

    # =====================================================
    # Callbacks
    # =====================================================

    def _on_pov_changed(self, pov: PanoramaPov) -> None:
        self.povChanged.emit(pov)
        self.update()

    def _notify_resized(self, size: ViewportSize) -> None:
        for callback in list(self._resize_callbacks):
            try:
                callback(size)
            except Exception as e:
                logger.exception(f"Error in resize callback: {e}")
        self.viewportResized.emit(size)

    # =====================================================
    # Qt events
    # =====================================================

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:
        super().resizeEvent(event)
        size = self.get_viewport_size()
        logger.debug("Viewport resized: %sx%s", size.width, size.height)
        self._notify_resized(size)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        try:
            painter.setRenderHint(QtGui.QPainter.Antialiasing)
            self.paint_scene(painter)
        finally:
            painter.end()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() == QtCore.Qt.LeftButton:
            self._dragging = True
            self._last_pos = event.position()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        if not self._dragging:
            super().mouseMoveEvent(event)
            return
        pos = event.position()
        delta = pos - self._last_pos
        self._last_pos = pos
        self.drag_by(delta.x(), delta.y())

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() == QtCore.Qt.LeftButton:
            self._dragging = False
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:
        notches = event.angleDelta().y() / WHEEL_NOTCH
        if notches:
            self.pov_controller.zoom_by(notches * self.setting.zoom_step)
        event.accept()

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:
        step = self.setting.rotation_step_deg
        key = event.key()
        if key == QtCore.Qt.Key_Left:
            self.pov_controller.rotate(-step, 0.0)
        elif key == QtCore.Qt.Key_Right:
            self.pov_controller.rotate(step, 0.0)
        elif key == QtCore.Qt.Key_Up:
            self.pov_controller.rotate(0.0, step)
        elif key == QtCore.Qt.Key_Down:
            self.pov_controller.rotate(0.0, -step)
        elif key in (QtCore.Qt.Key_Plus, QtCore.Qt.Key_Equal):
            self.pov_controller.zoom_by(self.setting.zoom_step)
        elif key == QtCore.Qt.Key_Minus:
            self.pov_controller.zoom_by(-self.setting.zoom_step)
        else:
            super().keyPressEvent(event)

    def drag_by(self, dx: float, dy: float) -> PanoramaPov:
        """
        Pan the view as if the scene was grabbed and moved by (dx, dy) pixels.

        :param dx: Horizontal drag in pixels (right is positive)
        :param dy: Vertical drag in pixels (down is positive)
        :return: New point of view
        """
        width = max(1, self.width())
        deg_per_px = self.pov_controller.fov / width * self.setting.drag_sensitivity
        return self.pov_controller.rotate(-dx * deg_per_px, dy * deg_per_px)

    # =====================================================
    # View operations
    # =====================================================

    def front_view(self) -> None:
        self.pov_controller.set_preset_view("front")

    def back_view(self) -> None:
        self.pov_controller.set_preset_view("back")

    def left_view(self) -> None:
        self.pov_controller.set_preset_view("left")

    def right_view(self) -> None:
        self.pov_controller.set_preset_view("right")

    def zoom_in(self) -> None:
        self.pov_controller.zoom_by(self.setting.zoom_step)

    def zoom_out(self) -> None:
        self.pov_controller.zoom_by(-self.setting.zoom_step)

    def reset_view(self) -> None:
        self.pov_controller.reset()
