"""Panorama viewer drawing a heading/pitch guide grid."""
from __future__ import annotations

import logging

from PySide6 import QtCore, QtGui, QtWidgets

from panomark.app.app_settings_manager import AppSettingsManager
from panomark.core.projection import PixelOffset, ViewingAngle
from panomark.viewers.base_viewer import BaseViewer

logger = logging.getLogger(__name__)

COMPASS_LABELS = {0.0: "N", 90.0: "E", 180.0: "S", 270.0: "W"}


class PanoramaViewer(BaseViewer):
    """
    Viewer painting meridians and parallels through the projector.

    Stands in for a real panorama renderer: every line is projected with
    the same math the markers use, so markers placed on grid crossings
    must stay on them while panning and zooming.
    """

    BACKGROUND = QtGui.QColor(24, 28, 36)
    GRID_COLOR = QtGui.QColor(90, 110, 140)
    HORIZON_COLOR = QtGui.QColor(220, 180, 90)

    def __init__(self,
                 settings_manager: AppSettingsManager | None = None,
                 parent: QtWidgets.QWidget | None = None,
                 grid_step_deg: float = 30.0,
                 sample_step_deg: float = 2.0) -> None:
        super().__init__(settings_manager=settings_manager, parent=parent)
        self.grid_step_deg = grid_step_deg
        self.sample_step_deg = sample_step_deg
        logger.debug("[PanoramaViewer] Initialized.")

    def paint_scene(self, painter: QtGui.QPainter) -> None:
        painter.fillRect(self.rect(), self.BACKGROUND)

        grid_pen = QtGui.QPen(self.GRID_COLOR, 1)
        horizon_pen = QtGui.QPen(self.HORIZON_COLOR, 2)

        # Meridians
        heading = 0.0
        while heading < 360.0:
            painter.setPen(grid_pen)
            self._draw_polyline(painter, [
                ViewingAngle(heading, pitch)
                for pitch in self._samples(-90.0, 90.0)
            ])
            heading += self.grid_step_deg

        # Parallels
        pitch = -90.0 + self.grid_step_deg
        while pitch < 90.0:
            painter.setPen(horizon_pen if pitch == 0.0 else grid_pen)
            self._draw_polyline(painter, [
                ViewingAngle(h, pitch) for h in self._samples(0.0, 360.0)
            ])
            pitch += self.grid_step_deg

        painter.setPen(QtGui.QPen(self.HORIZON_COLOR))
        for heading, label in COMPASS_LABELS.items():
            offset = self.project(ViewingAngle(heading, 0.0))
            if offset is not None:
                painter.drawText(QtCore.QPointF(offset.left + 4, offset.top - 4), label)

    def _samples(self, start: float, stop: float) -> list[float]:
        count = int(round((stop - start) / self.sample_step_deg))
        return [start + i * self.sample_step_deg for i in range(count + 1)]

    def _draw_polyline(self, painter: QtGui.QPainter, angles: list[ViewingAngle]) -> None:
        """Draw consecutive visible samples; a hidden sample breaks the line."""
        previous: PixelOffset | None = None
        for angle in angles:
            offset = self.project(angle)
            if offset is not None and previous is not None and self._is_near(previous, offset):
                painter.drawLine(QtCore.QPointF(previous.left, previous.top),
                                 QtCore.QPointF(offset.left, offset.top))
            previous = offset

    def _is_near(self, a: PixelOffset, b: PixelOffset) -> bool:
        # Samples close to the camera plane project very far away.
        limit = 4 * max(self.width(), self.height())
        return abs(a.left - b.left) < limit and abs(a.top - b.top) < limit
