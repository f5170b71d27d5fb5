"""Display element of a panorama marker."""
from __future__ import annotations

import logging

from PySide6 import QtCore, QtGui, QtWidgets

logger = logging.getLogger(__name__)

DEFAULT_DOT_COLOR = QtGui.QColor(234, 67, 53)


def default_marker_pixmap(size: QtCore.QSize) -> QtGui.QPixmap:
    """Red dot used when a marker has neither icon, id nor class name."""
    pixmap = QtGui.QPixmap(size)
    pixmap.fill(QtCore.Qt.transparent)
    painter = QtGui.QPainter(pixmap)
    try:
        painter.setRenderHint(QtGui.QPainter.Antialiasing)
        painter.setPen(QtGui.QPen(DEFAULT_DOT_COLOR.darker(150), 1))
        painter.setBrush(DEFAULT_DOT_COLOR)
        margin = max(1, min(size.width(), size.height()) // 8)
        painter.drawEllipse(QtCore.QRect(QtCore.QPoint(0, 0), size).adjusted(
            margin, margin, -margin, -margin))
    finally:
        painter.end()
    return pixmap


class MarkerWidget(QtWidgets.QLabel):
    """Fixed-size label positioned absolutely inside the viewer container."""

    def __init__(self, size: QtCore.QSize, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setFixedSize(size)
        self.setScaledContents(True)
        self.setCursor(QtCore.Qt.PointingHandCursor)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground)

    def apply_icon(self, icon: str | None, use_default: bool) -> None:
        """
        Show the image at icon, or the default dot if use_default is set.

        :param icon: Path to an image file, or None
        :param use_default: Fall back to the default dot when icon is None
        """
        if icon:
            pixmap = QtGui.QPixmap(icon)
            if pixmap.isNull():
                logger.warning("Marker icon could not be loaded: %s", icon)
            self.setPixmap(pixmap)
        elif use_default:
            self.setPixmap(default_marker_pixmap(self.size()))
        else:
            self.clear()
