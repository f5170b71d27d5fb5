import copy
import logging

from PySide6 import QtCore
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QLabel, QMainWindow

from panomark.app.app_settings_manager import AppSettingsManager
from panomark.core.projection import ViewingAngle
from panomark.markers.pano_marker import PanoMarker
from panomark.status import STATUS_FIELDS, StatusField
from panomark.viewers.camera.camera_state import PanoramaPov
from panomark.viewers.panorama_viewer import PanoramaViewer

logger = logging.getLogger(__name__)

# (id, title, heading, pitch)
DEMO_MARKERS = (
    ("north", "North", 0.0, 0.0),
    ("east", "East", 90.0, 0.0),
    ("south", "South", 180.0, 0.0),
    ("west", "West", 270.0, 0.0),
    ("sky", "Up 30°", 45.0, 30.0),
    ("floor", "Down 30°", 225.0, -30.0),
)


class MainWindow(QMainWindow):
    """Main window showing a panorama viewer with demo markers."""

    def __init__(self, settings_mgr: AppSettingsManager | None = None):
        """
        Initialize the main window.

        :param settings_mgr: Application settings manager.
        """
        super().__init__()

        self.setting = settings_mgr or AppSettingsManager()

        # Status fields
        self.status_fields: dict[str, StatusField] = {
            k: copy.deepcopy(v) for k, v in STATUS_FIELDS.items()
        }
        self._status_label: dict[str, QLabel] = {}

        self.setWindowTitle("PanoMark - Panorama Markers")
        self._setup_ui()
        self._setup_markers()
        self._setup_menus()
        self._setup_status_bar()
        self._on_pov_changed(self.viewer.get_pov())

    def _setup_ui(self) -> None:
        """Setup the main UI layout"""
        self.viewer = PanoramaViewer(settings_manager=self.setting, parent=self)
        self.setCentralWidget(self.viewer)
        self.setGeometry(100, 100, 1024, 640)

        self.viewer.povChanged.connect(self._on_pov_changed)

    def _setup_markers(self) -> None:
        self.markers: list[PanoMarker] = []
        for marker_id, title, heading, pitch in DEMO_MARKERS:
            marker = PanoMarker(
                self.viewer,
                ViewingAngle(heading, pitch),
                title=title,
                settings_manager=self.setting,
            )
            self.markers.append(marker)
            logger.debug("Demo marker %s at %s", marker_id, marker.get_position())

    def _setup_menus(self) -> None:
        """Create the menus for the main window."""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("&File")
        file_menu.addAction("&Quit", self.close)

        # View menu
        view_menu = menubar.addMenu("&View")
        view_menu.addAction("&Reset View", self.viewer.reset_view)
        view_menu.addAction("Front view", self.viewer.front_view)
        view_menu.addAction("Back view", self.viewer.back_view)
        view_menu.addAction("Left view", self.viewer.left_view)
        view_menu.addAction("Right view", self.viewer.right_view)
        view_menu.addSeparator()
        view_menu.addAction("Zoom in", self.viewer.zoom_in)
        view_menu.addAction("Zoom out", self.viewer.zoom_out)

        # Marker menu
        marker_menu = menubar.addMenu("&Markers")
        self.show_markers_action = QAction("Show markers", self)
        self.show_markers_action.setCheckable(True)
        self.show_markers_action.setChecked(True)
        self.show_markers_action.toggled.connect(self.set_markers_visible)
        marker_menu.addAction(self.show_markers_action)

        self.hide_offscreen_action = QAction("Hide markers that can't be projected", self)
        self.hide_offscreen_action.setCheckable(True)
        self.hide_offscreen_action.setChecked(self.setting.hide_when_not_visible)
        self.hide_offscreen_action.toggled.connect(self.set_hide_when_not_visible)
        marker_menu.addAction(self.hide_offscreen_action)

    def _setup_status_bar(self) -> None:
        for key, field in self.status_fields.items():
            label = QLabel(field.text(), self)
            self.statusBar().addPermanentWidget(label)
            self._status_label[key] = label

    def update_status(self, **kwargs) -> None:
        """Update the status fields with the given keyword arguments and refresh the labels."""
        for key, value in kwargs.items():
            field = self.status_fields.get(key)
            if field is None:
                continue
            field.value = value
            label = self._status_label.get(key)
            if label is not None:
                label.setText(field.text())

    @QtCore.Slot(object)
    def _on_pov_changed(self, pov: PanoramaPov) -> None:
        self.update_status(heading=pov.heading, pitch=pov.pitch, zoom=pov.zoom, fov=pov.zoom)

    def set_markers_visible(self, show: bool) -> None:
        for marker in self.markers:
            marker.set_visible(show)

    def set_hide_when_not_visible(self, hide: bool) -> None:
        self.setting.set_hide_when_not_visible(hide)
        for marker in self.markers:
            marker.set_hide_when_not_visible(hide)

    def closeEvent(self, event) -> None:
        for marker in self.markers:
            marker.close()
        self.markers.clear()
        super().closeEvent(event)
