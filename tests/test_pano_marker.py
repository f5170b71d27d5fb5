import math

import pytest
from PySide6 import QtCore, QtWidgets

from panomark.core.projection import ViewingAngle, ViewportSize, focal_length
from panomark.markers.pano_marker import PanoMarker
from panomark.viewers.camera.camera_state import PanoramaPov


class DummyViewer:
    """Viewer stand-in that fires callbacks on demand."""

    def __init__(self, container: QtWidgets.QWidget,
                 pov: PanoramaPov = PanoramaPov(0, 0, 1),
                 size: ViewportSize = ViewportSize(640, 480)):
        self.container = container
        self.pov = pov
        self.size = size
        self.pov_callbacks = []
        self.resize_callbacks = []

    def get_pov(self):
        return self.pov

    def get_viewport_size(self):
        return self.size

    def get_container(self):
        return self.container

    def add_pov_changed_callback(self, callback):
        self.pov_callbacks.append(callback)

    def remove_pov_changed_callback(self, callback):
        self.pov_callbacks.remove(callback)

    def add_resize_callback(self, callback):
        self.resize_callbacks.append(callback)

    def remove_resize_callback(self, callback):
        self.resize_callbacks.remove(callback)

    def pan(self, pov: PanoramaPov):
        self.pov = pov
        for callback in list(self.pov_callbacks):
            callback(pov)

    def resize(self, size: ViewportSize):
        self.size = size
        for callback in list(self.resize_callbacks):
            callback(size)


@pytest.fixture(autouse=True)
def _qt_app(qapp):
    """Marker widgets need a QApplication."""
    return qapp


@pytest.fixture
def container(qtbot):
    widget = QtWidgets.QWidget()
    widget.resize(640, 480)
    qtbot.addWidget(widget)
    return widget


@pytest.fixture
def viewer(container):
    return DummyViewer(container)


def _pos(marker: PanoMarker) -> tuple[int, int]:
    p = marker.widget.pos()
    return p.x(), p.y()


def test_defaults(settings_manager):
    marker = PanoMarker(settings_manager=settings_manager)

    assert marker.get_pano() is None
    assert marker.get_position() == ViewingAngle(0, 0)
    assert marker.get_visible() is True
    assert marker.get_title() == ""
    assert marker.get_id() is None
    assert marker.get_size() == QtCore.QSize(32, 32)
    assert marker.get_anchor() == QtCore.QPoint(16, 16)
    assert marker.get_hide_when_not_visible() is True
    assert marker.is_displayed() is False


def test_bind_places_anchor_on_projected_point(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(0, 0), settings_manager=settings_manager)

    assert marker.get_pano() is viewer
    assert marker.widget.parent() is viewer.container
    assert _pos(marker) == (320 - 16, 240 - 16)
    assert marker.is_displayed()


def test_custom_anchor_and_size(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(0, 0),
                        size=QtCore.QSize(20, 40), anchor=QtCore.QPoint(10, 40),
                        settings_manager=settings_manager)

    assert marker.widget.size() == QtCore.QSize(20, 40)
    assert _pos(marker) == (310, 200)


def test_default_size_comes_from_settings(viewer, settings_manager):
    settings_manager.set_default_marker_size(48)
    marker = PanoMarker(viewer, settings_manager=settings_manager)

    assert marker.get_size() == QtCore.QSize(48, 48)
    assert marker.get_anchor() == QtCore.QPoint(24, 24)


def test_pov_change_moves_marker(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(10, 0), settings_manager=settings_manager)
    f = focal_length(1, 640)
    expected_left = round(320 + f * math.tan(math.radians(10))) - 16

    assert _pos(marker) == (expected_left, 224)

    viewer.pan(PanoramaPov(10, 0, 1))

    assert _pos(marker) == (304, 224)


def test_resize_recenters_marker(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(0, 0), settings_manager=settings_manager)

    viewer.resize(ViewportSize(1280, 960))

    assert _pos(marker) == (640 - 16, 480 - 16)


def test_set_position_redraws_immediately(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(30, 0), settings_manager=settings_manager)

    marker.set_position(ViewingAngle(0, 0))
    assert _pos(marker) == (304, 224)

    marker.set_position((0.0, 0.0))
    assert marker.get_position() == ViewingAngle(0, 0)

    marker.set_position(45, pitch=-5)
    assert marker.get_position() == ViewingAngle(45, -5)

    marker.set_position(PanoramaPov(12, 3, 4))
    assert marker.get_position() == ViewingAngle(12, 3)


@pytest.mark.parametrize("position, pitch", [("north", None), (45, None), ((1, 2, 3), None), (True, 0)])
def test_set_position_rejects_bad_values(settings_manager, position, pitch):
    marker = PanoMarker(settings_manager=settings_manager)
    with pytest.raises(TypeError):
        marker.set_position(position, pitch)


def test_unbind_removes_widget_and_subscriptions(viewer, settings_manager):
    marker = PanoMarker(viewer, settings_manager=settings_manager)
    assert len(viewer.pov_callbacks) == 1
    assert len(viewer.resize_callbacks) == 1

    marker.set_pano(None)

    assert marker.get_pano() is None
    assert viewer.pov_callbacks == []
    assert viewer.resize_callbacks == []
    assert marker.widget.parent() is None
    assert marker.widget.isHidden()

    # Double unbind is a no-op
    marker.set_pano(None)
    assert marker.get_pano() is None


def test_rebind_detaches_from_previous_viewer(qtbot, viewer, settings_manager):
    other_container = QtWidgets.QWidget()
    qtbot.addWidget(other_container)
    other = DummyViewer(other_container, pov=PanoramaPov(90, 0, 1))

    marker = PanoMarker(viewer, ViewingAngle(90, 0), settings_manager=settings_manager)
    marker.set_pano(other)

    assert viewer.pov_callbacks == [] and viewer.resize_callbacks == []
    assert len(other.pov_callbacks) == 1 and len(other.resize_callbacks) == 1
    assert marker.widget.parent() is other_container
    assert _pos(marker) == (304, 224)

    # Events of the old viewer no longer reach the marker
    viewer.pan(PanoramaPov(0, 0, 1))
    assert _pos(marker) == (304, 224)


def test_binding_same_viewer_twice_subscribes_once(viewer, settings_manager):
    marker = PanoMarker(viewer, settings_manager=settings_manager)
    marker.set_pano(viewer)

    assert len(viewer.pov_callbacks) == 1
    assert len(viewer.resize_callbacks) == 1


def test_not_visible_target_is_hidden(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(180, 0), hide_when_not_visible=True,
                        settings_manager=settings_manager)

    assert marker.draw() is None
    assert not marker.is_displayed()

    viewer.pan(PanoramaPov(180, 0, 1))

    assert marker.is_displayed()
    assert _pos(marker) == (304, 224)


def test_not_visible_target_keeps_last_position(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(0, 0), hide_when_not_visible=False,
                        settings_manager=settings_manager)
    assert _pos(marker) == (304, 224)

    viewer.pan(PanoramaPov(180, 0, 1))

    assert marker.draw() is None
    assert _pos(marker) == (304, 224)
    assert marker.is_displayed()


def test_hide_policy_defaults_to_settings(viewer, settings_manager):
    settings_manager.set_hide_when_not_visible(False)
    marker = PanoMarker(viewer, ViewingAngle(180, 0), settings_manager=settings_manager)

    assert marker.get_hide_when_not_visible() is False
    assert marker.is_displayed()

    marker.set_hide_when_not_visible(True)
    assert not marker.is_displayed()


def test_set_visible_keeps_subscriptions(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(0, 0), settings_manager=settings_manager)

    marker.set_visible(False)
    assert marker.get_visible() is False
    assert not marker.is_displayed()
    assert len(viewer.pov_callbacks) == 1

    viewer.pan(PanoramaPov(10, 0, 1))
    assert not marker.is_displayed()

    marker.set_visible(True)
    assert marker.is_displayed()
    assert _pos(marker)[0] < 304


def test_initially_invisible_marker(viewer, settings_manager):
    marker = PanoMarker(viewer, visible=False, settings_manager=settings_manager)
    assert not marker.is_displayed()


def test_title_and_icon(viewer, settings_manager):
    marker = PanoMarker(viewer, title="Door", settings_manager=settings_manager)
    assert marker.get_title() == "Door"
    assert marker.widget.toolTip() == "Door"

    marker.set_title("Window")
    assert marker.get_title() == "Window"
    assert marker.widget.toolTip() == "Window"

    marker.set_title(None)
    assert marker.get_title() == ""

    marker.set_icon("missing-icon.png")
    assert marker.get_icon() == "missing-icon.png"


def test_default_dot_only_without_id_class_or_icon(viewer, settings_manager):
    plain = PanoMarker(viewer, settings_manager=settings_manager)
    styled = PanoMarker(viewer, marker_id="door", class_name="exit",
                        settings_manager=settings_manager)

    assert not plain.widget.pixmap().isNull()
    assert styled.widget.pixmap().isNull()
    assert styled.get_id() == "door"
    assert styled.widget.objectName() == "door"
    assert styled.get_class_name() == "exit"
    assert styled.widget.property("class") == "exit"


def test_empty_viewport_skips_draw(viewer, settings_manager):
    marker = PanoMarker(viewer, ViewingAngle(0, 0), settings_manager=settings_manager)
    viewer.resize(ViewportSize(0, 0))

    assert marker.draw() is None
    assert _pos(marker) == (304, 224)


def test_bound_to_context_releases_viewer(viewer, settings_manager):
    marker = PanoMarker(settings_manager=settings_manager)

    with marker.bound_to(viewer) as bound:
        assert bound is marker
        assert marker.get_pano() is viewer
        assert len(viewer.pov_callbacks) == 1

    assert marker.get_pano() is None
    assert viewer.pov_callbacks == []


def test_close_unbinds(viewer, settings_manager):
    marker = PanoMarker(viewer, settings_manager=settings_manager)
    marker.close()

    assert marker.get_pano() is None
    assert viewer.pov_callbacks == []
    assert viewer.resize_callbacks == []
