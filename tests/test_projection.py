import math

import pytest

from panomark.core import geometry_utils, projection
from panomark.core.projection import (
    PixelOffset,
    ViewingAngle,
    ViewportSize,
    focal_length,
    image_plane_basis,
    pov_to_pixel,
)
from panomark.viewers.camera.camera_state import PanoramaPov


def _approx_offset(offset: PixelOffset, left: float, top: float, abs_tol: float = 1e-6) -> None:
    assert offset is not None
    assert offset.left == pytest.approx(left, abs=abs_tol)
    assert offset.top == pytest.approx(top, abs=abs_tol)


@pytest.mark.parametrize("zoom", [0, 0.5, 1, 2, 3.7, 5])
@pytest.mark.parametrize("width, height", [(640, 480), (1, 1), (1920, 1080), (333, 777)])
@pytest.mark.parametrize("heading, pitch", [(0, 0), (123, 45), (-30, -60), (400, 10)])
def test_target_at_view_center(zoom, width, height, heading, pitch):
    """A target at the current POV is drawn at the viewport center"""
    offset = pov_to_pixel(
        ViewingAngle(heading, pitch),
        PanoramaPov(heading, pitch, zoom),
        ViewportSize(width, height),
    )
    _approx_offset(offset, width / 2, height / 2)


@pytest.mark.parametrize("heading", [0, 37, 90, 270.5])
@pytest.mark.parametrize("pitch", [0, 20, -40])
@pytest.mark.parametrize("zoom", [0, 1, 3])
def test_target_behind_is_not_visible(heading, pitch, zoom):
    offset = pov_to_pixel(
        ViewingAngle(heading + 180, pitch),
        PanoramaPov(heading, pitch, zoom),
        ViewportSize(640, 480),
    )
    assert offset is None


@pytest.mark.parametrize("delta", [15, 90, 180, -270, 360, 1234.5])
@pytest.mark.parametrize("target, current", [
    (ViewingAngle(10, 5), PanoramaPov(0, 0, 1)),
    (ViewingAngle(-20, -15), PanoramaPov(5, 10, 0)),
    (ViewingAngle(95, 30), PanoramaPov(80, 20, 2.5)),
    (ViewingAngle(200, 0), PanoramaPov(0, 0, 1)),
])
def test_projection_is_invariant_under_heading_rotation(delta, target, current):
    viewport = ViewportSize(800, 600)
    expected = pov_to_pixel(target, current, viewport)
    rotated = pov_to_pixel(
        target.rotated(delta_heading=delta),
        PanoramaPov(current.heading + delta, current.pitch, current.zoom),
        viewport,
    )
    if expected is None:
        assert rotated is None
    else:
        _approx_offset(rotated, expected.left, expected.top, abs_tol=1e-6)


def test_scenario_front_and_side_at_zoom_zero():
    viewer = PanoramaPov(0, 0, 0)
    viewport = ViewportSize(640, 480)

    _approx_offset(pov_to_pixel(ViewingAngle(0, 0), viewer, viewport), 320, 240)
    assert pov_to_pixel(ViewingAngle(90, 0), viewer, viewport) is None


def test_heading_offset_moves_right():
    """Heading increases clockwise, so a larger heading is drawn to the right"""
    viewport = ViewportSize(640, 480)
    f = focal_length(1, 640)

    offset = pov_to_pixel(ViewingAngle(10, 0), PanoramaPov(0, 0, 1), viewport)

    _approx_offset(offset, 320 + f * math.tan(math.radians(10)), 240)


def test_pitch_offset_moves_up():
    viewport = ViewportSize(640, 480)
    f = focal_length(1, 640)

    offset = pov_to_pixel(ViewingAngle(0, 10), PanoramaPov(0, 0, 1), viewport)

    _approx_offset(offset, 320, 240 - f * math.tan(math.radians(10)))


def test_half_fov_lands_on_viewport_edge():
    zoom = 1
    half_fov = projection.get_fov(zoom) / 2
    viewport = ViewportSize(640, 480)

    right_edge = pov_to_pixel(ViewingAngle(half_fov, 0), PanoramaPov(0, 0, zoom), viewport)
    left_edge = pov_to_pixel(ViewingAngle(-half_fov, 0), PanoramaPov(0, 0, zoom), viewport)

    _approx_offset(right_edge, 640, 240)
    _approx_offset(left_edge, 0, 240)


def test_only_viewer_zoom_sets_focal_length():
    viewport = ViewportSize(640, 480)
    wide = pov_to_pixel(ViewingAngle(10, 0), PanoramaPov(0, 0, 0), viewport)
    narrow = pov_to_pixel(ViewingAngle(10, 0), PanoramaPov(0, 0, 3), viewport)

    assert narrow.left - 320 > wide.left - 320 > 0


def test_resize_scales_offsets_and_keeps_visibility():
    target = ViewingAngle(25, -10)
    viewer = PanoramaPov(0, 0, 1)
    base = pov_to_pixel(target, viewer, ViewportSize(640, 480))

    for width, height in [(1280, 960), (320, 240), (1280, 480), (641, 1000)]:
        offset = pov_to_pixel(target, viewer, ViewportSize(width, height))
        assert offset is not None
        scale = width / 640
        assert offset.left - width / 2 == pytest.approx((base.left - 320) * scale)
        assert offset.top - height / 2 == pytest.approx((base.top - 240) * scale)


def test_near_side_plane_boundary():
    viewer = PanoramaPov(0, 0, 0)
    viewport = ViewportSize(640, 480)

    just_in_front = pov_to_pixel(ViewingAngle(89.9, 0), viewer, viewport)
    just_behind = pov_to_pixel(ViewingAngle(90.0001, 0), viewer, viewport)

    assert just_in_front is not None
    assert just_in_front.left > viewport.width
    assert just_behind is None


def test_parallel_threshold_is_strict(monkeypatch):
    """|n.d| equal to the threshold is still projected"""
    target = ViewingAngle(80, 0)
    viewer = PanoramaPov(0, 0, 1)
    viewport = ViewportSize(640, 480)

    f = focal_length(viewer.zoom, viewport.width)
    d = geometry_utils.spherical_to_cartesian(
        target.heading * projection.DEG_TO_RAD, target.pitch * projection.DEG_TO_RAD, f)
    n = geometry_utils.spherical_to_cartesian(
        viewer.heading * projection.DEG_TO_RAD, viewer.pitch * projection.DEG_TO_RAD, f)
    n_dot_d = geometry_utils.dot_product(n, d)

    monkeypatch.setattr(projection, "PARALLEL_EPSILON", n_dot_d)
    assert pov_to_pixel(target, viewer, viewport) is not None

    monkeypatch.setattr(projection, "PARALLEL_EPSILON", math.nextafter(n_dot_d, math.inf))
    assert pov_to_pixel(target, viewer, viewport) is None


@pytest.mark.parametrize("width, height", [(0, 480), (640, 0), (-1, 480), (0, 0)])
def test_empty_viewport_is_rejected(width, height):
    with pytest.raises(ValueError):
        pov_to_pixel(ViewingAngle(0, 0), PanoramaPov(0, 0, 1), ViewportSize(width, height))


def test_nan_angle_propagates():
    offset = pov_to_pixel(ViewingAngle(float("nan"), 0), PanoramaPov(0, 0, 1), ViewportSize(640, 480))
    assert offset is not None
    assert math.isnan(offset.left)
    assert math.isnan(offset.top)


def test_inputs_are_not_modified():
    target = ViewingAngle(370, 95)
    viewer = PanoramaPov(10, 5, 1.5)
    viewport = ViewportSize(640, 480)

    pov_to_pixel(target, viewer, viewport)

    assert target == ViewingAngle(370, 95)
    assert viewer == PanoramaPov(10, 5, 1.5)
    assert viewport == ViewportSize(640, 480)


@pytest.mark.parametrize("heading, pitch", [(0, 0), (45, 30), (200, -60), (-75, 89)])
def test_image_plane_basis_is_orthonormal(heading, pitch):
    right, up = image_plane_basis(ViewingAngle(heading, pitch))
    forward = geometry_utils.spherical_to_cartesian(math.radians(heading), math.radians(pitch))

    assert geometry_utils.calculate_norm(right) == pytest.approx(1.0)
    assert geometry_utils.calculate_norm(up) == pytest.approx(1.0)
    assert geometry_utils.dot_product(right, up) == pytest.approx(0.0, abs=1e-12)
    assert geometry_utils.dot_product(right, forward) == pytest.approx(0.0, abs=1e-12)
    assert geometry_utils.dot_product(up, forward) == pytest.approx(0.0, abs=1e-12)
    assert geometry_utils.cross_product(right, forward) == pytest.approx(up)


def test_viewport_and_offset_helpers():
    assert ViewportSize(640, 480).center == PixelOffset(320, 240)
    assert PixelOffset(10.4, 20.6).translated(-16, -16).rounded() == (-6, 5)
