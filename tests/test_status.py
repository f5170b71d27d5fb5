import pytest

from panomark.core.fov import get_fov
from panomark.status import STATUS_FIELDS, format_fov, format_heading, format_pitch


@pytest.mark.parametrize("heading, expected", [
    (0, "N 0.0°"),
    (44, "NE 44.0°"),
    (90, "E 90.0°"),
    (359, "N 359.0°"),
    (-90, "W 270.0°"),
])
def test_format_heading(heading, expected):
    assert format_heading(heading) == expected


def test_format_pitch():
    assert format_pitch(12.34) == "UP 12.3°"
    assert format_pitch(-5) == "DOWN 5.0°"


def test_format_fov_uses_zoom():
    assert format_fov(1) == f"{get_fov(1):.1f}°"


def test_status_field_text():
    field = STATUS_FIELDS["zoom"]
    assert field.formatter(1.5) == "1.50"
