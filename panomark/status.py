from dataclasses import dataclass
from typing import Callable

from panomark.core.fov import get_fov


@dataclass
class StatusField:
    """
    Represents a status field containing a label, format, formatter function, and a value.

    :ivar label: The label/name of the status field.
    :type label: str
    :ivar fmt: The format string used for formatting the field's value.
    :type fmt: str
    :ivar formatter: Callable function to format the field value. Defaults to a formatter
        using the provided `fmt` string, unless explicitly specified.
    :type formatter: Callable[[any], str]
    :ivar value: The numerical value associated with the status field, either a float or int.
    :type value: float | int
    """
    label: str
    fmt: str = "{}"
    formatter: Callable[[any], str] = None
    value: float | int = 0.0

    def __post_init__(self):
        if self.formatter is None:
            self.formatter = lambda v, fmt = self.fmt: fmt.format(v)

    def text(self) -> str:
        return f"{self.label}: {self.formatter(self.value)}"


_COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def format_heading(heading: float) -> str:
    """
    Format the heading in degrees with its compass point.
    0 -> N, 90 -> E
    """
    heading = heading % 360
    point = _COMPASS_POINTS[int((heading + 22.5) // 45) % 8]
    return f"{point} {heading:.1f}°"


def format_pitch(pitch: float) -> str:
    """
    Format the pitch in degrees.
    + -> UP
    - -> DOWN
    """
    angle = abs(pitch)
    if pitch >= 0:
        return f"UP {angle:.1f}°"
    else:
        return f"DOWN {angle:.1f}°"


def format_fov(zoom: float) -> str:
    """Format the field of view belonging to a zoom level."""
    return f"{get_fov(zoom):.1f}°"


# To add a value, add a field here and update it in MainWindow._on_pov_changed.
STATUS_FIELDS = {
    "heading": StatusField(label="Heading", formatter=format_heading),
    "pitch": StatusField(label="Pitch", formatter=format_pitch),
    "zoom": StatusField(label="Zoom", fmt="{:.2f}"),
    "fov": StatusField(label="FOV", formatter=format_fov, value=1.0),
}
