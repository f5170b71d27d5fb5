from panomark.markers.pano_marker import PanoMarker
from panomark.markers.marker_widget import MarkerWidget

__all__ = [
    "PanoMarker",
    "MarkerWidget",
]
