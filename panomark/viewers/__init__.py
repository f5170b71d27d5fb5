from panomark.viewers.base_viewer import BaseViewer, PanoramaViewerProtocol
from panomark.viewers.panorama_viewer import PanoramaViewer
from panomark.viewers.camera.camera_state import PanoramaPov, PovStateManager
from panomark.viewers.camera.camera_controller import PovController

__all__ = [
    "BaseViewer",
    "PanoramaViewerProtocol",
    "PanoramaViewer",
    "PanoramaPov",
    "PovStateManager",
    "PovController",
]
