"""
GUI Panels Package

Contains all panel widgets for the application.
"""

from .loader_panel import LoaderPanel
from .viewer_panel import ViewerPanel
from .capture_panel import CapturePanel
from .gallery_panel import GalleryPanel
from .log_panel import LogViewerPanel

__all__ = [
    'LoaderPanel',
    'ViewerPanel',
    'CapturePanel',
    'GalleryPanel',
    'LogViewerPanel',
]
