"""GUI package for CT Batch Capture."""

from .panels import LoaderPanel, ViewerPanel, CapturePanel, GalleryPanel, LogViewerPanel
from .main_window import MainWindow
from .style import ScientificStyle
from .workers import DICOMLoaderWorker, PhantomWorker, ExportWorker

__all__ = [
    "MainWindow",
    "ScientificStyle",
    "LoaderPanel",
    "ViewerPanel",
    "CapturePanel",
    "GalleryPanel",
    "LogViewerPanel",
    "DICOMLoaderWorker",
    "PhantomWorker",
    "ExportWorker",
]
