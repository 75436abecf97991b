"""
Core Package

Contains the series data model, the session data cache and the abstract
viewer contract used by the capture pipeline.
"""

from .base import (
    ViewState,
    OutputSize,
    BaseViewerController,
)
from .volume import SeriesVolume, apply_window, PLANE_AXES
from .data_manager import DataCache, SharedDataCache

__all__ = [
    'ViewState',
    'OutputSize',
    'BaseViewerController',
    'SeriesVolume',
    'apply_window',
    'PLANE_AXES',
    'DataCache',
    'SharedDataCache',
]
