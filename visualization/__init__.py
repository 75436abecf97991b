"""
Visualization Package

Contains the slice/MPR viewer used both on screen and for offscreen capture.
"""

from .slice_viewer import render_view, extract_plane, slab_range
from .state_generator import ViewParameters, sample_indices
from .surface import OffscreenSurface
from .viewer_controller import ViewerController

__all__ = [
    'render_view',
    'extract_plane',
    'slab_range',
    'ViewParameters',
    'sample_indices',
    'OffscreenSurface',
    'ViewerController',
]
