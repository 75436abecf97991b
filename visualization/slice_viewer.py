"""
Slice Viewer

Framework-agnostic 2D slice and MPR rendering for volumetric data.
Turns a series volume plus view parameters into a display-ready uint8 image.
"""

from typing import Tuple
import numpy as np
from scipy import ndimage

from core.volume import SeriesVolume, PLANE_AXES, apply_window
from .state_generator import ViewParameters


# Slab projections over the slab axis
SLAB_PROJECTIONS = {
    "mip": np.max,
    "minip": np.min,
    "average": np.mean,
}


def slab_range(
    index: int,
    num_slices: int,
    thickness_mm: float,
    spacing_mm: float
) -> Tuple[int, int]:
    """
    Slice range [start, stop) covered by a slab centered on index.

    Args:
        index: Center slice
        num_slices: Slices along the slab axis
        thickness_mm: Slab thickness in mm
        spacing_mm: Slice spacing along the slab axis in mm

    Returns:
        (start, stop), clipped to the volume
    """
    count = max(1, int(round(thickness_mm / max(spacing_mm, 1e-6))))
    start = index - (count - 1) // 2
    stop = start + count
    return max(0, start), min(num_slices, stop)


def in_plane_spacing(volume: SeriesVolume, axis: int) -> Tuple[float, float]:
    """(row, column) spacing in mm of a plane cut perpendicular to axis."""
    remaining = [a for a in range(3) if a != axis]
    return volume.spacing[remaining[0]], volume.spacing[remaining[1]]


def extract_plane(
    volume: SeriesVolume,
    orientation: str,
    index: int,
    slab_type: str = "none",
    slab_thickness_mm: float = 0.0
) -> np.ndarray:
    """
    Extract a plane (optionally slab-projected) from a volume.

    The volume is only read; the returned array is always a new float32 array.

    Args:
        volume: Source series
        orientation: "axial", "coronal" or "sagittal"
        index: Slice index along the orientation's axis (clipped to range)
        slab_type: "none", "mip", "minip" or "average"
        slab_thickness_mm: Slab thickness in mm (ignored for "none")

    Returns:
        2D float32 array in HU
    """
    axis = PLANE_AXES[orientation]
    num_slices = volume.slice_count(axis)
    index = max(0, min(index, num_slices - 1))

    if slab_type == "none" or slab_thickness_mm <= 0:
        plane = volume.get_slice(index, axis).astype(np.float32)
    else:
        start, stop = slab_range(index, num_slices, slab_thickness_mm, volume.spacing[axis])
        slab = np.take(volume.data, np.arange(start, stop), axis=axis)
        plane = SLAB_PROJECTIONS[slab_type](slab, axis=axis).astype(np.float32)

    # Reformatted planes have Z as rows; show superior at the top
    if axis != 0:
        plane = np.flipud(plane)
    return plane


def correct_aspect(plane: np.ndarray, row_spacing: float, col_spacing: float) -> np.ndarray:
    """Resample a plane so that pixels are square in physical space."""
    if np.isclose(row_spacing, col_spacing):
        return plane
    base = min(row_spacing, col_spacing)
    zoom = (row_spacing / base, col_spacing / base)
    return ndimage.zoom(plane, zoom, order=1)


def render_view(volume: SeriesVolume, view: ViewParameters) -> np.ndarray:
    """
    Render view parameters against a volume.

    Returns:
        2D uint8 array ready for display
    """
    plane = extract_plane(
        volume,
        view.orientation,
        view.slice_index,
        view.slab_type,
        view.slab_thickness_mm
    )
    row_spacing, col_spacing = in_plane_spacing(volume, PLANE_AXES[view.orientation])
    plane = correct_aspect(plane, row_spacing, col_spacing)
    return apply_window(plane, view.window_center, view.window_width)
