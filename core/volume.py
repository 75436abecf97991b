"""
Series Volume Data Structure

Defines the in-memory representation of one loaded imaging series.
"""

from dataclasses import dataclass, field, replace
from typing import Tuple
import numpy as np


# Axis index for each viewing plane in (Z, Y, X) volumes
PLANE_AXES = {
    "axial": 0,
    "coronal": 1,
    "sagittal": 2,
}


@dataclass
class SeriesVolume:
    """
    Volumetric series with metadata.

    Attributes:
        series_id: Identifier used by capture requests
        data: 3D numpy array of Hounsfield Units (Z, Y, X)
        spacing: Voxel spacing in mm along (Z, Y, X)
        origin: World coordinates of volume origin
        window_center: Default display window center in HU
        window_width: Default display window width in HU
        description: Free-text series description
    """
    series_id: str
    data: np.ndarray  # Shape: (slices, height, width), dtype: float32
    spacing: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    origin: np.ndarray = field(default_factory=lambda: np.zeros(3))
    window_center: float = 40.0
    window_width: float = 400.0
    description: str = ""

    def __post_init__(self):
        if self.data.ndim != 3:
            raise ValueError(f"Series volume must be 3D, got shape {self.data.shape}")
        self.spacing = tuple(float(s) for s in self.spacing)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.data.shape

    @property
    def num_slices(self) -> int:
        return self.data.shape[0]

    def slice_count(self, axis: int = 0) -> int:
        """Number of slices along an axis (0=axial, 1=coronal, 2=sagittal)."""
        return self.data.shape[axis]

    def get_slice(self, index: int, axis: int = 0) -> np.ndarray:
        """Get a 2D slice along specified axis (0=axial, 1=coronal, 2=sagittal)."""
        if axis == 0:
            return self.data[index, :, :]
        elif axis == 1:
            return self.data[:, index, :]
        else:
            return self.data[:, :, index]

    @property
    def is_read_only(self) -> bool:
        return not self.data.flags.writeable

    def read_only(self) -> "SeriesVolume":
        """
        Return a view of this series whose voxel array cannot be written.

        The voxel buffer is shared, not copied.
        """
        view = self.data.view()
        view.flags.writeable = False
        return replace(self, data=view, origin=self.origin.copy())


def apply_window(
    data: np.ndarray,
    window_center: float,
    window_width: float
) -> np.ndarray:
    """
    Apply windowing to convert HU values to display range [0, 255].

    Args:
        data: Array of HU values
        window_center: Center of the window in HU
        window_width: Width of the window in HU

    Returns:
        uint8 array suitable for display
    """
    window_width = max(1.0, float(window_width))
    lower = window_center - window_width / 2
    upper = window_center + window_width / 2

    windowed = np.clip(data, lower, upper)
    normalized = (windowed - lower) / (upper - lower)
    return (normalized * 255).astype(np.uint8)
