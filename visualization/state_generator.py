"""
View State Generation

Slice sampling and construction of 2D / MPR view states for a series.
States are plain dictionaries so they can travel through code that does
not interpret them.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping
import numpy as np

from core.volume import SeriesVolume, PLANE_AXES


# Sampling kind codes
SAMPLING_UNIFORM = 0
SAMPLING_CENTER_BIASED = 1

# Orientation intent codes -> plane names (0 = viewer's choice: axial)
ORIENTATIONS = {
    0: "axial",
    1: "axial",
    2: "coronal",
    3: "sagittal",
}

# Slab type codes -> slab names
SLAB_TYPES = {
    0: "none",
    1: "mip",
    2: "minip",
    3: "average",
}

MODE_2D = "slice2D"
MODE_MPR = "mpr"


@dataclass(frozen=True)
class ViewParameters:
    """Per-view display parameters encoded in a view state."""
    series_id: str
    mode: str = MODE_2D
    orientation: str = "axial"
    slice_index: int = 0
    slab_type: str = "none"
    slab_thickness_mm: float = 0.0
    window_center: float = 40.0
    window_width: float = 400.0

    def to_state(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> "ViewParameters":
        """
        Parse a view state.

        Raises:
            KeyError: If series_id is missing
            ValueError: If orientation or slab type is unknown
        """
        params = cls(
            series_id=str(state["series_id"]),
            mode=str(state.get("mode", MODE_2D)),
            orientation=str(state.get("orientation", "axial")),
            slice_index=int(state.get("slice_index", 0)),
            slab_type=str(state.get("slab_type", "none")),
            slab_thickness_mm=float(state.get("slab_thickness_mm", 0.0)),
            window_center=float(state.get("window_center", 40.0)),
            window_width=float(state.get("window_width", 400.0)),
        )
        if params.orientation not in PLANE_AXES:
            raise ValueError(f"Unknown orientation: {params.orientation}")
        if params.slab_type not in SLAB_TYPES.values():
            raise ValueError(f"Unknown slab type: {params.slab_type}")
        return params


def sample_indices(
    num_slices: int,
    max_entries: int,
    sampling_kind: int = SAMPLING_UNIFORM,
    center_bias_exponent: float = 0.0
) -> List[int]:
    """
    Pick up to max_entries slice indices from a series.

    Uniform sampling spreads indices evenly from first to last slice.
    Center-biased sampling warps the same grid with |u|**exponent on
    u in [-1, 1], which pulls samples toward the middle for exponent > 1.

    Args:
        num_slices: Slices available along the sampled axis
        max_entries: Upper bound on the number of indices
        sampling_kind: 0 = uniform, 1 = center-biased
        center_bias_exponent: Density exponent for center-biased sampling

    Returns:
        Sorted, unique slice indices (may be fewer than max_entries)
    """
    if num_slices <= 0 or max_entries <= 0:
        return []
    if max_entries >= num_slices:
        return list(range(num_slices))
    if max_entries == 1:
        return [(num_slices - 1) // 2]

    u = np.linspace(-1.0, 1.0, max_entries)

    if sampling_kind == SAMPLING_CENTER_BIASED:
        if center_bias_exponent > 0:
            u = np.sign(u) * np.abs(u) ** center_bias_exponent
        else:
            logging.warning(
                f"Center-bias exponent must be positive, got {center_bias_exponent}; "
                "using uniform sampling"
            )
    elif sampling_kind != SAMPLING_UNIFORM:
        logging.warning(f"Unknown sampling kind {sampling_kind}; using uniform sampling")

    positions = (u + 1.0) / 2.0 * (num_slices - 1)
    indices = np.unique(np.rint(positions).astype(int))
    return [int(i) for i in indices]


def make_2d_states(volume: SeriesVolume, indices: List[int]) -> List[Dict[str, Any]]:
    """Axial slice states at the given indices, using the series window."""
    return [
        ViewParameters(
            series_id=volume.series_id,
            mode=MODE_2D,
            orientation="axial",
            slice_index=index,
            window_center=volume.window_center,
            window_width=volume.window_width,
        ).to_state()
        for index in indices
    ]


def make_mpr_states(
    volume: SeriesVolume,
    orientation: str,
    indices: List[int],
    slab_type: str = "none",
    slab_thickness_mm: float = 0.0
) -> List[Dict[str, Any]]:
    """Reformatted plane states at the given indices along one orientation."""
    if slab_type == "none":
        slab_thickness_mm = 0.0
    return [
        ViewParameters(
            series_id=volume.series_id,
            mode=MODE_MPR,
            orientation=orientation,
            slice_index=index,
            slab_type=slab_type,
            slab_thickness_mm=slab_thickness_mm,
            window_center=volume.window_center,
            window_width=volume.window_width,
        ).to_state()
        for index in indices
    ]
