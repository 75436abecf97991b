"""
Capture Requests

Declarative description of what to capture from a series.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .sampling import SamplingStrategy, UniformSampling


class RenderingMode(Enum):
    """Family of view states a request expands to."""
    SLICE_2D = "slice2D"
    MPR = "mpr"


class OrientationIntent(IntEnum):
    """MPR plane orientation (0 lets the viewer choose)."""
    NONE = 0
    AXIAL = 1
    CORONAL = 2
    SAGITTAL = 3


class SlabType(IntEnum):
    """MPR slab projection."""
    NONE = 0
    MIP = 1
    MINIP = 2
    AVERAGE = 3


@dataclass(frozen=True)
class CaptureRequest:
    """
    One capture request against a loaded series.

    MPR-only fields (orientation_intent, slab_type, slab_thickness_mm) are
    ignored when mode is SLICE_2D.
    """
    series_id: str
    mode: RenderingMode = RenderingMode.SLICE_2D
    sampling_count: int = 1  # Upper bound on generated states
    sampling_strategy: SamplingStrategy = field(default_factory=UniformSampling)

    # MPR only
    orientation_intent: OrientationIntent = OrientationIntent.NONE
    slab_type: SlabType = SlabType.NONE
    slab_thickness_mm: float = 0.0

    def __post_init__(self):
        if isinstance(self.sampling_count, bool) or not isinstance(self.sampling_count, int):
            raise ValueError(f"sampling_count must be an integer, got {self.sampling_count!r}")
        if self.sampling_count <= 0:
            raise ValueError(f"sampling_count must be positive, got {self.sampling_count}")
        thickness = float(self.slab_thickness_mm)
        if not thickness >= 0:  # Also rejects NaN
            raise ValueError(f"slab_thickness_mm must be non-negative, got {self.slab_thickness_mm}")

        # Frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "mode", RenderingMode(self.mode))
        object.__setattr__(self, "orientation_intent", OrientationIntent(self.orientation_intent))
        object.__setattr__(self, "slab_type", SlabType(self.slab_type))
        object.__setattr__(self, "slab_thickness_mm", thickness)

    @classmethod
    def slice_2d(
        cls,
        series_id: str,
        sampling_count: int,
        sampling_strategy: SamplingStrategy = None
    ) -> "CaptureRequest":
        """Build a 2D slice request."""
        return cls(
            series_id=series_id,
            mode=RenderingMode.SLICE_2D,
            sampling_count=sampling_count,
            sampling_strategy=sampling_strategy or UniformSampling(),
        )

    @classmethod
    def mpr(
        cls,
        series_id: str,
        sampling_count: int,
        sampling_strategy: SamplingStrategy = None,
        orientation_intent: int = OrientationIntent.NONE,
        slab_type: int = SlabType.NONE,
        slab_thickness_mm: float = 0.0
    ) -> "CaptureRequest":
        """Build a multi-planar reconstruction request."""
        return cls(
            series_id=series_id,
            mode=RenderingMode.MPR,
            sampling_count=sampling_count,
            sampling_strategy=sampling_strategy or UniformSampling(),
            orientation_intent=orientation_intent,
            slab_type=slab_type,
            slab_thickness_mm=slab_thickness_mm,
        )
