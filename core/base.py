"""
Core Base Classes

Provides the abstract viewer contract the capture pipeline drives.
The capture code only calls into this interface; visualization provides
the concrete implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional, Tuple


# Opaque view configuration. The capture pipeline never reads its contents,
# it only hands it back to the viewer that produced it.
ViewState = Mapping[str, Any]

# (width, height) in pixels
OutputSize = Tuple[int, int]


class BaseViewerController(ABC):
    """Abstract base class for viewers usable by the capture pipeline."""

    @abstractmethod
    def share_data_cache(self, source: "BaseViewerController") -> None:
        """
        Import the cached data references of another viewer.

        No ownership is transferred; the imported cache is read-only.

        Args:
            source: Viewer whose data cache is borrowed
        """
        pass

    @abstractmethod
    def minimal_2d_states_for_series(
        self,
        series_id: str,
        max_entries: int,
        sampling_strategy: int,
        center_bias_exponent: float
    ) -> List[ViewState]:
        """
        Enumerate 2D slice states for a series.

        Args:
            series_id: Series to sample
            max_entries: Upper bound on the number of states
            sampling_strategy: Sampling kind code (0=uniform, 1=center-biased)
            center_bias_exponent: Exponent for center-biased sampling

        Returns:
            Ordered list of view states
        """
        pass

    @abstractmethod
    def mpr_states_for_series(
        self,
        series_id: str,
        max_entries: int,
        orientation_intent: int,
        slab_type: int,
        slab_thickness_mm: float,
        sampling_strategy: int,
        center_bias_exponent: float
    ) -> List[ViewState]:
        """
        Enumerate multi-planar reconstruction states for a series.

        Args:
            series_id: Series to sample
            max_entries: Upper bound on the number of states
            orientation_intent: 0=none, 1=axial, 2=coronal, 3=sagittal
            slab_type: 0=none, 1=mip, 2=minip, 3=average
            slab_thickness_mm: Slab thickness in mm
            sampling_strategy: Sampling kind code (0=uniform, 1=center-biased)
            center_bias_exponent: Exponent for center-biased sampling

        Returns:
            Ordered list of view states
        """
        pass

    @abstractmethod
    def apply_state(
        self,
        state: ViewState,
        render: bool = True,
        on_applied: Optional[Callable[[], None]] = None
    ) -> None:
        """
        Apply a view state.

        Args:
            state: View state previously produced by a generator
            render: Whether to flush a render immediately
            on_applied: Called once the state is in effect
        """
        pass

    @abstractmethod
    def capture_screenshot(self, on_captured: Callable[[Any], None]) -> None:
        """
        Capture the attached surface.

        Args:
            on_captured: Called with the captured image, or None on failure
        """
        pass

    def attach_surface(self, surface: Any) -> None:
        """Bind the viewer to a render surface."""
        pass

    def release(self) -> None:
        """Drop surfaces and borrowed data."""
        pass
