"""
Viewer Controller

Concrete slice/MPR viewer: owns (or borrows) a data cache, generates view
states, applies them and captures the attached surface.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Union
import numpy as np

from PySide6.QtCore import QTimer

from core.base import BaseViewerController, ViewState
from core.data_manager import DataCache, SharedDataCache
from core.volume import SeriesVolume, PLANE_AXES
from .slice_viewer import render_view
from .state_generator import (
    ORIENTATIONS,
    SLAB_TYPES,
    ViewParameters,
    make_2d_states,
    make_mpr_states,
    sample_indices,
)
from .surface import OffscreenSurface


class ViewerController(BaseViewerController):
    """
    Viewer for one session.

    A controller created with its own DataCache owns the session's data.
    After share_data_cache() it reads another controller's cache instead and
    must not load data itself.
    """

    def __init__(self, data_cache: Optional[DataCache] = None):
        self._cache: Union[DataCache, SharedDataCache] = (
            data_cache if data_cache is not None else DataCache()
        )
        self._shared = False
        self._surface: Optional[OffscreenSurface] = None
        self._view: Optional[ViewParameters] = None
        self._last_frame: Optional[np.ndarray] = None

    # ========== Data ==========

    @property
    def data_cache(self) -> Union[DataCache, SharedDataCache]:
        return self._cache

    @property
    def is_shared(self) -> bool:
        """Whether the data cache is borrowed from another viewer."""
        return self._shared

    def load_series(self, volume: SeriesVolume) -> None:
        """Add a series to this viewer's own cache."""
        if self._shared:
            raise RuntimeError("Cannot load series into a shared, read-only data cache")
        self._cache.add(volume)

    def series(self, series_id: str) -> Optional[SeriesVolume]:
        return self._cache.get(series_id)

    def share_data_cache(self, source: "ViewerController") -> None:
        self._cache = source.data_cache.share()
        self._shared = True
        logging.debug(f"Viewer borrowed data cache with {len(self._cache)} series")

    # ========== State generation ==========

    def minimal_2d_states_for_series(
        self,
        series_id: str,
        max_entries: int,
        sampling_strategy: int = 0,
        center_bias_exponent: float = 0.0
    ) -> List[Dict[str, Any]]:
        volume = self._cache.get(series_id)
        if volume is None:
            logging.warning(f"No series '{series_id}' loaded; no 2D states generated")
            return []

        indices = sample_indices(
            volume.num_slices, max_entries, sampling_strategy, center_bias_exponent
        )
        return make_2d_states(volume, indices)

    def mpr_states_for_series(
        self,
        series_id: str,
        max_entries: int,
        orientation_intent: int = 0,
        slab_type: int = 0,
        slab_thickness_mm: float = 0.0,
        sampling_strategy: int = 0,
        center_bias_exponent: float = 0.0
    ) -> List[Dict[str, Any]]:
        volume = self._cache.get(series_id)
        if volume is None:
            logging.warning(f"No series '{series_id}' loaded; no MPR states generated")
            return []
        if orientation_intent not in ORIENTATIONS or slab_type not in SLAB_TYPES:
            logging.warning(
                f"Unsupported MPR parameters for '{series_id}': "
                f"orientation={orientation_intent}, slab={slab_type}"
            )
            return []

        orientation = ORIENTATIONS[orientation_intent]
        indices = sample_indices(
            volume.slice_count(PLANE_AXES[orientation]),
            max_entries,
            sampling_strategy,
            center_bias_exponent
        )
        return make_mpr_states(
            volume,
            orientation,
            indices,
            slab_type=SLAB_TYPES[slab_type],
            slab_thickness_mm=slab_thickness_mm
        )

    # ========== View ==========

    @property
    def view_parameters(self) -> Optional[ViewParameters]:
        return self._view

    @property
    def last_frame(self) -> Optional[np.ndarray]:
        """Most recently rendered frame (uint8), if any."""
        return self._last_frame

    def apply_state(
        self,
        state: ViewState,
        render: bool = True,
        on_applied: Optional[Callable[[], None]] = None
    ) -> None:
        try:
            self._view = ViewParameters.from_state(state)
        except (KeyError, TypeError, ValueError) as e:
            logging.error(f"Invalid view state {state!r}: {e}")
            self._view = None

        if render:
            self.render()
        if on_applied is not None:
            QTimer.singleShot(0, on_applied)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current view.

        Returns:
            2D uint8 frame, or None if there is nothing to render
        """
        if self._view is None:
            return None

        volume = self._cache.get(self._view.series_id)
        if volume is None:
            logging.warning(f"Series '{self._view.series_id}' is not loaded")
            return None

        pixels = render_view(volume, self._view)
        self._last_frame = pixels
        if self._surface is not None:
            self._surface.draw(pixels)
        return pixels

    # ========== Surface ==========

    def attach_surface(self, surface: OffscreenSurface) -> None:
        self._surface = surface

    def capture_screenshot(self, on_captured: Callable[[Any], None]) -> None:
        image = None
        if self._surface is None:
            logging.warning("Screenshot requested with no surface attached")
        elif self.render() is not None:
            image = self._surface.grab()
        QTimer.singleShot(0, lambda: on_captured(image))

    def release(self) -> None:
        """Detach the surface and drop borrowed data."""
        self._surface = None
        self._view = None
        self._last_frame = None
        if self._shared:
            self._cache = DataCache()
            self._shared = False
