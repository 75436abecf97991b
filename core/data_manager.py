"""
Data Manager

Session-level cache of loaded series volumes, plus the read-only handle
that offscreen viewers borrow instead of reloading data.
"""

import logging
from typing import Dict, List, Optional

from PySide6.QtCore import QObject, Signal

from .volume import SeriesVolume


class DataCache(QObject):
    """
    Owns the volumetric data of one viewing session.

    Provides a centralized location for:
    - Loaded series volumes keyed by series ID
    - State change notifications via signals
    - Read-only shared handles for offscreen viewers
    """

    # Signals
    series_added = Signal(str)  # Emits series ID
    series_removed = Signal(str)  # Emits series ID
    cleared = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)

        self._volumes: Dict[str, SeriesVolume] = {}

    def add(self, volume: SeriesVolume) -> None:
        """
        Add or replace a series volume.

        Args:
            volume: SeriesVolume to store under its series ID
        """
        replaced = volume.series_id in self._volumes
        self._volumes[volume.series_id] = volume
        self.series_added.emit(volume.series_id)
        logging.info(
            f"{'Replaced' if replaced else 'Cached'} series '{volume.series_id}': "
            f"{volume.shape}, spacing={volume.spacing}"
        )

    def remove(self, series_id: str) -> bool:
        """Remove a series. Returns True if it was cached."""
        if self._volumes.pop(series_id, None) is None:
            return False
        self.series_removed.emit(series_id)
        logging.info(f"Removed series '{series_id}' from cache")
        return True

    def get(self, series_id: str) -> Optional[SeriesVolume]:
        """Get a cached series, or None if not loaded."""
        return self._volumes.get(series_id)

    @property
    def series_ids(self) -> List[str]:
        """Cached series IDs in insertion order."""
        return list(self._volumes.keys())

    def __contains__(self, series_id: str) -> bool:
        return series_id in self._volumes

    def __len__(self) -> int:
        return len(self._volumes)

    def share(self) -> "SharedDataCache":
        """Create a read-only handle onto this cache."""
        return SharedDataCache(self)

    def clear(self) -> None:
        """Clear all data."""
        self._volumes.clear()
        self.cleared.emit()
        logging.info("Data cache cleared")


class SharedDataCache:
    """
    Borrowed, read-only view of another session's DataCache.

    Lookups go through to the source cache, so series loaded later are
    visible. Volumes are handed out with non-writeable voxel arrays.
    """

    def __init__(self, source: DataCache):
        self._source = source

    def get(self, series_id: str) -> Optional[SeriesVolume]:
        volume = self._source.get(series_id)
        if volume is None:
            return None
        return volume.read_only()

    @property
    def series_ids(self) -> List[str]:
        return self._source.series_ids

    def __contains__(self, series_id: str) -> bool:
        return series_id in self._source

    def __len__(self) -> int:
        return len(self._source)

    def share(self) -> "SharedDataCache":
        """Share onward; the new handle still reads the original source."""
        return SharedDataCache(self._source)
