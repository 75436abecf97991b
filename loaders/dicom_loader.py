"""
DICOM Series Loader

Reads a directory of single-frame DICOM slices into series volumes,
one per SeriesInstanceUID.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Sequence
import numpy as np

import pydicom
from pydicom.dataset import Dataset
from pydicom.errors import InvalidDicomError
from pydicom.multival import MultiValue

from core.volume import SeriesVolume


def _first_value(value, default: float) -> float:
    """WindowCenter/WindowWidth may be multi-valued."""
    if value is None:
        return default
    if isinstance(value, MultiValue):
        return float(value[0]) if len(value) else default
    return float(value)


def _slice_position(ds: Dataset) -> float:
    """Position along the stacking axis, falling back to instance number."""
    position = getattr(ds, "ImagePositionPatient", None)
    if position is not None and len(position) == 3:
        return float(position[2])
    return float(getattr(ds, "InstanceNumber", 0))


def volume_from_datasets(
    datasets: Sequence[Dataset],
    series_id: str
) -> SeriesVolume:
    """
    Stack slices of one series into a SeriesVolume.

    Slices are sorted by position; stored values are converted to HU with
    RescaleSlope / RescaleIntercept.

    Args:
        datasets: Datasets belonging to a single series (with pixel data)
        series_id: Identifier for the resulting volume

    Returns:
        SeriesVolume with data in (Z, Y, X) order
    """
    if not datasets:
        raise ValueError(f"No slices for series '{series_id}'")

    ordered = sorted(datasets, key=_slice_position)
    first = ordered[0]

    slices = []
    for ds in ordered:
        slope = float(getattr(ds, "RescaleSlope", 1.0))
        intercept = float(getattr(ds, "RescaleIntercept", 0.0))
        slices.append(ds.pixel_array.astype(np.float32) * slope + intercept)

    shapes = {s.shape for s in slices}
    if len(shapes) != 1:
        raise ValueError(f"Series '{series_id}' has inconsistent slice shapes: {shapes}")
    data = np.stack(slices, axis=0)

    row_spacing, col_spacing = (float(v) for v in getattr(first, "PixelSpacing", (1.0, 1.0)))
    if len(ordered) > 1:
        positions = np.array([_slice_position(ds) for ds in ordered])
        steps = np.diff(positions)
        z_spacing = float(np.median(np.abs(steps))) if steps.size else 0.0
    else:
        z_spacing = 0.0
    if z_spacing <= 0:
        z_spacing = float(getattr(first, "SliceThickness", 1.0) or 1.0)

    origin = np.array(
        [float(v) for v in getattr(first, "ImagePositionPatient", (0.0, 0.0, 0.0))]
    )

    return SeriesVolume(
        series_id=series_id,
        data=data,
        spacing=(z_spacing, row_spacing, col_spacing),
        origin=origin,
        window_center=_first_value(getattr(first, "WindowCenter", None), 40.0),
        window_width=_first_value(getattr(first, "WindowWidth", None), 400.0),
        description=str(getattr(first, "SeriesDescription", "")),
    )


class DICOMSeriesLoader:
    """
    Loads DICOM series from a directory tree.

    Files that are not DICOM or carry no pixel data are skipped.
    """

    def __init__(self, recursive: bool = True):
        self.recursive = recursive

    def load(self, directory: str | Path) -> List[SeriesVolume]:
        """
        Load every series found under a directory.

        Args:
            directory: Folder containing DICOM files

        Returns:
            One SeriesVolume per SeriesInstanceUID, sorted by series number
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"DICOM directory not found: {directory}")

        pattern = "**/*" if self.recursive else "*"
        groups: Dict[str, list] = defaultdict(list)
        skipped = 0

        for path in sorted(p for p in directory.glob(pattern) if p.is_file()):
            try:
                ds = pydicom.dcmread(path)
            except (InvalidDicomError, OSError) as e:
                logging.debug(f"Skipping {path.name}: {e}")
                skipped += 1
                continue
            if "PixelData" not in ds:
                skipped += 1
                continue
            series_uid = str(getattr(ds, "SeriesInstanceUID", directory.name))
            groups[series_uid].append(ds)

        if not groups:
            raise ValueError(f"No DICOM image series found in {directory}")

        volumes = []
        for series_uid, datasets in groups.items():
            volume = volume_from_datasets(datasets, series_uid)
            volumes.append((int(getattr(datasets[0], "SeriesNumber", 0) or 0), volume))
            logging.info(
                f"Loaded series {series_uid}: {volume.shape}, spacing={volume.spacing}"
            )

        if skipped:
            logging.info(f"Skipped {skipped} non-image file(s) in {directory}")

        volumes.sort(key=lambda item: item[0])
        return [volume for _, volume in volumes]
