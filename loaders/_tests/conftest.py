import numpy as np
import pytest
from pydicom.dataset import Dataset, FileMetaDataset
from pydicom.uid import CTImageStorage, ExplicitVRLittleEndian


@pytest.fixture
def make_slice():
    """Build an in-memory CT slice with int16 stored values."""

    def factory(stored, z, series_uid="1.2.3", intercept=-1024.0, slope=1.0, **extra):
        ds = Dataset()
        ds.file_meta = FileMetaDataset()
        ds.file_meta.TransferSyntaxUID = ExplicitVRLittleEndian
        ds.file_meta.MediaStorageSOPClassUID = CTImageStorage
        ds.SOPClassUID = CTImageStorage
        ds.SeriesInstanceUID = series_uid
        ds.Modality = "CT"
        ds.ImagePositionPatient = [0.0, 0.0, float(z)]
        ds.PixelSpacing = [0.5, 0.75]
        ds.RescaleIntercept = intercept
        ds.RescaleSlope = slope
        for keyword, value in extra.items():
            setattr(ds, keyword, value)

        ds.set_pixel_data(np.asarray(stored, dtype=np.int16), "MONOCHROME2", 16)
        ds.file_meta.MediaStorageSOPInstanceUID = ds.SOPInstanceUID
        return ds

    return factory


@pytest.fixture
def write_series(tmp_path, make_slice):
    """Write slices of one series into tmp_path; returns the directory."""

    def factory(num_slices=3, series_uid="1.2.3", subdir="", **extra):
        directory = tmp_path / subdir if subdir else tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        for i in range(num_slices):
            ds = make_slice(np.full((4, 5), i * 10), z=i * 2.0, series_uid=series_uid, **extra)
            ds.save_as(directory / f"{series_uid}_{i}.dcm", enforce_file_format=True)
        return tmp_path

    return factory
