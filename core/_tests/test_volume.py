import numpy as np
import pytest

from core import SeriesVolume, apply_window


def test_volume_requires_3d_data():
    with pytest.raises(ValueError):
        SeriesVolume("flat", np.zeros((4, 4), dtype=np.float32))


def test_get_slice_along_each_axis():
    volume = SeriesVolume("v", np.arange(24, dtype=np.float32).reshape(2, 3, 4))
    assert volume.get_slice(1, 0).shape == (3, 4)
    assert volume.get_slice(1, 1).shape == (2, 4)
    assert volume.get_slice(1, 2).shape == (2, 3)
    assert volume.slice_count(2) == 4


def test_read_only_view_shares_buffer_without_write_access():
    volume = SeriesVolume("v", np.zeros((2, 2, 2), dtype=np.float32), spacing=(3, 1, 1))
    shared = volume.read_only()

    assert shared.is_read_only
    assert not volume.is_read_only
    assert np.shares_memory(shared.data, volume.data)
    assert shared.spacing == (3.0, 1.0, 1.0)
    with pytest.raises(ValueError):
        shared.data[0, 0, 0] = 1.0

    volume.data[0, 0, 0] = 5.0
    assert shared.data[0, 0, 0] == 5.0


def test_apply_window_maps_range_to_uint8():
    result = apply_window(np.array([-1000.0, -160.0, 40.0, 240.0, 3000.0]), 40.0, 400.0)
    assert result.dtype == np.uint8
    assert result.tolist() == [0, 0, 127, 255, 255]


def test_apply_window_tolerates_zero_width():
    result = apply_window(np.array([0.0, 10.0]), 0.0, 0.0)
    assert result.dtype == np.uint8
