import numpy as np
import pytest
from PySide6.QtGui import QColor

from visualization import OffscreenSurface


def test_grab_returns_independent_copy_at_surface_size(qapp):
    surface = OffscreenSurface(30, 20)
    surface.draw(np.full((10, 10), 255, dtype=np.uint8))

    image = surface.grab()
    surface.draw(np.zeros((10, 10), dtype=np.uint8))

    assert (image.width(), image.height()) == (30, 20)
    assert QColor(image.pixel(15, 10)).red() == 255
    assert QColor(surface.grab().pixel(15, 10)).red() == 0


def test_frame_is_letterboxed_over_background(qapp):
    surface = OffscreenSurface(40, 20, background="#000000")
    surface.draw(np.full((10, 10), 255, dtype=np.uint8))
    image = surface.grab()

    assert QColor(image.pixel(20, 10)).red() == 255
    assert QColor(image.pixel(2, 10)).red() == 0


def test_released_surface_rejects_use():
    surface = OffscreenSurface(8, 8)
    surface.release()

    assert surface.released
    with pytest.raises(RuntimeError):
        surface.grab()
    with pytest.raises(RuntimeError):
        surface.draw(np.zeros((2, 2), dtype=np.uint8))


@pytest.mark.parametrize("size", [(0, 8), (8, -2)])
def test_rejects_non_positive_size(size):
    with pytest.raises(ValueError):
        OffscreenSurface(*size)
