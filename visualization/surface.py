"""
Offscreen Surface

A render target that is never shown on screen, used to produce captured
images at a fixed output size.
"""

from typing import Tuple
import numpy as np

from PySide6.QtCore import QRectF
from PySide6.QtGui import QColor, QImage, QPainter

from config import DEFAULT_VIEWER


class OffscreenSurface:
    """
    Fixed-size QImage canvas.

    Frames are drawn centered and scaled to fit, preserving aspect ratio,
    over a solid background.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: str = DEFAULT_VIEWER.background_color
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")

        self._background = QColor(background)
        self._image = QImage(width, height, QImage.Format_RGB32)
        self._image.fill(self._background)
        self._released = False

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) in pixels."""
        return self._image.width(), self._image.height()

    @property
    def released(self) -> bool:
        return self._released

    def draw(self, pixels: np.ndarray) -> None:
        """
        Draw a grayscale frame onto the surface.

        Args:
            pixels: 2D uint8 array (rows, columns)
        """
        if self._released:
            raise RuntimeError("Surface has been released")

        pixels = np.ascontiguousarray(pixels, dtype=np.uint8)
        rows, cols = pixels.shape
        frame = QImage(pixels.data, cols, rows, cols, QImage.Format_Grayscale8)

        width, height = self.size
        scale = min(width / cols, height / rows)
        target_w = cols * scale
        target_h = rows * scale
        target = QRectF((width - target_w) / 2, (height - target_h) / 2, target_w, target_h)

        self._image.fill(self._background)
        painter = QPainter(self._image)
        try:
            painter.setRenderHint(QPainter.SmoothPixmapTransform)
            painter.drawImage(target, frame)
        finally:
            painter.end()

    def grab(self) -> QImage:
        """Copy of the current surface contents."""
        if self._released:
            raise RuntimeError("Surface has been released")
        return self._image.copy()

    def release(self) -> None:
        """Free the backing image."""
        self._image = QImage()
        self._released = True
