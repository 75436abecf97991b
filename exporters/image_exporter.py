"""
Image Exporter

Writes captured frames to disk as numbered image files.
"""

from pathlib import Path
from typing import Callable, Iterable, List, Optional
import logging

from PySide6.QtGui import QImage


class ImageExporter:
    """
    Saves QImages to a directory.

    Files are named ``{prefix}_{index:04d}.{format}``; the index is the
    position of the frame in the batch, so gaps mark frames that produced
    no image.
    """

    def __init__(self, output_dir: str | Path, prefix: str = "capture", image_format: str = "png"):
        self.output_dir = Path(output_dir)
        self.prefix = prefix
        self.image_format = image_format.lower()

    def path_for(self, index: int) -> Path:
        return self.output_dir / f"{self.prefix}_{index:04d}.{self.image_format}"

    def save(self, image: QImage, index: int) -> Path:
        """
        Save a single frame.

        Args:
            image: Image to write
            index: Frame index used in the file name

        Returns:
            Path of the written file
        """
        if image is None or image.isNull():
            raise ValueError(f"Frame {index} has no image data")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(index)
        if not image.save(str(path), self.image_format.upper()):
            raise OSError(f"Failed to write {path}")
        return path

    def export(
        self,
        frames: Iterable[tuple],
        progress_callback: Optional[Callable[[float], None]] = None
    ) -> List[Path]:
        """
        Save a collection of frames.

        Args:
            frames: (index, QImage) pairs
            progress_callback: Optional callback(progress: 0.0-1.0)

        Returns:
            List of paths to created files
        """
        frames = list(frames)
        created = []
        for n, (index, image) in enumerate(frames):
            created.append(self.save(image, index))
            if progress_callback is not None:
                progress_callback((n + 1) / len(frames))

        logging.info(f"Exported {len(created)} image(s) to {self.output_dir}")
        return created
