"""
Background Workers

QThread workers for long-running operations (loading, export).
"""

import logging
from typing import List, Optional, Tuple

from PySide6.QtCore import QThread, Signal

from loaders import DICOMSeriesLoader, PhantomConfig, generate_phantom
from exporters import ImageExporter


class DICOMLoaderWorker(QThread):
    """Background worker for loading DICOM series from a directory."""

    progress = Signal(float)
    finished = Signal(object)  # Emits list of SeriesVolume
    error = Signal(str)

    def __init__(self, directory: str, recursive: bool = True):
        super().__init__()
        self.directory = directory
        self.recursive = recursive

    def run(self):
        try:
            self.progress.emit(0.0)

            loader = DICOMSeriesLoader(recursive=self.recursive)
            volumes = loader.load(self.directory)

            self.progress.emit(1.0)
            self.finished.emit(volumes)

        except Exception as e:
            import traceback
            logging.error(f"Loading error: {e}\n{traceback.format_exc()}")
            self.error.emit(str(e))


class PhantomWorker(QThread):
    """Background worker for generating a synthetic phantom."""

    progress = Signal(float)
    finished = Signal(object)  # Emits SeriesVolume
    error = Signal(str)

    def __init__(self, series_id: str = "phantom", config: Optional[PhantomConfig] = None):
        super().__init__()
        self.series_id = series_id
        self.config = config

    def run(self):
        try:
            self.progress.emit(0.0)
            volume = generate_phantom(self.series_id, self.config)
            self.progress.emit(1.0)
            self.finished.emit(volume)

        except Exception as e:
            import traceback
            logging.error(f"Phantom generation error: {e}\n{traceback.format_exc()}")
            self.error.emit(str(e))


class ExportWorker(QThread):
    """Background worker for writing captured images."""

    progress = Signal(float)
    finished = Signal(object)  # Emits list of file paths
    error = Signal(str)

    def __init__(self, frames: List[Tuple[int, object]], output_dir: str, prefix: str = "capture"):
        super().__init__()
        self.frames = frames
        self.output_dir = output_dir
        self.prefix = prefix

    def run(self):
        try:
            exporter = ImageExporter(self.output_dir, prefix=self.prefix)
            files = exporter.export(self.frames, progress_callback=self.progress.emit)
            self.finished.emit(files)

        except Exception as e:
            import traceback
            logging.error(f"Export error: {e}\n{traceback.format_exc()}")
            self.error.emit(str(e))
