"""
Gallery Panel

Thumbnail grid of the images produced by the last capture batch.
"""

from typing import List, Optional, Tuple

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QListWidget, QListWidgetItem,
    QPushButton, QLabel, QFileDialog, QListView
)
from PySide6.QtCore import Qt, QSize, Signal
from PySide6.QtGui import QIcon, QImage, QPixmap

from config import DEFAULT_GUI


class GalleryPanel(QWidget):
    """Shows captured frames as thumbnails and offers to save them."""

    # Signals
    save_requested = Signal(str)  # Emits output directory

    def __init__(self, thumbnail_size: int = DEFAULT_GUI.thumbnail_size, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._thumbnail_size = thumbnail_size
        self._frames: List[Tuple[int, QImage]] = []
        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(4, 4, 4, 0)
        self._count_label = QLabel("No images")
        toolbar.addWidget(self._count_label)
        toolbar.addStretch()

        self._save_btn = QPushButton("Save All...")
        self._save_btn.setEnabled(False)
        self._save_btn.clicked.connect(self._on_save_clicked)
        toolbar.addWidget(self._save_btn)

        clear_btn = QPushButton("Clear")
        clear_btn.setFixedWidth(60)
        clear_btn.clicked.connect(self.clear)
        toolbar.addWidget(clear_btn)

        layout.addLayout(toolbar)

        self._list = QListWidget()
        self._list.setViewMode(QListView.IconMode)
        self._list.setResizeMode(QListView.Adjust)
        self._list.setMovement(QListView.Static)
        self._list.setIconSize(QSize(self._thumbnail_size, self._thumbnail_size))
        self._list.setSpacing(4)
        layout.addWidget(self._list)

    def add_image(self, index: int, image: QImage) -> None:
        """Append a captured frame."""
        self._frames.append((index, image))

        thumb = QPixmap.fromImage(image).scaled(
            self._thumbnail_size, self._thumbnail_size,
            Qt.KeepAspectRatio, Qt.SmoothTransformation
        )
        item = QListWidgetItem(QIcon(thumb), f"#{index}")
        item.setToolTip(f"Frame {index}: {image.width()}x{image.height()}")
        self._list.addItem(item)

        self._count_label.setText(f"{len(self._frames)} image(s)")
        self._save_btn.setEnabled(True)

    @property
    def frames(self) -> List[Tuple[int, QImage]]:
        return list(self._frames)

    def clear(self) -> None:
        self._frames.clear()
        self._list.clear()
        self._count_label.setText("No images")
        self._save_btn.setEnabled(False)

    def _on_save_clicked(self) -> None:
        directory = QFileDialog.getExistingDirectory(self, "Save Captured Images", "")
        if directory:
            self.save_requested.emit(directory)
