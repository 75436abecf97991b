"""
Data Panel

Provides controls for opening DICOM series (or a synthetic phantom) and
shows information about the series loaded in the session.
"""

from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QPushButton, QLabel, QFileDialog, QFormLayout,
    QCheckBox
)
from PySide6.QtCore import Signal

from core.volume import SeriesVolume


class LoaderPanel(QWidget):
    """Panel for opening series and inspecting the selected one."""

    # Signals
    dicom_requested = Signal(str, bool)  # Emits (directory, recursive)
    phantom_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self) -> None:
        """Set up the panel UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # Import section
        import_group = QGroupBox("Open Data")
        import_layout = QVBoxLayout(import_group)

        file_layout = QHBoxLayout()
        self._dir_label = QLabel("No folder selected")
        self._dir_label.setObjectName("secondaryLabel")
        self._dir_label.setWordWrap(True)

        self._open_btn = QPushButton("Open DICOM Folder...")
        self._open_btn.setMinimumHeight(32)
        self._open_btn.clicked.connect(self.browse)

        file_layout.addWidget(self._dir_label, stretch=1)
        file_layout.addWidget(self._open_btn)
        import_layout.addLayout(file_layout)

        self._recursive_check = QCheckBox("Include subfolders")
        self._recursive_check.setChecked(True)
        import_layout.addWidget(self._recursive_check)

        self._phantom_btn = QPushButton("Generate Phantom")
        self._phantom_btn.clicked.connect(self.phantom_requested.emit)
        import_layout.addWidget(self._phantom_btn)

        layout.addWidget(import_group)

        # Series info section
        info_group = QGroupBox("Series Information")
        info_layout = QFormLayout(info_group)

        self._id_label = QLabel("-")
        self._id_label.setWordWrap(True)
        self._shape_label = QLabel("-")
        self._spacing_label = QLabel("-")
        self._window_label = QLabel("-")
        self._desc_label = QLabel("-")

        info_layout.addRow("Series:", self._id_label)
        info_layout.addRow("Shape (Z, Y, X):", self._shape_label)
        info_layout.addRow("Spacing:", self._spacing_label)
        info_layout.addRow("Window:", self._window_label)
        info_layout.addRow("Description:", self._desc_label)

        layout.addWidget(info_group)

    def browse(self) -> None:
        """Handle browse button click."""
        directory = QFileDialog.getExistingDirectory(self, "Open DICOM Folder", "")
        if directory:
            self._dir_label.setText(directory)
            self.dicom_requested.emit(directory, self._recursive_check.isChecked())

    def set_busy(self, busy: bool) -> None:
        self._open_btn.setEnabled(not busy)
        self._phantom_btn.setEnabled(not busy)

    def show_series(self, volume: Optional[SeriesVolume]) -> None:
        """Display information about a series (None clears the fields)."""
        if volume is None:
            for label in (self._id_label, self._shape_label, self._spacing_label,
                          self._window_label, self._desc_label):
                label.setText("-")
            return

        self._id_label.setText(volume.series_id)
        self._shape_label.setText(" x ".join(str(n) for n in volume.shape))
        self._spacing_label.setText(" x ".join(f"{s:.2f}" for s in volume.spacing) + " mm")
        self._window_label.setText(f"C {volume.window_center:.0f} / W {volume.window_width:.0f}")
        self._desc_label.setText(volume.description or "-")
