"""
Viewer Panel

On-screen slice / MPR viewer with plane, slab and window/level controls.
The panel drives a ViewerController, which owns the session's data cache.
"""

from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QLabel, QSlider, QSpinBox, QComboBox
)
from PySide6.QtCore import Qt, Signal

import pyqtgraph as pg

from config import DEFAULT_VIEWER
from core.volume import PLANE_AXES
from visualization import ViewerController, ViewParameters
from visualization.state_generator import MODE_2D, MODE_MPR, SLAB_TYPES
from ..utils import create_spinbox


class ViewerPanel(QWidget):
    """Panel for viewing series slices with window/level controls."""

    slice_changed = Signal(int)
    series_changed = Signal(str)

    def __init__(self, controller: Optional[ViewerController] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._controller = controller if controller is not None else ViewerController()
        self._current_slice = 0

        self._setup_ui()

    @property
    def controller(self) -> ViewerController:
        return self._controller

    def _setup_ui(self) -> None:
        """Set up the panel UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # Image display area
        view_group = QGroupBox("Viewer")
        view_layout = QVBoxLayout(view_group)

        self._image_view = pg.ImageView()
        self._image_view.ui.roiBtn.hide()
        self._image_view.ui.menuBtn.hide()
        self._image_view.ui.histogram.hide()
        view_layout.addWidget(self._image_view)

        layout.addWidget(view_group, stretch=1)

        # Series / plane selection
        plane_group = QGroupBox("Series")
        plane_layout = QVBoxLayout(plane_group)

        series_row = QHBoxLayout()
        series_row.addWidget(QLabel("Series:"))
        self._series_combo = QComboBox()
        self._series_combo.currentTextChanged.connect(self._on_series_changed)
        series_row.addWidget(self._series_combo, stretch=1)
        plane_layout.addLayout(series_row)

        orient_row = QHBoxLayout()
        orient_row.addWidget(QLabel("Plane:"))
        self._orientation_combo = QComboBox()
        self._orientation_combo.addItems(list(PLANE_AXES.keys()))
        self._orientation_combo.currentTextChanged.connect(self._on_orientation_changed)
        orient_row.addWidget(self._orientation_combo, stretch=1)

        orient_row.addWidget(QLabel("Slab:"))
        self._slab_combo = QComboBox()
        self._slab_combo.addItems(list(SLAB_TYPES.values()))
        self._slab_combo.currentTextChanged.connect(lambda _: self._update_display())
        orient_row.addWidget(self._slab_combo)

        self._slab_spin = create_spinbox(
            10.0, 0.0, 200.0, step=1.0, decimals=1, suffix=" mm",
            tooltip="Slab thickness", callback=lambda _: self._update_display()
        )
        orient_row.addWidget(self._slab_spin)
        plane_layout.addLayout(orient_row)

        layout.addWidget(plane_group)

        # Slice navigation
        nav_group = QGroupBox("Navigation")
        nav_layout = QHBoxLayout(nav_group)

        nav_layout.addWidget(QLabel("Slice:"))

        self._slice_slider = QSlider(Qt.Horizontal)
        self._slice_slider.setRange(0, 0)
        self._slice_slider.valueChanged.connect(self._on_slice_changed)
        nav_layout.addWidget(self._slice_slider, stretch=1)

        self._slice_spin = QSpinBox()
        self._slice_spin.setRange(0, 0)
        self._slice_spin.valueChanged.connect(self._on_slice_spin_changed)
        nav_layout.addWidget(self._slice_spin)

        self._total_slices_label = QLabel("/ 0")
        nav_layout.addWidget(self._total_slices_label)

        layout.addWidget(nav_group)

        # Window/Level controls
        wl_group = QGroupBox("Window/Level")
        wl_layout = QVBoxLayout(wl_group)

        preset_row = QHBoxLayout()
        preset_row.addWidget(QLabel("Preset:"))
        self._preset_combo = QComboBox()
        self._preset_combo.addItems(list(DEFAULT_VIEWER.window_presets.keys()) + ["Custom"])
        self._preset_combo.setCurrentText("Soft Tissue")
        self._preset_combo.currentTextChanged.connect(self._on_preset_changed)
        preset_row.addWidget(self._preset_combo, stretch=1)
        wl_layout.addLayout(preset_row)

        wc_row = QHBoxLayout()
        wc_row.addWidget(QLabel("Center:"))
        self._wc_slider = QSlider(Qt.Horizontal)
        self._wc_slider.setRange(-1000, 3000)
        self._wc_slider.setValue(int(DEFAULT_VIEWER.default_window_center))
        self._wc_slider.valueChanged.connect(self._on_window_changed)
        wc_row.addWidget(self._wc_slider, stretch=1)
        self._wc_label = QLabel(str(self._wc_slider.value()))
        self._wc_label.setMinimumWidth(50)
        wc_row.addWidget(self._wc_label)
        wl_layout.addLayout(wc_row)

        ww_row = QHBoxLayout()
        ww_row.addWidget(QLabel("Width:"))
        self._ww_slider = QSlider(Qt.Horizontal)
        self._ww_slider.setRange(1, 4000)
        self._ww_slider.setValue(int(DEFAULT_VIEWER.default_window_width))
        self._ww_slider.valueChanged.connect(self._on_window_changed)
        ww_row.addWidget(self._ww_slider, stretch=1)
        self._ww_label = QLabel(str(self._ww_slider.value()))
        self._ww_label.setMinimumWidth(50)
        ww_row.addWidget(self._ww_label)
        wl_layout.addLayout(ww_row)

        layout.addWidget(wl_group)

    # ========== Series ==========

    def refresh_series(self) -> None:
        """Re-read the series list from the controller's data cache."""
        current = self._series_combo.currentText()
        series_ids = self._controller.data_cache.series_ids

        self._series_combo.blockSignals(True)
        self._series_combo.clear()
        self._series_combo.addItems(series_ids)
        self._series_combo.blockSignals(False)

        if current in series_ids:
            self._series_combo.setCurrentText(current)
        elif series_ids:
            self._series_combo.setCurrentIndex(0)
            self._on_series_changed(series_ids[0])

    @property
    def current_series_id(self) -> str:
        return self._series_combo.currentText()

    def _on_series_changed(self, series_id: str) -> None:
        volume = self._controller.series(series_id)
        if volume is None:
            return

        # Adopt the series' own window
        self._wc_slider.blockSignals(True)
        self._ww_slider.blockSignals(True)
        self._wc_slider.setValue(int(volume.window_center))
        self._ww_slider.setValue(int(volume.window_width))
        self._wc_slider.blockSignals(False)
        self._ww_slider.blockSignals(False)
        self._on_orientation_changed(self._orientation_combo.currentText())
        self.series_changed.emit(series_id)

    def _on_orientation_changed(self, orientation: str) -> None:
        volume = self._controller.series(self.current_series_id)
        if volume is None:
            return

        num_slices = volume.slice_count(PLANE_AXES[orientation])
        self._slice_slider.blockSignals(True)
        self._slice_spin.blockSignals(True)
        self._slice_slider.setRange(0, num_slices - 1)
        self._slice_spin.setRange(0, num_slices - 1)
        middle = num_slices // 2
        self._slice_slider.setValue(middle)
        self._slice_spin.setValue(middle)
        self._slice_slider.blockSignals(False)
        self._slice_spin.blockSignals(False)
        self._total_slices_label.setText(f"/ {num_slices}")

        self._current_slice = middle
        self._on_window_changed()

    # ========== Navigation ==========

    def _on_slice_changed(self, value: int) -> None:
        """Handle slice slider change."""
        self._current_slice = value
        self._slice_spin.blockSignals(True)
        self._slice_spin.setValue(value)
        self._slice_spin.blockSignals(False)
        self._update_display()
        self.slice_changed.emit(value)

    def _on_slice_spin_changed(self, value: int) -> None:
        """Handle slice spin box change."""
        self._current_slice = value
        self._slice_slider.blockSignals(True)
        self._slice_slider.setValue(value)
        self._slice_slider.blockSignals(False)
        self._update_display()
        self.slice_changed.emit(value)

    def _on_preset_changed(self, preset_name: str) -> None:
        """Handle preset combo change."""
        preset = DEFAULT_VIEWER.window_presets.get(preset_name)
        if preset is None:
            return
        self._wc_slider.blockSignals(True)
        self._ww_slider.blockSignals(True)
        self._wc_slider.setValue(int(preset["center"]))
        self._ww_slider.setValue(int(preset["width"]))
        self._wc_label.setText(str(preset["center"]))
        self._ww_label.setText(str(preset["width"]))
        self._wc_slider.blockSignals(False)
        self._ww_slider.blockSignals(False)
        self._update_display()

    def _on_window_changed(self) -> None:
        """Handle window/level slider change."""
        wc = self._wc_slider.value()
        ww = self._ww_slider.value()
        self._wc_label.setText(str(wc))
        self._ww_label.setText(str(ww))

        # Set combo to Custom if values don't match any preset
        matched = "Custom"
        for name, preset in DEFAULT_VIEWER.window_presets.items():
            if preset["center"] == wc and preset["width"] == ww:
                matched = name
                break
        self._preset_combo.blockSignals(True)
        self._preset_combo.setCurrentText(matched)
        self._preset_combo.blockSignals(False)

        self._update_display()

    # ========== Display ==========

    def current_view(self) -> Optional[ViewParameters]:
        """View parameters matching the controls, or None with no series."""
        series_id = self.current_series_id
        if not series_id:
            return None

        slab_type = self._slab_combo.currentText()
        return ViewParameters(
            series_id=series_id,
            mode=MODE_2D if slab_type == "none" and self._orientation_combo.currentIndex() == 0 else MODE_MPR,
            orientation=self._orientation_combo.currentText(),
            slice_index=self._current_slice,
            slab_type=slab_type,
            slab_thickness_mm=self._slab_spin.value() if slab_type != "none" else 0.0,
            window_center=float(self._wc_slider.value()),
            window_width=float(self._ww_slider.value()),
        )

    def _update_display(self) -> None:
        """Update the image display."""
        view = self.current_view()
        if view is None:
            return

        self._controller.apply_state(view.to_state(), render=False)
        pixels = self._controller.render()
        if pixels is None:
            self._image_view.clear()
            return

        self._image_view.setImage(pixels.T, autoLevels=False, levels=(0, 255))

    @property
    def window_center(self) -> int:
        """Get current window center."""
        return self._wc_slider.value()

    @property
    def window_width(self) -> int:
        """Get current window width."""
        return self._ww_slider.value()
