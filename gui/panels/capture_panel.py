"""
Capture Panel

Builds a list of capture requests and starts batch capture.
"""

from typing import List, Optional, Tuple

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QComboBox, QPushButton, QProgressBar,
    QGroupBox, QListWidget
)
from PySide6.QtCore import Signal

from capture import (
    CaptureRequest,
    CenterBiasedSampling,
    OrientationIntent,
    RenderingMode,
    SlabType,
    UniformSampling,
)
from config import DEFAULT_CAPTURE
from ..utils import create_spinbox


def describe_request(request: CaptureRequest) -> str:
    """One-line label for the request list."""
    if isinstance(request.sampling_strategy, CenterBiasedSampling):
        sampling = f"center^{request.sampling_strategy.exponent:g}"
    else:
        sampling = "uniform"
    text = f"{request.series_id} | {request.mode.value} x{request.sampling_count} ({sampling})"
    if request.mode is RenderingMode.MPR:
        text += f" | {request.orientation_intent.name.lower()}"
        if request.slab_type is not SlabType.NONE:
            text += f" {request.slab_type.name.lower()} {request.slab_thickness_mm:g}mm"
    return text


class CapturePanel(QWidget):
    """
    Request editor and batch launcher.

    Emits run_requested(requests, output_size, frame_timeout_s) when the
    user starts a batch.
    """

    # Signals
    run_requested = Signal(object, tuple, float)  # Emits (requests, output_size, frame_timeout_s)

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._requests: List[CaptureRequest] = []

        self._setup_ui()
        self._connect_signals()
        self._update_mode_widgets()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setSpacing(8)
        layout.setContentsMargins(0, 0, 0, 0)

        # === Request editor ===
        request_group = QGroupBox("Capture Request")
        form = QFormLayout(request_group)
        form.setSpacing(6)

        self._series_combo = QComboBox()
        form.addRow("Series:", self._series_combo)

        self._mode_combo = QComboBox()
        self._mode_combo.addItem("2D Slices", RenderingMode.SLICE_2D.value)
        self._mode_combo.addItem("MPR", RenderingMode.MPR.value)
        form.addRow("Mode:", self._mode_combo)

        self._count_spin = create_spinbox(
            DEFAULT_CAPTURE.default_sampling_count, 1, 1000,
            tooltip="Maximum number of views generated for this request"
        )
        form.addRow("Samples:", self._count_spin)

        self._strategy_combo = QComboBox()
        self._strategy_combo.addItem("Uniform", "uniform")
        self._strategy_combo.addItem("Center-biased", "center")
        form.addRow("Sampling:", self._strategy_combo)

        self._exponent_spin = create_spinbox(
            DEFAULT_CAPTURE.default_center_bias_exponent, 0.1, 10.0,
            step=0.5, decimals=1,
            tooltip="Higher values concentrate samples near the middle slice"
        )
        form.addRow("Bias exponent:", self._exponent_spin)

        self._orientation_combo = QComboBox()
        for intent in OrientationIntent:
            self._orientation_combo.addItem(intent.name.capitalize(), int(intent))
        self._orientation_combo.setCurrentIndex(1)
        form.addRow("Orientation:", self._orientation_combo)

        self._slab_combo = QComboBox()
        for slab in SlabType:
            self._slab_combo.addItem(slab.name.capitalize() if slab == SlabType.NONE else slab.name, int(slab))
        form.addRow("Slab:", self._slab_combo)

        self._thickness_spin = create_spinbox(
            10.0, 0.0, 200.0, step=1.0, decimals=1, suffix=" mm"
        )
        form.addRow("Thickness:", self._thickness_spin)

        self._add_btn = QPushButton("Add Request")
        form.addRow("", self._add_btn)

        layout.addWidget(request_group)

        # === Request list ===
        list_group = QGroupBox("Requests")
        list_layout = QVBoxLayout(list_group)

        self._request_list = QListWidget()
        list_layout.addWidget(self._request_list)

        buttons = QHBoxLayout()
        self._remove_btn = QPushButton("Remove")
        self._clear_btn = QPushButton("Clear")
        buttons.addWidget(self._remove_btn)
        buttons.addWidget(self._clear_btn)
        buttons.addStretch()
        list_layout.addLayout(buttons)

        layout.addWidget(list_group)

        # === Output ===
        output_group = QGroupBox("Output")
        output_form = QFormLayout(output_group)

        width, height = DEFAULT_CAPTURE.output_size
        size_row = QHBoxLayout()
        self._width_spin = create_spinbox(width, 16, 4096, suffix=" px")
        self._height_spin = create_spinbox(height, 16, 4096, suffix=" px")
        size_row.addWidget(self._width_spin)
        size_row.addWidget(QLabel("x"))
        size_row.addWidget(self._height_spin)
        output_form.addRow("Size:", size_row)

        self._timeout_spin = create_spinbox(
            DEFAULT_CAPTURE.frame_timeout_s, 0.1, 30.0, step=0.1, decimals=1,
            suffix=" s", tooltip="Frames that take longer are skipped"
        )
        output_form.addRow("Frame timeout:", self._timeout_spin)

        self._run_btn = QPushButton("Run Batch")
        self._run_btn.setObjectName("primaryButton")
        output_form.addRow("", self._run_btn)

        self._progress_bar = QProgressBar()
        self._progress_bar.setRange(0, 100)
        self._progress_bar.setValue(0)
        output_form.addRow("", self._progress_bar)

        layout.addWidget(output_group)
        layout.addStretch()

    def _connect_signals(self):
        self._mode_combo.currentIndexChanged.connect(self._update_mode_widgets)
        self._strategy_combo.currentIndexChanged.connect(self._update_mode_widgets)
        self._slab_combo.currentIndexChanged.connect(self._update_mode_widgets)
        self._add_btn.clicked.connect(self._on_add)
        self._remove_btn.clicked.connect(self._on_remove)
        self._clear_btn.clicked.connect(self.clear_requests)
        self._run_btn.clicked.connect(self._on_run)

    def _update_mode_widgets(self) -> None:
        is_mpr = self._mode_combo.currentData() == RenderingMode.MPR.value
        self._orientation_combo.setEnabled(is_mpr)
        self._slab_combo.setEnabled(is_mpr)
        self._thickness_spin.setEnabled(is_mpr and self._slab_combo.currentData() != SlabType.NONE)
        self._exponent_spin.setEnabled(self._strategy_combo.currentData() == "center")

    # ========== Requests ==========

    def set_series(self, series_ids: List[str]) -> None:
        """Replace the selectable series."""
        current = self._series_combo.currentText()
        self._series_combo.clear()
        self._series_combo.addItems(series_ids)
        if current in series_ids:
            self._series_combo.setCurrentText(current)

    def current_request(self) -> Optional[CaptureRequest]:
        """Build a request from the editor, or None if no series is selected."""
        series_id = self._series_combo.currentText()
        if not series_id:
            return None

        if self._strategy_combo.currentData() == "center":
            strategy = CenterBiasedSampling(self._exponent_spin.value())
        else:
            strategy = UniformSampling()

        count = self._count_spin.value()
        if self._mode_combo.currentData() == RenderingMode.MPR.value:
            slab = self._slab_combo.currentData()
            return CaptureRequest.mpr(
                series_id,
                count,
                sampling_strategy=strategy,
                orientation_intent=self._orientation_combo.currentData(),
                slab_type=slab,
                slab_thickness_mm=self._thickness_spin.value() if slab != SlabType.NONE else 0.0,
            )
        return CaptureRequest.slice_2d(series_id, count, sampling_strategy=strategy)

    def add_request(self, request: CaptureRequest) -> None:
        self._requests.append(request)
        self._request_list.addItem(describe_request(request))

    @property
    def requests(self) -> List[CaptureRequest]:
        return list(self._requests)

    def clear_requests(self) -> None:
        self._requests.clear()
        self._request_list.clear()

    def _on_add(self) -> None:
        request = self.current_request()
        if request is not None:
            self.add_request(request)

    def _on_remove(self) -> None:
        row = self._request_list.currentRow()
        if 0 <= row < len(self._requests):
            del self._requests[row]
            self._request_list.takeItem(row)

    # ========== Run ==========

    @property
    def output_size(self) -> Tuple[int, int]:
        return self._width_spin.value(), self._height_spin.value()

    def _on_run(self) -> None:
        requests = self.requests
        if not requests:
            request = self.current_request()
            if request is None:
                return
            requests = [request]
        self.run_requested.emit(requests, self.output_size, float(self._timeout_spin.value()))

    def set_running(self, running: bool) -> None:
        self._run_btn.setEnabled(not running)
        self._add_btn.setEnabled(not running)
        if running:
            self._progress_bar.setValue(0)

    def set_progress(self, value: float) -> None:
        """Progress in 0.0-1.0."""
        self._progress_bar.setValue(int(max(0.0, min(1.0, value)) * 100))
