"""
Main Window

The main application window for CT Batch Capture.
"""

from typing import List, Optional, Tuple

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QSplitter, QProgressBar, QStatusBar, QMessageBox,
    QTabWidget, QScrollArea, QFrame, QDockWidget, QProgressDialog
)
from PySide6.QtCore import Qt, QThread, Slot
from PySide6.QtGui import QAction

from capture import BatchCaptureManager, BatchSummary, CaptureRequest, FrameResult
from config import DEFAULT_GUI
from core.volume import SeriesVolume
from visualization import ViewerController
from .panels import LoaderPanel, ViewerPanel, CapturePanel, GalleryPanel, LogViewerPanel
from .workers import DICOMLoaderWorker, PhantomWorker, ExportWorker


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self):
        super().__init__()

        # The on-screen viewer owns the session's data cache
        self._controller = ViewerController()
        self._worker: Optional[QThread] = None
        self._batch_manager: Optional[BatchCaptureManager] = None
        self._progress_dialog: Optional[QProgressDialog] = None

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()

    @property
    def controller(self) -> ViewerController:
        return self._controller

    def _setup_ui(self) -> None:
        """Set up the main window UI."""
        self.setWindowTitle(DEFAULT_GUI.window_title)
        self.setMinimumSize(*DEFAULT_GUI.min_size)
        self.resize(*DEFAULT_GUI.window_size)

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)
        main_layout.setContentsMargins(8, 8, 8, 8)
        main_layout.setSpacing(8)

        splitter = QSplitter(Qt.Horizontal)

        # Left panel controls container
        controls_widget = QWidget()
        controls_layout = QVBoxLayout(controls_widget)
        controls_layout.setContentsMargins(4, 4, 4, 4)

        self._loader_panel = LoaderPanel()
        controls_layout.addWidget(self._loader_panel)

        self._capture_panel = CapturePanel()
        controls_layout.addWidget(self._capture_panel)
        controls_layout.addStretch()

        scroll_area = QScrollArea()
        scroll_area.setWidget(controls_widget)
        scroll_area.setWidgetResizable(True)
        scroll_area.setFrameShape(QFrame.NoFrame)
        scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        scroll_area.setMinimumWidth(320)
        scroll_area.setMaximumWidth(450)

        splitter.addWidget(scroll_area)

        # Right panel (viewer and gallery in tabs)
        self._tabs = QTabWidget()

        self._viewer_panel = ViewerPanel(self._controller)
        self._tabs.addTab(self._viewer_panel, "Viewer")

        self._gallery_panel = GalleryPanel()
        self._tabs.addTab(self._gallery_panel, "Captured Images")

        splitter.addWidget(self._tabs)

        splitter.setCollapsible(0, False)
        splitter.setCollapsible(1, False)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([300, 900])

        main_layout.addWidget(splitter)

        # Log dock
        self._log_panel = LogViewerPanel()
        log_dock = QDockWidget("Log", self)
        log_dock.setObjectName("logDock")
        log_dock.setWidget(self._log_panel)
        self.addDockWidget(Qt.BottomDockWidgetArea, log_dock)
        self._log_dock = log_dock

        # Status bar
        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)

        self._progress_bar = QProgressBar()
        self._progress_bar.setMaximumWidth(200)
        self._progress_bar.setVisible(False)
        self._status_bar.addPermanentWidget(self._progress_bar)

        self._status_bar.showMessage("Ready")

    def _setup_menu(self) -> None:
        """Set up the menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")

        open_action = QAction("Open DICOM Folder...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._loader_panel.browse)
        file_menu.addAction(open_action)

        phantom_action = QAction("Generate Phantom", self)
        phantom_action.triggered.connect(self._on_generate_phantom)
        file_menu.addAction(phantom_action)

        file_menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menubar.addMenu("View")
        view_menu.addAction(self._log_dock.toggleViewAction())

        help_menu = menubar.addMenu("Help")

        about_action = QAction("About", self)
        about_action.triggered.connect(self._on_about)
        help_menu.addAction(about_action)

    def _connect_signals(self) -> None:
        """Connect widget signals."""
        self._loader_panel.dicom_requested.connect(self._on_open_dicom)
        self._loader_panel.phantom_requested.connect(self._on_generate_phantom)
        self._viewer_panel.series_changed.connect(self._on_series_selected)
        self._capture_panel.run_requested.connect(self._on_run_batch)
        self._gallery_panel.save_requested.connect(self._on_save_images)
        self._controller.data_cache.series_added.connect(self._on_series_added)

    # ========== Helper Methods ==========

    def _create_progress_dialog(self, title: str) -> QProgressDialog:
        """Create and configure a modal progress dialog."""
        dialog = QProgressDialog(title, "Cancel", 0, 100, self)
        dialog.setWindowModality(Qt.WindowModal)
        dialog.setAutoClose(False)
        dialog.setAutoReset(False)
        dialog.setCancelButton(None)  # Workers cannot be interrupted
        dialog.show()
        return dialog

    def _close_progress_dialog(self) -> None:
        """Close and clean up the progress dialog."""
        if self._progress_dialog:
            self._progress_dialog.close()
            self._progress_dialog = None

    def _show_error(self, title: str, message: str) -> None:
        """Display an error message and restore UI state."""
        self._close_progress_dialog()
        self._loader_panel.set_busy(False)
        self._capture_panel.set_running(False)
        self._status_bar.showMessage(f"Error: {message}")
        QMessageBox.critical(self, title, f"An error occurred:\n\n{message}")

    def _worker_busy(self) -> bool:
        if self._worker is not None and self._worker.isRunning():
            QMessageBox.warning(
                self,
                "Task Running",
                "Please wait for the current task to complete."
            )
            return True
        return False

    @Slot(float)
    def _on_worker_progress(self, progress: float) -> None:
        if self._progress_dialog:
            self._progress_dialog.setValue(int(progress * 100))

    # ========== Loading ==========

    @Slot(str, bool)
    def _on_open_dicom(self, directory: str, recursive: bool) -> None:
        if self._worker_busy():
            return

        self._loader_panel.set_busy(True)
        self._status_bar.showMessage(f"Loading DICOM from {directory}...")
        self._progress_dialog = self._create_progress_dialog("Loading DICOM Series...")

        self._worker = DICOMLoaderWorker(directory, recursive=recursive)
        self._worker.progress.connect(self._on_worker_progress)
        self._worker.finished.connect(self._on_series_loaded)
        self._worker.error.connect(lambda msg: self._show_error("Loading Error", msg))
        self._worker.start()

    def _on_generate_phantom(self) -> None:
        if self._worker_busy():
            return

        series_id = "phantom"
        n = 1
        while series_id in self._controller.data_cache:
            n += 1
            series_id = f"phantom_{n}"

        self._loader_panel.set_busy(True)
        self._status_bar.showMessage("Generating phantom...")

        self._worker = PhantomWorker(series_id)
        self._worker.finished.connect(lambda volume: self._on_series_loaded([volume]))
        self._worker.error.connect(lambda msg: self._show_error("Phantom Error", msg))
        self._worker.start()

    @Slot(object)
    def _on_series_loaded(self, volumes: List[SeriesVolume]) -> None:
        self._close_progress_dialog()
        self._loader_panel.set_busy(False)

        for volume in volumes:
            self._controller.load_series(volume)

        self._status_bar.showMessage(f"Loaded {len(volumes)} series")

    @Slot(str)
    def _on_series_added(self, series_id: str) -> None:
        series_ids = self._controller.data_cache.series_ids
        self._viewer_panel.refresh_series()
        self._capture_panel.set_series(series_ids)

    @Slot(str)
    def _on_series_selected(self, series_id: str) -> None:
        self._loader_panel.show_series(self._controller.series(series_id))

    # ========== Batch capture ==========

    @Slot(object, tuple, float)
    def _on_run_batch(
        self,
        requests: List[CaptureRequest],
        output_size: Tuple[int, int],
        frame_timeout_s: float
    ) -> None:
        if self._batch_manager is not None and self._batch_manager.is_running:
            QMessageBox.warning(self, "Batch Running", "A capture batch is already running.")
            return

        self._gallery_panel.clear()
        self._capture_panel.set_running(True)
        self._progress_bar.setValue(0)
        self._progress_bar.setVisible(True)
        self._status_bar.showMessage("Capturing...")

        if self._batch_manager is not None:
            self._batch_manager.deleteLater()
        manager = BatchCaptureManager(frame_timeout_s=frame_timeout_s, parent=self)
        manager.progress.connect(self._on_batch_progress)
        manager.summary_ready.connect(self._on_batch_finished)
        manager.engine.frame_captured.connect(self._on_frame_captured)
        self._batch_manager = manager

        try:
            manager.execute_batch(requests, self._controller, output_size)
        except (RuntimeError, ValueError) as e:
            self._progress_bar.setVisible(False)
            self._show_error("Capture Error", str(e))

    @Slot(float)
    def _on_batch_progress(self, progress: float) -> None:
        value = int(progress * 100)
        self._progress_bar.setValue(value)
        self._capture_panel.set_progress(progress)

    @Slot(object)
    def _on_frame_captured(self, result: FrameResult) -> None:
        if result.has_image:
            self._gallery_panel.add_image(result.index, result.image)

    @Slot(object)
    def _on_batch_finished(self, summary: BatchSummary) -> None:
        self._capture_panel.set_running(False)
        self._capture_panel.set_progress(1.0)
        self._progress_bar.setVisible(False)

        message = f"Captured {summary.num_images} of {summary.num_states} view(s)"
        if summary.timed_out:
            message += f", {len(summary.timed_out)} timed out"
        self._status_bar.showMessage(message)
        if summary.num_images:
            self._tabs.setCurrentWidget(self._gallery_panel)

    # ========== Export ==========

    @Slot(str)
    def _on_save_images(self, output_dir: str) -> None:
        frames = self._gallery_panel.frames
        if not frames or self._worker_busy():
            return

        self._status_bar.showMessage("Saving images...")
        self._progress_dialog = self._create_progress_dialog("Saving Captured Images...")

        self._worker = ExportWorker(frames, output_dir)
        self._worker.progress.connect(self._on_worker_progress)
        self._worker.finished.connect(self._on_export_finished)
        self._worker.error.connect(lambda msg: self._show_error("Export Error", msg))
        self._worker.start()

    @Slot(object)
    def _on_export_finished(self, files: list) -> None:
        self._close_progress_dialog()
        self._status_bar.showMessage(f"Saved {len(files)} images")
        QMessageBox.information(
            self,
            "Export Complete",
            f"Successfully saved {len(files)} images."
        )

    def _on_about(self) -> None:
        """Show about dialog."""
        QMessageBox.about(
            self,
            f"About {DEFAULT_GUI.window_title}",
            f"<h3>{DEFAULT_GUI.window_title}</h3>"
            "<p>Version 1.0</p>"
            "<p>Batch capture of 2D and MPR views from CT series.</p>"
            "<ul>"
            "<li>DICOM series import</li>"
            "<li>Uniform and center-biased slice sampling</li>"
            "<li>MPR with MIP / MinIP / average slabs</li>"
            "<li>Offscreen capture with per-frame timeout</li>"
            "<li>PNG export</li>"
            "</ul>"
        )
