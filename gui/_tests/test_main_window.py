import logging

from capture import CaptureRequest
from gui import DICOMLoaderWorker, MainWindow
from loaders import PhantomConfig, generate_phantom


def test_loaded_series_reach_panels_and_batch_fills_gallery(qtbot):
    window = MainWindow()
    qtbot.addWidget(window)
    try:
        window.controller.load_series(generate_phantom("p", PhantomConfig(shape=(8, 16, 16))))
        assert window._capture_panel.current_request().series_id == "p"

        window._capture_panel.run_requested.emit([CaptureRequest.slice_2d("p", 3)], (32, 24), 1.0)

        qtbot.waitUntil(lambda: len(window._gallery_panel.frames) == 3, timeout=5000)
        qtbot.waitUntil(lambda: not window._batch_manager.is_running, timeout=5000)
        _, image = window._gallery_panel.frames[0]
        assert (image.width(), image.height()) == (32, 24)
    finally:
        logging.getLogger().removeHandler(window._log_panel.handler)


def test_loader_worker_reports_missing_directory(qtbot, tmp_path):
    worker = DICOMLoaderWorker(str(tmp_path / "absent"))

    with qtbot.waitSignal(worker.error, timeout=5000) as blocker:
        worker.start()
    worker.wait()

    assert "not found" in blocker.args[0]
