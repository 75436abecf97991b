"""
Batch Capture Manager

Public entry point of the capture pipeline: expands requests against the
visible viewer, runs the offscreen engine and forwards produced images.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence

from PySide6.QtCore import QObject, Signal

from config import DEFAULT_CAPTURE
from core.base import BaseViewerController, OutputSize
from .expander import build_batch_job
from .offscreen import BatchSummary, FrameResult, OffscreenCaptureEngine
from .progress import TaskProgressTracker, get_batch_phases
from .requests import CaptureRequest


class BatchCaptureManager(QObject):
    """
    Runs capture batches for one caller.

    Only frames that actually produced an image are forwarded; timed-out
    frames are dropped. Completion is reported exactly once per batch.
    """

    # Signals
    image_generated = Signal(object)  # Emits captured QImage
    batch_complete = Signal()
    progress = Signal(float)
    summary_ready = Signal(object)  # Emits BatchSummary

    def __init__(
        self,
        frame_timeout_s: float = DEFAULT_CAPTURE.frame_timeout_s,
        engine: Optional[OffscreenCaptureEngine] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        if engine is None:
            engine = OffscreenCaptureEngine(frame_timeout_s=frame_timeout_s)
        self._engine = engine
        self._engine.setParent(self)
        self._tracker = TaskProgressTracker(emit_fn=self.progress.emit)

    @property
    def engine(self) -> OffscreenCaptureEngine:
        return self._engine

    @property
    def is_running(self) -> bool:
        return self._engine.is_running

    def execute_batch(
        self,
        requests: Sequence[CaptureRequest],
        source_viewer: BaseViewerController,
        output_size: OutputSize = DEFAULT_CAPTURE.output_size,
        on_image_generated: Optional[Callable[[Any], None]] = None,
        on_batch_complete: Optional[Callable[[], None]] = None
    ) -> int:
        """
        Expand requests and capture every resulting state offscreen.

        Args:
            requests: Capture requests, processed in order
            source_viewer: Visible viewer (provides states and data cache)
            output_size: (width, height) of captured images
            on_image_generated: Called with each produced image
            on_batch_complete: Called once when the batch is done

        Returns:
            Number of view states scheduled for capture
        """
        if self._engine.is_running:
            raise RuntimeError("A capture batch is already running")

        logging.info("=" * 50)
        logging.info(f"BATCH CAPTURE: {len(requests)} request(s)")
        self._tracker.set_phases(get_batch_phases())

        self._tracker.start_phase(0)
        job = build_batch_job(requests, source_viewer)
        self._tracker.end_phase()

        def complete() -> None:
            self._tracker.end_phase()
            summary = self._engine.last_summary
            self._log_summary(summary)
            if on_batch_complete is not None:
                try:
                    on_batch_complete()
                except Exception:
                    logging.exception("Batch completion callback failed")
            self.batch_complete.emit()
            self.summary_ready.emit(summary)

        if job.is_empty:
            logging.info("  No states to capture")
            self._tracker.start_phase(1)
            self._engine.run_batch(source_viewer, [], output_size, on_complete=complete)
            return 0

        self._tracker.start_phase(1)
        frame_progress = self._tracker.sub_progress(1)
        num_states = len(job)

        def frame(result: FrameResult) -> None:
            frame_progress((result.index + 1) / num_states)
            if result.image is None:
                logging.info(
                    f"  Frame {result.index} (request {job.origins[result.index]}): "
                    f"no image{' (timed out)' if result.timed_out else ''}"
                )
                return
            if on_image_generated is not None:
                try:
                    on_image_generated(result.image)
                except Exception:
                    logging.exception(f"  Frame {result.index}: image callback failed")
            self.image_generated.emit(result.image)

        self._engine.run_batch(
            source_viewer,
            job.states,
            output_size,
            on_frame=frame,
            on_complete=complete
        )
        return num_states

    @staticmethod
    def _log_summary(summary: BatchSummary) -> None:
        logging.info("BATCH SUMMARY:")
        logging.info(f"  States:     {summary.num_states}")
        logging.info(f"  Images:     {summary.num_images}")
        if summary.timed_out:
            logging.info(f"  Timed out:  {summary.timed_out}")
        if summary.failed:
            logging.info(f"  Failed:     {summary.failed}")
        logging.info(f"  Elapsed:    {summary.elapsed_s:.2f}s")
        logging.info("=" * 50)


# Managers started through expand_and_capture() stay referenced until done
_ACTIVE_MANAGERS: List[BatchCaptureManager] = []


def expand_and_capture(
    requests: Sequence[CaptureRequest],
    source_viewer: BaseViewerController,
    output_size: OutputSize = DEFAULT_CAPTURE.output_size,
    on_image: Optional[Callable[[Any], None]] = None,
    on_batch_complete: Optional[Callable[[], None]] = None,
    frame_timeout_s: Optional[float] = None
) -> BatchCaptureManager:
    """
    Run one capture batch with a dedicated manager.

    Args:
        requests: Capture requests, processed in order
        source_viewer: Visible viewer (provides states and data cache)
        output_size: (width, height) of captured images
        on_image: Called with each produced image
        on_batch_complete: Called once when the batch is done
        frame_timeout_s: Per-frame deadline (defaults to config)

    Returns:
        The manager running the batch, for signal connections
    """
    manager = BatchCaptureManager(
        frame_timeout_s=frame_timeout_s or DEFAULT_CAPTURE.frame_timeout_s
    )
    _ACTIVE_MANAGERS.append(manager)

    def done() -> None:
        if manager in _ACTIVE_MANAGERS:
            _ACTIVE_MANAGERS.remove(manager)
        if on_batch_complete is not None:
            on_batch_complete()

    try:
        manager.execute_batch(
            requests,
            source_viewer,
            output_size,
            on_image_generated=on_image,
            on_batch_complete=done
        )
    except Exception:
        if manager in _ACTIVE_MANAGERS:
            _ACTIVE_MANAGERS.remove(manager)
        raise
    return manager
