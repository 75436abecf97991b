"""
Offscreen Capture Engine

Drives an isolated viewer through a batch of view states, one at a time,
and captures each one without touching the on-screen session.

Each item races two completion paths into a single-assignment slot:
    apply_state -> capture_screenshot -> image
    deadline timer                    -> None
The first writer wins; whatever arrives later is discarded.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from PySide6.QtCore import QObject, QTimer, Signal

from config import DEFAULT_CAPTURE
from core.base import BaseViewerController, OutputSize, ViewState


@dataclass
class FrameResult:
    """Outcome of one batch item."""
    index: int  # Position in the flattened batch job
    image: Any = None  # Captured image, or None if no image was produced
    state: Optional[ViewState] = None
    timed_out: bool = False

    @property
    def has_image(self) -> bool:
        return self.image is not None


@dataclass
class BatchSummary:
    """Counts and timing for a finished batch."""
    num_states: int = 0
    num_images: int = 0
    timed_out: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    elapsed_s: float = 0.0


class FrameSlot:
    """
    Single-assignment result slot for one batch item.

    fill() returns True only for the first caller; later calls are no-ops.
    """

    __slots__ = ("index", "image", "timed_out", "_filled")

    def __init__(self, index: int):
        self.index = index
        self.image = None
        self.timed_out = False
        self._filled = False

    @property
    def filled(self) -> bool:
        return self._filled

    def fill(self, image: Any, timed_out: bool = False) -> bool:
        if self._filled:
            return False
        self._filled = True
        self.image = image
        self.timed_out = timed_out
        return True


def _default_surface_factory(width: int, height: int):
    from visualization.surface import OffscreenSurface
    return OffscreenSurface(width, height)


def _default_controller_factory() -> BaseViewerController:
    from visualization.viewer_controller import ViewerController
    return ViewerController()


class OffscreenCaptureEngine(QObject):
    """
    Sequential, deadline-guarded capture of a list of view states.

    One batch runs at a time per engine. Item i+1 never starts before item i
    has produced its FrameResult.
    """

    # Signals
    frame_captured = Signal(object)  # Emits FrameResult
    finished = Signal()

    def __init__(
        self,
        frame_timeout_s: float = DEFAULT_CAPTURE.frame_timeout_s,
        controller_factory: Callable[[], BaseViewerController] = _default_controller_factory,
        surface_factory: Callable[[int, int], Any] = _default_surface_factory,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        if frame_timeout_s <= 0:
            raise ValueError(f"frame_timeout_s must be positive, got {frame_timeout_s}")

        self._frame_timeout_s = frame_timeout_s
        self._controller_factory = controller_factory
        self._surface_factory = surface_factory

        self._controller: Optional[BaseViewerController] = None
        self._surface = None
        self._states: List[ViewState] = []
        self._index = 0
        self._slot: Optional[FrameSlot] = None
        self._timer: Optional[QTimer] = None
        self._on_frame: Optional[Callable[[FrameResult], None]] = None
        self._on_complete: Optional[Callable[[], None]] = None
        self._running = False
        self._start_time = 0.0
        self._summary = BatchSummary()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def frame_timeout_s(self) -> float:
        return self._frame_timeout_s

    @property
    def last_summary(self) -> BatchSummary:
        """Summary of the most recent (or current) batch."""
        return self._summary

    def run_batch(
        self,
        source_viewer: BaseViewerController,
        states: Sequence[ViewState],
        output_size: OutputSize,
        on_frame: Optional[Callable[[FrameResult], None]] = None,
        on_complete: Optional[Callable[[], None]] = None
    ) -> None:
        """
        Capture every state in order.

        Args:
            source_viewer: Visible viewer whose data cache is borrowed
            states: View states to capture
            output_size: (width, height) of the offscreen surface
            on_frame: Called with one FrameResult per state, in index order
            on_complete: Called once after the last state
        """
        if self._running:
            raise RuntimeError("A batch is already running on this engine")

        states = list(states)
        if states:
            width, height = (int(v) for v in output_size)
            if width <= 0 or height <= 0:
                raise ValueError(f"Output size must be positive, got {output_size}")

        self._states = states
        self._on_frame = on_frame
        self._on_complete = on_complete
        self._index = 0
        self._summary = BatchSummary(num_states=len(self._states))
        self._start_time = time.perf_counter()

        if not self._states:
            logging.info("Offscreen capture: empty batch, nothing to render")
            self._complete()
            return

        self._running = True
        self._surface = self._surface_factory(width, height)
        self._controller = self._controller_factory()
        self._controller.attach_surface(self._surface)
        self._controller.share_data_cache(source_viewer)

        logging.info(
            f"Offscreen capture: {len(self._states)} states at {width}x{height}, "
            f"timeout {self._frame_timeout_s:.2f}s/frame"
        )
        self._process_next()

    # ========== Per-item state machine ==========

    def _process_next(self) -> None:
        if self._index >= len(self._states):
            self._finish()
            return

        slot = FrameSlot(self._index)
        state = self._states[self._index]
        self._slot = slot

        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(int(round(self._frame_timeout_s * 1000)))
        timer.timeout.connect(lambda: self._on_deadline(slot))
        self._timer = timer
        timer.start()

        try:
            self._controller.apply_state(
                state,
                render=False,
                on_applied=lambda: self._on_applied(slot)
            )
        except Exception as e:
            logging.error(f"  Frame {slot.index}: apply_state failed: {e}")
            self._summary.failed.append(slot.index)
            self._resolve(slot, None)

    def _on_applied(self, slot: FrameSlot) -> None:
        if slot.filled:
            logging.debug(f"  Frame {slot.index}: late apply discarded")
            return
        try:
            self._controller.capture_screenshot(lambda image: self._resolve(slot, image))
        except Exception as e:
            logging.error(f"  Frame {slot.index}: capture failed: {e}")
            self._summary.failed.append(slot.index)
            self._resolve(slot, None)

    def _on_deadline(self, slot: FrameSlot) -> None:
        if slot.filled:
            return
        logging.warning(
            f"  Frame {slot.index}: no image after {self._frame_timeout_s:.2f}s, skipping"
        )
        self._resolve(slot, None, timed_out=True)

    def _resolve(self, slot: FrameSlot, image: Any, timed_out: bool = False) -> None:
        if not slot.fill(image, timed_out=timed_out):
            logging.debug(f"  Frame {slot.index}: late result discarded")
            return

        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None
        self._slot = None

        if timed_out:
            self._summary.timed_out.append(slot.index)
        if image is not None:
            self._summary.num_images += 1

        result = FrameResult(
            index=slot.index,
            image=image,
            state=self._states[slot.index],
            timed_out=timed_out
        )

        # Next item is queued before callers are notified
        self._index = slot.index + 1
        QTimer.singleShot(0, self._process_next)

        if self._on_frame is not None:
            try:
                self._on_frame(result)
            except Exception:
                logging.exception(f"  Frame {slot.index}: frame callback failed")
        self.frame_captured.emit(result)

    # ========== Teardown ==========

    def _finish(self) -> None:
        if self._controller is not None:
            self._controller.release()
        if self._surface is not None and hasattr(self._surface, "release"):
            self._surface.release()
        self._controller = None
        self._surface = None
        self._running = False
        self._complete()

    def _complete(self) -> None:
        self._summary.elapsed_s = time.perf_counter() - self._start_time
        self._states = []
        on_complete = self._on_complete
        self._on_frame = None
        self._on_complete = None

        if on_complete is not None:
            try:
                on_complete()
            except Exception:
                logging.exception("Offscreen capture: completion callback failed")
        self.finished.emit()
