"""
Progress Tracking Utilities

Maps per-phase progress of a capture batch onto a single 0.0-1.0 range.
"""

from typing import Callable, Optional, List, Tuple
from dataclasses import dataclass


@dataclass
class ProgressPhase:
    """Defines a phase in a workflow with its progress weight."""
    name: str
    weight: float  # Relative weight (will be normalized)


class TaskProgressTracker:
    """
    Manages progress tracking for multi-phase workflows.

    Example:
        tracker = TaskProgressTracker(emit_fn=self.progress.emit)
        tracker.set_phases(get_batch_phases())

        tracker.start_phase(0)
        job = build_batch_job(requests, viewer)
        tracker.end_phase()

        tracker.start_phase(1)
        frame_cb = tracker.sub_progress()
        ...
        frame_cb((index + 1) / len(job))
    """

    def __init__(self, emit_fn: Callable[[float], None]):
        """
        Initialize tracker.

        Args:
            emit_fn: Function to call with progress value (0.0 - 1.0)
        """
        self._emit = emit_fn
        self._phases: List[ProgressPhase] = []
        self._milestones: List[float] = []  # Start points for each phase
        self._current_phase: int = -1

    def set_phases(self, phases: List[ProgressPhase]) -> None:
        """Set the workflow phases and compute their milestones."""
        self._phases = phases

        total_weight = sum(p.weight for p in phases)
        if total_weight <= 0:
            total_weight = 1.0

        cumulative = 0.0
        self._milestones = []
        for phase in phases:
            self._milestones.append(cumulative)
            cumulative += phase.weight / total_weight
        self._milestones.append(1.0)  # End milestone

    def get_range(self, phase_index: int) -> Tuple[float, float]:
        """Get the (start, end) progress range for a phase."""
        if phase_index < 0 or phase_index >= len(self._phases):
            return (0.0, 1.0)
        return (self._milestones[phase_index], self._milestones[phase_index + 1])

    def start_phase(self, phase_index: int) -> None:
        """Start a new phase and emit its starting progress."""
        self._current_phase = phase_index
        start, _ = self.get_range(phase_index)
        self._emit(start)

    def end_phase(self) -> None:
        """End the current phase and emit its ending progress."""
        if self._current_phase >= 0:
            _, end = self.get_range(self._current_phase)
            self._emit(end)

    def sub_progress(self, phase_index: Optional[int] = None) -> Callable[[float], None]:
        """
        Create a callback that maps 0.0-1.0 onto a phase's progress range.

        Args:
            phase_index: Phase index (defaults to current phase)
        """
        if phase_index is None:
            phase_index = self._current_phase

        start, end = self.get_range(phase_index)

        def callback(p: float) -> None:
            p = max(0.0, min(1.0, p))
            self._emit(start + p * (end - start))

        return callback


def get_batch_phases() -> List[ProgressPhase]:
    """Capture batch phases."""
    return [
        ProgressPhase("Expansion", 1),
        ProgressPhase("Capture", 9),
    ]
