"""Stub collaborators for the capture pipeline tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest
from PySide6.QtCore import QTimer

from capture import OffscreenCaptureEngine
from core.base import BaseViewerController


class StubSurface:
    def __init__(self, width: int, height: int) -> None:
        self.size = (width, height)
        self.released = False

    def release(self) -> None:
        self.released = True


class StubViewer(BaseViewerController):
    """Source viewer: returns canned states and records generator calls."""

    def __init__(self, states_2d=None, states_mpr=None, raises: Optional[Exception] = None) -> None:
        self.states_2d = states_2d if states_2d is not None else {}
        self.states_mpr = states_mpr if states_mpr is not None else {}
        self.raises = raises
        self.calls: List[tuple] = []

    def share_data_cache(self, source) -> None:
        pass

    def minimal_2d_states_for_series(self, series_id, max_entries, sampling_strategy, center_bias_exponent):
        self.calls.append(("2d", series_id, max_entries, sampling_strategy, center_bias_exponent))
        if self.raises is not None:
            raise self.raises
        return self.states_2d.get(series_id, [])[:max_entries]

    def mpr_states_for_series(self, series_id, max_entries, orientation_intent, slab_type,
                              slab_thickness_mm, sampling_strategy, center_bias_exponent):
        self.calls.append((
            "mpr", series_id, max_entries, orientation_intent, slab_type,
            slab_thickness_mm, sampling_strategy, center_bias_exponent,
        ))
        if self.raises is not None:
            raise self.raises
        return self.states_mpr.get(series_id, [])[:max_entries]

    def apply_state(self, state, render=True, on_applied=None) -> None:
        raise AssertionError("source viewer must not render")

    def capture_screenshot(self, on_captured) -> None:
        raise AssertionError("source viewer must not capture")


class RecordingController(BaseViewerController):
    """Offscreen controller base: records lifecycle, generates nothing."""

    instances: List["RecordingController"] = []

    def __init__(self) -> None:
        self.shared_from = None
        self.surface = None
        self.applied: List[Dict[str, Any]] = []
        self.released = False
        RecordingController.instances.append(self)

    def share_data_cache(self, source) -> None:
        self.shared_from = source

    def minimal_2d_states_for_series(self, *args, **kwargs):
        return []

    def mpr_states_for_series(self, *args, **kwargs):
        return []

    def attach_surface(self, surface) -> None:
        self.surface = surface

    def release(self) -> None:
        self.released = True

    def apply_state(self, state, render=True, on_applied=None) -> None:
        self.applied.append(state)
        self._state = state
        if on_applied is not None:
            on_applied()

    def capture_screenshot(self, on_captured: Callable[[Any], None]) -> None:
        on_captured(("image", self._state["id"]))


class SyncController(RecordingController):
    """Completes apply and capture synchronously."""


class DeferredController(RecordingController):
    """Completes apply and capture on later event loop turns."""

    def apply_state(self, state, render=True, on_applied=None) -> None:
        self.applied.append(state)
        self._state = state
        QTimer.singleShot(0, on_applied)

    def capture_screenshot(self, on_captured) -> None:
        image = ("image", self._state["id"])
        QTimer.singleShot(0, lambda: on_captured(image))


class HangingController(RecordingController):
    """Never reports that a state was applied."""

    def apply_state(self, state, render=True, on_applied=None) -> None:
        self.applied.append(state)


class LateController(RecordingController):
    """Completes, but only after the given delay."""

    delay_ms = 150
    late_calls = 0

    def apply_state(self, state, render=True, on_applied=None) -> None:
        self.applied.append(state)
        self._state = state

        def fire():
            LateController.late_calls += 1
            on_applied()

        QTimer.singleShot(self.delay_ms, fire)


class RaisingController(RecordingController):
    """apply_state raises for states flagged with 'fail'."""

    def apply_state(self, state, render=True, on_applied=None) -> None:
        if state.get("fail"):
            raise RuntimeError("render backend unavailable")
        super().apply_state(state, render, on_applied)


class NoImageController(RecordingController):
    """Capture completes but yields no image."""

    def capture_screenshot(self, on_captured) -> None:
        on_captured(None)


def make_states(n: int, series_id: str = "s") -> List[Dict[str, Any]]:
    return [{"series_id": series_id, "id": f"{series_id}{i}"} for i in range(n)]


@pytest.fixture(autouse=True)
def _reset_instances():
    RecordingController.instances = []
    LateController.late_calls = 0
    yield


@pytest.fixture
def surfaces() -> List[StubSurface]:
    return []


@pytest.fixture
def make_engine(qtbot, surfaces):
    """Build an engine with a stub controller class and recorded surfaces."""

    def factory(controller_cls=SyncController, frame_timeout_s: float = 0.05) -> OffscreenCaptureEngine:
        def surface_factory(width, height):
            surface = StubSurface(width, height)
            surfaces.append(surface)
            return surface

        return OffscreenCaptureEngine(
            frame_timeout_s=frame_timeout_s,
            controller_factory=controller_cls,
            surface_factory=surface_factory,
        )

    return factory


@pytest.fixture
def stubs() -> SimpleNamespace:
    return SimpleNamespace(
        StubSurface=StubSurface,
        StubViewer=StubViewer,
        RecordingController=RecordingController,
        SyncController=SyncController,
        DeferredController=DeferredController,
        HangingController=HangingController,
        LateController=LateController,
        RaisingController=RaisingController,
        NoImageController=NoImageController,
        make_states=make_states,
    )
