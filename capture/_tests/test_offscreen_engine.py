import time

import pytest

from capture import FrameSlot, OffscreenCaptureEngine


def _run(qtbot, engine, states, size=(64, 48), source=None):
    results = []
    completions = []
    engine.run_batch(
        source if source is not None else object(),
        states,
        size,
        on_frame=results.append,
        on_complete=lambda: completions.append(True),
    )
    qtbot.waitUntil(lambda: bool(completions), timeout=3000)
    return results, completions


def test_frame_slot_first_writer_wins():
    slot = FrameSlot(3)
    assert slot.fill("image") is True
    assert slot.fill(None, timed_out=True) is False
    assert slot.image == "image"
    assert slot.timed_out is False
    assert slot.filled


@pytest.mark.parametrize("controller", ["SyncController", "DeferredController"])
def test_every_state_produces_one_result_in_order(qtbot, make_engine, stubs, controller):
    engine = make_engine(getattr(stubs, controller))
    states = stubs.make_states(4)

    results, completions = _run(qtbot, engine, states)

    assert [r.index for r in results] == [0, 1, 2, 3]
    assert [r.image for r in results] == [("image", f"s{i}") for i in range(4)]
    assert [r.state for r in results] == states
    assert completions == [True]
    assert not engine.is_running
    assert engine.last_summary.num_images == 4


def test_hanging_frames_time_out_and_batch_still_completes(qtbot, make_engine, stubs):
    engine = make_engine(stubs.HangingController, frame_timeout_s=0.05)
    start = time.perf_counter()

    results, completions = _run(qtbot, engine, stubs.make_states(3))

    elapsed = time.perf_counter() - start
    assert [r.image for r in results] == [None, None, None]
    assert all(r.timed_out for r in results)
    assert engine.last_summary.timed_out == [0, 1, 2]
    assert engine.last_summary.num_images == 0
    assert completions == [True]
    assert elapsed < 2.0


def test_late_completions_are_discarded(qtbot, make_engine, stubs):
    engine = make_engine(stubs.LateController, frame_timeout_s=0.05)
    emitted = []
    engine.frame_captured.connect(emitted.append)

    results, completions = _run(qtbot, engine, stubs.make_states(2))
    qtbot.waitUntil(lambda: stubs.LateController.late_calls == 2, timeout=3000)

    assert len(results) == 2
    assert len(emitted) == 2
    assert all(r.image is None and r.timed_out for r in results)
    assert completions == [True]


def test_apply_failure_skips_item_and_continues(qtbot, make_engine, stubs):
    engine = make_engine(stubs.RaisingController)
    states = stubs.make_states(3)
    states[1]["fail"] = True

    results, completions = _run(qtbot, engine, states)

    assert [r.image for r in results] == [("image", "s0"), None, ("image", "s2")]
    assert results[1].timed_out is False
    assert engine.last_summary.failed == [1]
    assert completions == [True]


def test_missing_image_is_reported_without_timeout(qtbot, make_engine, stubs):
    engine = make_engine(stubs.NoImageController)

    results, _ = _run(qtbot, engine, stubs.make_states(2))

    assert [r.has_image for r in results] == [False, False]
    assert engine.last_summary.timed_out == []


def test_empty_batch_completes_immediately_without_resources(make_engine, surfaces, stubs):
    engine = make_engine()
    completions = []

    engine.run_batch(object(), [], (32, 32), on_complete=lambda: completions.append(True))

    assert completions == [True]
    assert surfaces == []
    assert stubs.RecordingController.instances == []


def test_isolated_controller_borrows_source_and_is_released(qtbot, make_engine, surfaces, stubs):
    engine = make_engine()
    source = stubs.StubViewer()

    _run(qtbot, engine, stubs.make_states(2), size=(80, 60), source=source)

    (controller,) = stubs.RecordingController.instances
    assert controller.shared_from is source
    assert controller.surface is surfaces[0]
    assert controller.released
    assert surfaces[0].size == (80, 60)
    assert surfaces[0].released


def test_second_batch_while_running_is_rejected(qtbot, make_engine, stubs):
    engine = make_engine(stubs.HangingController, frame_timeout_s=0.05)
    completions = []
    engine.run_batch(object(), stubs.make_states(1), (16, 16), on_complete=lambda: completions.append(1))

    with pytest.raises(RuntimeError):
        engine.run_batch(object(), stubs.make_states(1), (16, 16))

    qtbot.waitUntil(lambda: bool(completions), timeout=3000)
    assert completions == [1]


@pytest.mark.parametrize("size", [(0, 10), (10, -1)])
def test_rejects_non_positive_output_size(make_engine, stubs, size):
    with pytest.raises(ValueError):
        make_engine().run_batch(object(), stubs.make_states(1), size)


def test_rejects_non_positive_timeout(qtbot):
    with pytest.raises(ValueError):
        OffscreenCaptureEngine(frame_timeout_s=0)


def test_raising_frame_callback_does_not_stall_engine(qtbot, make_engine, stubs):
    engine = make_engine(stubs.DeferredController)
    seen, completions = [], []

    def on_frame(result):
        seen.append(result.index)
        raise ValueError("consumer error")

    engine.run_batch(object(), stubs.make_states(3), (16, 16), on_frame=on_frame,
                     on_complete=lambda: completions.append(True))
    qtbot.waitUntil(lambda: bool(completions), timeout=3000)

    assert seen == [0, 1, 2]
    assert completions == [True]
    assert not engine.is_running


def test_raising_completion_callback_still_emits_finished(qtbot, make_engine, stubs):
    engine = make_engine()

    def on_complete():
        raise RuntimeError("listener gone")

    with qtbot.waitSignal(engine.finished, timeout=3000):
        engine.run_batch(object(), stubs.make_states(2), (16, 16), on_complete=on_complete)
    assert not engine.is_running


def test_empty_batch_completes_even_with_zero_size(make_engine):
    engine = make_engine()
    completions = []

    engine.run_batch(object(), [], (0, 0), on_complete=lambda: completions.append(True))

    assert completions == [True]
