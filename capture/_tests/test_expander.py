import logging

from capture import (
    BatchJob,
    CaptureRequest,
    CenterBiasedSampling,
    build_batch_job,
    expand_request,
)


def test_slice_2d_request_calls_2d_generator_with_resolved_sampling(stubs):
    viewer = stubs.StubViewer(states_2d={"a": stubs.make_states(5, "a")})
    states = expand_request(CaptureRequest.slice_2d("a", 3, CenterBiasedSampling(1.5)), viewer)

    assert [s["id"] for s in states] == ["a0", "a1", "a2"]
    assert viewer.calls == [("2d", "a", 3, 1, 1.5)]


def test_mpr_request_forwards_mpr_fields(stubs):
    viewer = stubs.StubViewer(states_mpr={"a": stubs.make_states(4, "a")})
    request = CaptureRequest.mpr("a", 2, orientation_intent=3, slab_type=2, slab_thickness_mm=7.5)

    states = expand_request(request, viewer)

    assert len(states) == 2
    assert viewer.calls == [("mpr", "a", 2, 3, 2, 7.5, 0, 0.0)]
    assert all(type(v) in (int, float, str) for v in viewer.calls[0][1:])


def test_generator_exception_yields_empty_and_logs(stubs, caplog):
    viewer = stubs.StubViewer(raises=KeyError("a"))
    with caplog.at_level(logging.ERROR):
        assert expand_request(CaptureRequest.slice_2d("a", 2), viewer) == []
    assert "State generation failed" in caplog.text


def test_unexpected_result_shape_is_treated_as_empty(stubs, caplog):
    viewer = stubs.StubViewer(states_2d={"a": "not-a-list", "b": [{"ok": 1}, 42]})
    with caplog.at_level(logging.WARNING):
        assert expand_request(CaptureRequest.slice_2d("a", 2), viewer) == []
        assert expand_request(CaptureRequest.slice_2d("b", 2), viewer) == []
    assert "unexpected states" in caplog.text


def test_tuple_results_are_accepted(stubs):
    viewer = stubs.StubViewer(states_2d={"a": tuple(stubs.make_states(2, "a"))})
    assert len(expand_request(CaptureRequest.slice_2d("a", 2), viewer)) == 2


def test_batch_job_preserves_request_order(stubs):
    viewer = stubs.StubViewer(
        states_2d={"a": stubs.make_states(3, "a")},
        states_mpr={"b": stubs.make_states(2, "b")},
    )
    requests = [
        CaptureRequest.slice_2d("a", 3),
        CaptureRequest.mpr("b", 2, CenterBiasedSampling(2.0)),
    ]

    job = build_batch_job(requests, viewer)

    assert len(job) <= 5
    assert [s["id"] for s in job] == ["a0", "a1", "a2", "b0", "b1"]
    assert job.origins == [0, 0, 0, 1, 1]


def test_batch_job_does_not_deduplicate(stubs):
    viewer = stubs.StubViewer(states_2d={"a": stubs.make_states(2, "a")})
    request = CaptureRequest.slice_2d("a", 2)

    job = build_batch_job([request, request], viewer)

    assert [s["id"] for s in job.states] == ["a0", "a1", "a0", "a1"]


def test_failing_request_does_not_affect_others(stubs):
    viewer = stubs.StubViewer(states_2d={"a": stubs.make_states(2, "a")})
    job = build_batch_job(
        [CaptureRequest.slice_2d("missing", 2), CaptureRequest.slice_2d("a", 2)],
        viewer,
    )
    assert job.origins == [1, 1]


def test_empty_request_list_gives_empty_job(stubs):
    job = build_batch_job([], stubs.StubViewer())
    assert isinstance(job, BatchJob)
    assert job.is_empty
    assert len(job) == 0
