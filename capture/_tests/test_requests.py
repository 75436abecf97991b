import dataclasses

import pytest

from capture import (
    CaptureRequest,
    CenterBiasedSampling,
    OrientationIntent,
    RenderingMode,
    SlabType,
    UniformSampling,
)


def test_slice_2d_defaults_to_uniform_sampling():
    request = CaptureRequest.slice_2d("ct1", 4)
    assert request.mode is RenderingMode.SLICE_2D
    assert request.sampling_count == 4
    assert request.sampling_strategy == UniformSampling()
    assert request.orientation_intent is OrientationIntent.NONE
    assert request.slab_type is SlabType.NONE


def test_mpr_coerces_integer_codes_to_enums():
    request = CaptureRequest.mpr(
        "ct1", 2, CenterBiasedSampling(2.0),
        orientation_intent=2, slab_type=1, slab_thickness_mm=5,
    )
    assert request.mode is RenderingMode.MPR
    assert request.orientation_intent is OrientationIntent.CORONAL
    assert request.slab_type is SlabType.MIP
    assert request.slab_thickness_mm == 5.0
    assert isinstance(request.slab_thickness_mm, float)


def test_mode_accepts_wire_string():
    assert CaptureRequest("ct1", mode="mpr").mode is RenderingMode.MPR


@pytest.mark.parametrize("count", [0, -3, 2.5, True])
def test_rejects_invalid_sampling_count(count):
    with pytest.raises(ValueError):
        CaptureRequest("ct1", sampling_count=count)


def test_rejects_negative_slab_thickness():
    with pytest.raises(ValueError):
        CaptureRequest.mpr("ct1", 1, slab_thickness_mm=-1.0)


@pytest.mark.parametrize("field, value", [
    ("orientation_intent", 7),
    ("slab_type", 9),
    ("mode", "volume"),
])
def test_rejects_unknown_codes(field, value):
    with pytest.raises(ValueError):
        CaptureRequest("ct1", **{field: value})


def test_requests_are_immutable():
    request = CaptureRequest.slice_2d("ct1", 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.sampling_count = 5


def test_rejects_nan_slab_thickness():
    with pytest.raises(ValueError):
        CaptureRequest.mpr("ct1", 1, slab_thickness_mm=float("nan"))
