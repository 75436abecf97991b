import pytest

from capture import (
    CenterBiasedSampling,
    SamplingKind,
    UniformSampling,
    resolve_sampling,
)


def test_uniform_resolves_to_zero_pair():
    assert resolve_sampling(UniformSampling()) == (0, 0.0)


def test_center_biased_passes_exponent_through_exactly():
    assert resolve_sampling(CenterBiasedSampling(1.5)) == (1, 1.5)
    assert resolve_sampling(CenterBiasedSampling(0.3333333)) == (1, 0.3333333)


def test_kind_codes_match_enum():
    kind, _ = resolve_sampling(CenterBiasedSampling(2.0))
    assert kind == SamplingKind.CENTER_BIASED
    assert type(kind) is int


def test_unknown_strategy_is_rejected():
    with pytest.raises(TypeError):
        resolve_sampling("uniform")


def test_strategies_are_value_objects():
    assert CenterBiasedSampling(2.0) == CenterBiasedSampling(2.0)
    assert UniformSampling() == UniformSampling()
    assert hash(CenterBiasedSampling(2.0)) == hash(CenterBiasedSampling(2.0))
