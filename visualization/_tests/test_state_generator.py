import pytest

from visualization import ViewParameters, sample_indices


@pytest.mark.parametrize("kind, exponent", [(0, 0.0), (1, 1.0), (1, 2.0), (1, 3.5)])
@pytest.mark.parametrize("num_slices, max_entries", [(10, 4), (100, 7), (5, 5), (3, 10)])
def test_indices_sorted_unique_bounded(num_slices, max_entries, kind, exponent):
    indices = sample_indices(num_slices, max_entries, kind, exponent)

    assert indices == sorted(set(indices))
    assert 0 < len(indices) <= min(num_slices, max_entries)
    assert all(0 <= i < num_slices for i in indices)


def test_uniform_spans_first_to_last_slice():
    assert sample_indices(11, 3, 0, 0.0) == [0, 5, 10]


def test_single_entry_picks_middle_slice():
    assert sample_indices(9, 1) == [4]


def test_center_bias_pulls_samples_toward_middle():
    uniform = sample_indices(101, 9, 0, 0.0)
    biased = sample_indices(101, 9, 1, 2.0)

    def spread(indices):
        return sum(abs(i - 50) for i in indices)

    assert spread(biased) < spread(uniform)
    assert biased[0] == 0 and biased[-1] == 100


def test_non_positive_exponent_falls_back_to_uniform(caplog):
    assert sample_indices(11, 3, 1, 0.0) == sample_indices(11, 3, 0, 0.0)
    assert "exponent" in caplog.text


@pytest.mark.parametrize("num_slices, max_entries", [(0, 3), (10, 0)])
def test_degenerate_inputs_give_no_indices(num_slices, max_entries):
    assert sample_indices(num_slices, max_entries) == []


def test_view_parameters_state_round_trip():
    params = ViewParameters("s", mode="mpr", orientation="coronal", slice_index=7,
                            slab_type="mip", slab_thickness_mm=5.0)
    assert ViewParameters.from_state(params.to_state()) == params


@pytest.mark.parametrize("state", [
    {"orientation": "axial"},
    {"series_id": "s", "orientation": "oblique"},
    {"series_id": "s", "slab_type": "volume"},
])
def test_malformed_states_are_rejected(state):
    with pytest.raises((KeyError, ValueError)):
        ViewParameters.from_state(state)
