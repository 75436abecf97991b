"""
Request Expander

Turns capture requests into the flat, ordered list of view states that
makes up one batch.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence

from core.base import BaseViewerController, ViewState
from .requests import CaptureRequest, RenderingMode
from .sampling import resolve_sampling


@dataclass
class BatchJob:
    """
    Ordered view states for one batch.

    Attributes:
        states: View states in capture order
        origins: For each state, the index of the request that produced it
    """
    states: List[ViewState] = field(default_factory=list)
    origins: List[int] = field(default_factory=list)

    def extend(self, request_index: int, states: Sequence[ViewState]) -> None:
        self.states.extend(states)
        self.origins.extend([request_index] * len(states))

    @property
    def is_empty(self) -> bool:
        return not self.states

    def __len__(self) -> int:
        return len(self.states)

    def __iter__(self) -> Iterator[ViewState]:
        return iter(self.states)

    def __getitem__(self, index: int) -> ViewState:
        return self.states[index]


def _as_state_list(result, request: CaptureRequest) -> List[ViewState]:
    """Accept only a list/tuple of mappings; anything else counts as empty."""
    if not isinstance(result, (list, tuple)) or not all(isinstance(s, Mapping) for s in result):
        logging.warning(
            f"Viewer returned unexpected states for series '{request.series_id}' "
            f"({type(result).__name__}); treating as empty"
        )
        return []
    return list(result)


def expand_request(
    request: CaptureRequest,
    viewer: BaseViewerController
) -> List[ViewState]:
    """
    Expand one request into view states.

    Args:
        request: Capture request
        viewer: Viewer that generates states for the request's series

    Returns:
        Ordered view states (possibly empty)
    """
    kind, exponent = resolve_sampling(request.sampling_strategy)

    try:
        if request.mode is RenderingMode.SLICE_2D:
            result = viewer.minimal_2d_states_for_series(
                request.series_id,
                max_entries=request.sampling_count,
                sampling_strategy=kind,
                center_bias_exponent=exponent
            )
        else:
            result = viewer.mpr_states_for_series(
                request.series_id,
                max_entries=request.sampling_count,
                orientation_intent=int(request.orientation_intent),
                slab_type=int(request.slab_type),
                slab_thickness_mm=request.slab_thickness_mm,
                sampling_strategy=kind,
                center_bias_exponent=exponent
            )
    except Exception as e:
        logging.error(f"State generation failed for series '{request.series_id}': {e}")
        return []

    return _as_state_list(result, request)


def build_batch_job(
    requests: Sequence[CaptureRequest],
    viewer: BaseViewerController
) -> BatchJob:
    """
    Expand all requests in order and concatenate their states.

    States are not deduplicated; a series requested twice is captured twice.
    """
    job = BatchJob()
    for i, request in enumerate(requests):
        states = expand_request(request, viewer)
        job.extend(i, states)
        logging.info(
            f"  Request {i}: {request.mode.value} '{request.series_id}' "
            f"-> {len(states)}/{request.sampling_count} states"
        )
    return job
