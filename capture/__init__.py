"""
Capture package: batch offscreen capture of viewer states.

Requests are expanded into view states by the visible viewer, then rendered
one at a time on an offscreen surface that borrows the viewer's data cache.
"""

from .sampling import (
    SamplingKind,
    SamplingStrategy,
    UniformSampling,
    CenterBiasedSampling,
    resolve_sampling,
)
from .requests import CaptureRequest, RenderingMode, OrientationIntent, SlabType
from .expander import BatchJob, expand_request, build_batch_job
from .offscreen import FrameResult, FrameSlot, BatchSummary, OffscreenCaptureEngine
from .batch import BatchCaptureManager, expand_and_capture

__all__ = [
    "SamplingKind",
    "SamplingStrategy",
    "UniformSampling",
    "CenterBiasedSampling",
    "resolve_sampling",
    "CaptureRequest",
    "RenderingMode",
    "OrientationIntent",
    "SlabType",
    "BatchJob",
    "expand_request",
    "build_batch_job",
    "FrameResult",
    "FrameSlot",
    "BatchSummary",
    "OffscreenCaptureEngine",
    "BatchCaptureManager",
    "expand_and_capture",
]
