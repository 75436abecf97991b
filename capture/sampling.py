"""
Slice Sampling Strategies

Abstract sampling strategies for capture requests and their mapping to the
primitive (kind code, exponent) pair understood by viewer state generators.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union


class SamplingKind(IntEnum):
    """Sampling kind codes passed to state generators."""
    UNIFORM = 0
    CENTER_BIASED = 1


@dataclass(frozen=True)
class UniformSampling:
    """Evenly spaced samples across the series."""


@dataclass(frozen=True)
class CenterBiasedSampling:
    """
    Samples clustered toward the middle of the series.

    Attributes:
        exponent: Density exponent; larger values cluster more tightly
    """
    exponent: float = 2.0


SamplingStrategy = Union[UniformSampling, CenterBiasedSampling]


def resolve_sampling(strategy: SamplingStrategy) -> Tuple[int, float]:
    """
    Map a sampling strategy to its (kind code, exponent) pair.

    Args:
        strategy: UniformSampling or CenterBiasedSampling

    Returns:
        (0, 0.0) for uniform, (1, exponent) for center-biased
    """
    if isinstance(strategy, UniformSampling):
        return (int(SamplingKind.UNIFORM), 0.0)
    if isinstance(strategy, CenterBiasedSampling):
        return (int(SamplingKind.CENTER_BIASED), strategy.exponent)
    raise TypeError(f"Unknown sampling strategy: {strategy!r}")
