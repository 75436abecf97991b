"""
Synthetic Phantom

Builds a simple head-like phantom out of nested ellipsoids so the viewer
and batch capture can be exercised without patient data.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging
import numpy as np

from core.volume import SeriesVolume


@dataclass
class Ellipsoid:
    """Ellipsoid in normalized coordinates ([-1, 1] on every axis)."""
    center: Tuple[float, float, float]  # (z, y, x)
    radii: Tuple[float, float, float]  # (z, y, x)
    value_hu: float  # Added to whatever lies underneath


def _default_ellipsoids() -> List[Ellipsoid]:
    return [
        Ellipsoid((0.0, 0.0, 0.0), (0.90, 0.80, 0.65), 2000.0),    # Skull
        Ellipsoid((0.0, 0.0, 0.0), (0.84, 0.74, 0.59), -960.0),    # Brain
        Ellipsoid((0.1, -0.2, 0.2), (0.25, 0.15, 0.12), 30.0),     # Lesion
        Ellipsoid((-0.2, 0.1, -0.2), (0.20, 0.20, 0.10), -25.0),   # Ventricle
        Ellipsoid((0.5, 0.3, 0.0), (0.08, 0.08, 0.08), 900.0),     # Calcification
    ]


@dataclass
class PhantomConfig:
    """Configuration for phantom generation."""
    shape: Tuple[int, int, int] = (64, 128, 128)  # (Z, Y, X) voxels
    spacing: Tuple[float, float, float] = (2.5, 1.0, 1.0)  # mm
    background_hu: float = -1000.0
    noise_std_hu: float = 0.0
    seed: Optional[int] = None
    ellipsoids: List[Ellipsoid] = field(default_factory=_default_ellipsoids)


def generate_phantom(
    series_id: str = "phantom",
    config: Optional[PhantomConfig] = None
) -> SeriesVolume:
    """
    Generate a phantom series.

    Args:
        series_id: Identifier for the resulting volume
        config: Phantom configuration (defaults to PhantomConfig())

    Returns:
        SeriesVolume in Hounsfield Units
    """
    config = config or PhantomConfig()
    nz, ny, nx = config.shape
    if min(config.shape) <= 0:
        raise ValueError(f"Phantom shape must be positive, got {config.shape}")

    logging.info(f"Generating phantom '{series_id}': shape={config.shape}, "
                 f"spacing={config.spacing}")

    z = np.linspace(-1.0, 1.0, nz, dtype=np.float32)
    y = np.linspace(-1.0, 1.0, ny, dtype=np.float32)
    x = np.linspace(-1.0, 1.0, nx, dtype=np.float32)
    Z, Y, X = np.meshgrid(z, y, x, indexing='ij')

    data = np.full(config.shape, config.background_hu, dtype=np.float32)
    for e in config.ellipsoids:
        cz, cy, cx = e.center
        rz, ry, rx = e.radii
        inside = (((Z - cz) / rz) ** 2 + ((Y - cy) / ry) ** 2 + ((X - cx) / rx) ** 2) <= 1.0
        data[inside] += e.value_hu

    if config.noise_std_hu > 0:
        rng = np.random.default_rng(config.seed)
        data += rng.normal(0.0, config.noise_std_hu, size=data.shape).astype(np.float32)

    return SeriesVolume(
        series_id=series_id,
        data=data,
        spacing=config.spacing,
        description="Synthetic phantom",
    )
