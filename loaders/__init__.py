"""
Loaders Package

Contains data sources for series volumes.
"""

from .dicom_loader import DICOMSeriesLoader, volume_from_datasets
from .phantom import Ellipsoid, PhantomConfig, generate_phantom

__all__ = [
    'DICOMSeriesLoader',
    'volume_from_datasets',
    'Ellipsoid',
    'PhantomConfig',
    'generate_phantom',
]
