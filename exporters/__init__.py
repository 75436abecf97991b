"""
Exporters Package

Contains exporters for captured images.
"""

from .image_exporter import ImageExporter

__all__ = ['ImageExporter']
