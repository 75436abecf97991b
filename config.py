"""
CT Batch Capture Configuration

Contains constants and default settings for the capture pipeline and viewer.
"""

from dataclasses import dataclass, field
from typing import Tuple


# Window presets for CT viewing (HU)
# Reference: https://radiopaedia.org/articles/windowing-ct
WINDOW_PRESETS: dict[str, dict[str, float]] = {
    "Bone": {"center": 500, "width": 2000},
    "Soft Tissue": {"center": 40, "width": 400},
    "Lung": {"center": -600, "width": 1500},
    "Brain": {"center": 40, "width": 80},
    "Liver": {"center": 60, "width": 160},
}


@dataclass
class CaptureConfig:
    """Configuration for offscreen batch capture."""
    frame_timeout_s: float = 1.0  # Deadline per captured frame
    output_size: Tuple[int, int] = (512, 512)  # (width, height) in pixels
    default_sampling_count: int = 8
    default_center_bias_exponent: float = 2.0


@dataclass
class ViewerConfig:
    """Configuration for the slice/MPR viewer."""
    default_window_center: float = 40.0
    default_window_width: float = 400.0
    background_color: str = "#000000"

    window_presets: dict = field(default_factory=lambda: dict(WINDOW_PRESETS))


@dataclass
class GUIConfig:
    """Configuration for GUI appearance."""
    window_title: str = "CT Batch Capture"
    window_size: Tuple[int, int] = (1400, 900)
    min_size: Tuple[int, int] = (1000, 700)
    thumbnail_size: int = 128

    background_color: str = "#FFFFFF"
    text_color: str = "#333333"
    accent_color: str = "#2962FF"
    secondary_color: str = "#F5F5F5"
    border_color: str = "#E0E0E0"

    # Typography
    font_family: str = "Segoe UI"
    font_size: int = 10


# Default configurations
DEFAULT_CAPTURE = CaptureConfig()
DEFAULT_VIEWER = ViewerConfig()
DEFAULT_GUI = GUIConfig()
