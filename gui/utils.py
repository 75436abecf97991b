"""
GUI Utilities

Helpers for building the small form widgets shared by the panels.
"""

from typing import Union, Callable, Optional
from PySide6.QtWidgets import QSpinBox, QDoubleSpinBox, QWidget


def create_spinbox(
    value: Union[int, float],
    min_val: Union[int, float],
    max_val: Union[int, float],
    step: Union[int, float] = 1,
    decimals: int = 0,
    suffix: str = "",
    tooltip: str = "",
    callback: Optional[Callable] = None,
    parent: Optional[QWidget] = None
) -> Union[QSpinBox, QDoubleSpinBox]:
    """
    Create and configure a QSpinBox or QDoubleSpinBox.

    A float value or a non-zero decimals count selects QDoubleSpinBox;
    otherwise every bound is truncated to int for QSpinBox.

    Args:
        value: Initial value
        min_val: Minimum value
        max_val: Maximum value
        step: Step size
        decimals: Number of decimals (0 for integer QSpinBox)
        suffix: Suffix string (e.g. " mm")
        tooltip: Tooltip text
        callback: Function to call on valueChanged
        parent: Parent widget

    Returns:
        Configured spinbox
    """
    if isinstance(value, float) or decimals > 0:
        spin = QDoubleSpinBox(parent)
        spin.setDecimals(max(decimals, 1))
        spin.setRange(float(min_val), float(max_val))
        spin.setSingleStep(float(step))
        spin.setValue(float(value))
    else:
        spin = QSpinBox(parent)
        spin.setRange(int(min_val), int(max_val))
        spin.setSingleStep(max(1, int(step)))
        spin.setValue(int(value))

    if suffix:
        spin.setSuffix(suffix)
    if tooltip:
        spin.setToolTip(tooltip)
    if callback:
        spin.valueChanged.connect(callback)

    return spin
