"""Manual adjustment state helpers.

The adjustment itself is owned by the caller; these functions only
sanitise untrusted input and describe the current state.
"""

import math
from numbers import Real
from typing import Any, Mapping, Optional

from ..models.geometry import ManualAdjustment

MANUAL_DEFAULTS = ManualAdjustment()

OFFSET_LIMIT = 250.0
SCALE_RANGE = (0.8, 1.2)
ROTATION_LIMIT = 20.0
OPACITY_RANGE = (0.0, 100.0)
DEFAULT_OPACITY = 50.0


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def clamp(value: Any, minimum: float, maximum: float) -> float:
    """Clamp value into [minimum, maximum].

    Non-finite or non-numeric values fall back to minimum when it is finite,
    otherwise to maximum.
    """
    if not _is_finite_number(value):
        return minimum if _is_finite_number(minimum) else maximum
    return max(minimum, min(maximum, value))


def sanitize_manual_adjustment(data: Optional[Mapping[str, Any]]) -> ManualAdjustment:
    """Build a ManualAdjustment from raw input, clamped to the slider limits.

    Fields that are missing or not numbers keep their default.
    """
    if not data:
        return MANUAL_DEFAULTS

    def field(key: str, default: float, low: float, high: float) -> float:
        value = data.get(key)
        if not isinstance(value, Real) or isinstance(value, bool):
            return default
        return clamp(value, low, high)

    return ManualAdjustment(
        offset_x=field('offsetX', MANUAL_DEFAULTS.offset_x, -OFFSET_LIMIT, OFFSET_LIMIT),
        offset_y=field('offsetY', MANUAL_DEFAULTS.offset_y, -OFFSET_LIMIT, OFFSET_LIMIT),
        scale=field('scale', MANUAL_DEFAULTS.scale, *SCALE_RANGE),
        rotation=field('rotation', MANUAL_DEFAULTS.rotation, -ROTATION_LIMIT, ROTATION_LIMIT),
    )


def manual_is_neutral(manual: ManualAdjustment) -> bool:
    return (
        abs(manual.offset_x) < 0.5
        and abs(manual.offset_y) < 0.5
        and abs(manual.scale - 1) < 0.002
        and abs(manual.rotation) < 0.1
    )


def opacity_fraction(percent: Any) -> float:
    """Overlay opacity in [0, 1] from a percentage; None means the default."""
    if percent is None:
        percent = DEFAULT_OPACITY
    return clamp(percent, *OPACITY_RANGE) / 100
