import math
from typing import Any, Optional


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def clamp_percent(value: float) -> int:
    """Round and clamp to an integer percentage in [0, 100]."""
    return max(0, min(100, round_half_up(value)))


def to_float(val: Any) -> Optional[float]:
    """Convert to a finite float, or None."""
    if val is None or isinstance(val, bool):
        return None
    try:
        out = float(val)
    except (ValueError, TypeError, OverflowError):
        return None
    return out if math.isfinite(out) else None
