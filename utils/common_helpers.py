import math
from typing import Any, Optional, Sequence


def round_half_up(x: float) -> int:
    """Round to nearest int, .5 always toward +inf (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(x + 0.5))


def safe_float(x: Any) -> Optional[float]:
    try:
        if x is None or isinstance(x, bool):
            return None
        f = float(x)
        if math.isnan(f) or math.isinf(f):
            return None
        return f
    except Exception:
        return None


def clamp_score(x: Any, default: int = 70, lo: int = 0, hi: int = 100) -> int:
    """
    Coerce anything score-like into an int in [lo, hi].
    Unparseable values (None, "", "n/a", NaN) become `default`.
    """
    f = safe_float(x)
    if f is None:
        f = float(default)
    return max(lo, min(hi, round_half_up(f)))


def mean(values: Sequence[float]) -> float:
    if not values:
        raise ZeroDivisionError("mean of empty sequence")
    return sum(values) / len(values)


def as_str_list(x: Any) -> list:
    """Generated replies sometimes send a string or null where a list belongs."""
    if not isinstance(x, list):
        return []
    return [str(item).strip() for item in x if item is not None and str(item).strip()]
