# dietplan/interpreter/numbers.py
import math
import re
from typing import Optional, Union

# Leading decimal literal, the same prefix a lenient float parser accepts ("150g" -> 150)
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def round_half_away(value: Union[int, float]) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def coerce_number(text: Optional[str]) -> int:
    """
    Turn scraped text into an integer. Empty, missing or non-numeric text gives 0.
    Negative values are passed through; callers that need non-negative values clamp.
    """
    if text is None:
        return 0
    match = _NUMBER_PREFIX.match(str(text).strip())
    if not match:
        return 0
    try:
        value = float(match.group(0))
    except (ValueError, OverflowError):
        return 0
    if not math.isfinite(value):
        return 0
    return round_half_away(value)
