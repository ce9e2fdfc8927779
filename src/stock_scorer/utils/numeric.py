"""Numeric helpers shared by the engine and the data layer."""

import math
from typing import Any

import pandas as pd


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3), unlike the built-in round()."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def to_score(value: float) -> int:
    """Clamp to [0, 100] and round to an integer score."""
    return int(round_half_up(clamp(value, 0, 100)))


def safe_float(value: Any, default: float = 0.0) -> float:
    """Convert to float, mapping None, NaN and unparsable values to default."""
    if value is None:
        return default
    try:
        result = float(value)
    except (ValueError, TypeError):
        return default
    if pd.isna(result) or math.isinf(result):
        return default
    return result
