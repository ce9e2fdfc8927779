"""Utility modules."""

from stock_scorer.utils.numeric import clamp, round_half_up, safe_float, to_score
from stock_scorer.utils.ohlcv import (
    frame_to_price_points,
    price_points_to_frame,
    quote_from_history,
    standardize_ohlcv,
)
from stock_scorer.utils.provenance import build_error_response, build_meta, build_provenance
from stock_scorer.utils.validators import FetchParams, check_rule, normalize_symbol

__all__ = [
    "clamp",
    "round_half_up",
    "safe_float",
    "to_score",
    "frame_to_price_points",
    "price_points_to_frame",
    "quote_from_history",
    "standardize_ohlcv",
    "build_error_response",
    "build_meta",
    "build_provenance",
    "FetchParams",
    "check_rule",
    "normalize_symbol",
]
