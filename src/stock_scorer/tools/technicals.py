"""Technical indicator tool."""

from time import perf_counter
from typing import Any

from stock_scorer.config import DEFAULT_CONFIG
from stock_scorer.engine.indicators import (
    InsufficientDataError,
    calculate_technical_indicators,
    technical_reasons,
    technical_to_score,
)
from stock_scorer.tools.inputs import InputUnavailableError, load_price_history
from stock_scorer.utils.provenance import build_error_response, build_meta
from stock_scorer.utils.validators import normalize_symbol


async def technicals(
    symbol: str,
    period: str = "6mo",
    allow_synthetic: bool = True,
) -> dict[str, Any]:
    """
    Calculate technical indicators and the technical score for a symbol.

    Args:
        symbol: Stock ticker symbol
        period: Price history period (default: 6mo)
        allow_synthetic: Substitute synthetic history if the provider fails

    Returns:
        Dict with indicators, score, reasons and provenance
    """
    start_time = perf_counter()

    try:
        normalized_symbol = normalize_symbol(symbol)
    except ValueError as e:
        return build_error_response(error_type="invalid_symbol", message=str(e), symbol=symbol)

    try:
        history = await load_price_history(
            normalized_symbol, period=period, allow_synthetic=allow_synthetic
        )
    except InputUnavailableError as e:
        return build_error_response(
            error_type="data_unavailable", message=str(e), symbol=normalized_symbol
        )
    except ValueError as e:
        return build_error_response(
            error_type="invalid_request", message=str(e), symbol=normalized_symbol
        )

    prices = history.value
    try:
        indicators = calculate_technical_indicators(prices)
    except InsufficientDataError as e:
        return build_error_response(
            error_type="insufficient_data", message=str(e), symbol=normalized_symbol
        )

    current_price = prices[-1].close
    weights = DEFAULT_CONFIG.technical

    warnings: list[str] = []
    if len(prices) <= DEFAULT_CONFIG.decision.min_history:
        warnings.append(
            f"Only {len(prices)} sessions; the analyze tool would use a neutral technical score"
        )
    if history.warning:
        warnings.append(history.warning)

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("technicals", duration_ms),
        "data_provenance": {"price": history.provenance},
        "symbol": normalized_symbol,
        "current_price": round(current_price, 2),
        "sessions": len(prices),
        "indicators": indicators.to_dict(),
        "technical_score": technical_to_score(indicators, current_price, weights),
        "reasons": technical_reasons(indicators, current_price, weights),
        "warnings": warnings if warnings else None,
    }
