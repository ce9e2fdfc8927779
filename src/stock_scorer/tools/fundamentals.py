"""Fundamental score tool."""

from time import perf_counter
from typing import Any

from stock_scorer.config import DEFAULT_CONFIG
from stock_scorer.engine.fundamentals import rule_value, score_fundamentals
from stock_scorer.tools.inputs import InputUnavailableError, load_fundamentals
from stock_scorer.utils.provenance import build_error_response, build_meta
from stock_scorer.utils.validators import normalize_symbol


async def fundamentals_score(symbol: str, allow_synthetic: bool = True) -> dict[str, Any]:
    """
    Fetch fundamental ratios and score them.

    Args:
        symbol: Stock ticker symbol
        allow_synthetic: Substitute synthetic ratios if the provider fails

    Returns:
        Dict with ratios, score, reasons and which ratios were unknown
    """
    start_time = perf_counter()

    try:
        normalized_symbol = normalize_symbol(symbol)
    except ValueError as e:
        return build_error_response(error_type="invalid_symbol", message=str(e), symbol=symbol)

    try:
        fundamentals = await load_fundamentals(normalized_symbol, allow_synthetic=allow_synthetic)
    except InputUnavailableError as e:
        return build_error_response(
            error_type="data_unavailable", message=str(e), symbol=normalized_symbol
        )

    ratios = fundamentals.value
    rules = DEFAULT_CONFIG.fundamental_rules
    score, reasons = score_fundamentals(ratios, rules)
    unknown = [rule.label for rule in rules if rule_value(ratios, rule) is None]

    warnings: list[str] = []
    if len(unknown) == len(rules):
        warnings.append("No scored ratio is known; fundamental score is neutral")
    if fundamentals.warning:
        warnings.append(fundamentals.warning)

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("fundamentals_score", duration_ms),
        "data_provenance": {"fundamentals": fundamentals.provenance},
        "symbol": normalized_symbol,
        "ratios": ratios.to_dict(),
        "fundamental_score": score,
        "reasons": reasons,
        "unknown_ratios": unknown,
        "warnings": warnings if warnings else None,
    }
