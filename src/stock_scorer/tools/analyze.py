"""Analyze stock aggregator tool."""

import asyncio
from datetime import datetime
from time import perf_counter
from typing import Any

from stock_scorer.config import DEFAULT_CONFIG, AnalysisConfig
from stock_scorer.engine.scoring import analyze_stock, recommendation_strength
from stock_scorer.tools.inputs import (
    InputUnavailableError,
    load_fundamentals,
    load_news,
    load_price_history,
)
from stock_scorer.utils.ohlcv import quote_from_history
from stock_scorer.utils.provenance import build_error_response, build_meta
from stock_scorer.utils.validators import normalize_symbol


async def analyze(
    symbol: str,
    period: str = "6mo",
    news_days: int = 7,
    allow_synthetic: bool = True,
    config: AnalysisConfig = DEFAULT_CONFIG,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Fetch price history, fundamentals and news in parallel, then score them.

    Args:
        symbol: Stock ticker symbol
        period: Price history period (default: 6mo)
        news_days: News lookback in days (default: 7)
        allow_synthetic: Substitute synthetic data for inputs the provider
            cannot deliver (default: true)
        config: Engine configuration
        now: Reference time for news recency (default: current UTC time)

    Returns:
        Dict with the latest quote, the analysis result, recommendation
        strength, input summary, provenance per input and warnings
    """
    start_time = perf_counter()

    try:
        normalized_symbol = normalize_symbol(symbol)
    except ValueError as e:
        return build_error_response(error_type="invalid_symbol", message=str(e), symbol=symbol)

    try:
        history, fundamentals, news = await asyncio.gather(
            load_price_history(normalized_symbol, period=period, allow_synthetic=allow_synthetic),
            load_fundamentals(normalized_symbol, allow_synthetic=allow_synthetic),
            load_news(normalized_symbol, days=news_days, allow_synthetic=allow_synthetic),
        )
    except InputUnavailableError as e:
        return build_error_response(
            error_type="data_unavailable",
            message=str(e),
            symbol=normalized_symbol,
        )
    except ValueError as e:
        return build_error_response(
            error_type="invalid_request",
            message=str(e),
            symbol=normalized_symbol,
        )

    result = analyze_stock(
        normalized_symbol,
        fundamentals.value,
        history.value,
        news.value,
        config=config,
        now=now,
    )

    warnings = [r.warning for r in (history, fundamentals, news) if r.warning]
    if len(history.value) <= config.decision.min_history:
        warnings.append(
            f"Only {len(history.value)} sessions of price history; technical score is neutral"
        )
    if not news.value:
        warnings.append(f"No news articles found in the past {news_days} days")

    prices = history.value
    quote = quote_from_history(normalized_symbol, prices, name=fundamentals.value.name)
    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("analyze", duration_ms),
        "data_provenance": {
            "price": history.provenance,
            "fundamentals": fundamentals.provenance,
            "news": news.provenance,
        },
        "symbol": normalized_symbol,
        "quote": quote.to_dict() if quote else None,
        "analysis": result.to_dict(),
        "recommendation_strength": recommendation_strength(
            result.overall_score, result.confidence
        ),
        "inputs": {
            "sessions": len(prices),
            "start_date": prices[0].date if prices else None,
            "end_date": prices[-1].date if prices else None,
            "last_close": round(prices[-1].close, 2) if prices else None,
            "article_count": len(news.value),
        },
        "warnings": warnings if warnings else None,
    }
