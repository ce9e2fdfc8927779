"""News sentiment tool."""

from time import perf_counter
from typing import Any

from stock_scorer.config import DEFAULT_CONFIG
from stock_scorer.engine.sentiment import (
    aggregate_sentiment,
    analyze_news,
    sentiment_reasons,
    sentiment_to_score,
)
from stock_scorer.tools.inputs import InputUnavailableError, load_news
from stock_scorer.utils.provenance import build_error_response, build_meta
from stock_scorer.utils.validators import normalize_symbol


async def news_sentiment(
    symbol: str,
    days: int = 7,
    allow_synthetic: bool = True,
) -> dict[str, Any]:
    """
    Score recent news for a symbol.

    Args:
        symbol: Stock ticker symbol
        days: Number of days to look back (default: 7)
        allow_synthetic: Substitute canned headlines if the provider fails

    Returns:
        Dict with per-article sentiment, the recency-weighted aggregate and
        its 0-100 score
    """
    start_time = perf_counter()

    try:
        normalized_symbol = normalize_symbol(symbol)
    except ValueError as e:
        return build_error_response(error_type="invalid_symbol", message=str(e), symbol=symbol)

    if days < 1:
        return build_error_response(
            error_type="invalid_request",
            message=f"days must be at least 1, got {days}",
            symbol=normalized_symbol,
        )

    try:
        news = await load_news(normalized_symbol, days=days, allow_synthetic=allow_synthetic)
    except InputUnavailableError as e:
        return build_error_response(
            error_type="data_unavailable", message=str(e), symbol=normalized_symbol
        )

    lexicon = DEFAULT_CONFIG.lexicon
    settings = DEFAULT_CONFIG.sentiment

    articles = analyze_news(news.value, lexicon, settings)
    overall = aggregate_sentiment(articles, settings)

    counts = {"positive": 0, "negative": 0, "neutral": 0}
    for article in articles:
        counts[article.sentiment or "neutral"] += 1

    warnings: list[str] = []
    if not articles:
        warnings.append(f"No news articles found in the past {days} days")
    if news.warning:
        warnings.append(news.warning)

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("news_sentiment", duration_ms),
        "data_provenance": {"news": news.provenance},
        "symbol": normalized_symbol,
        "period_days": days,
        "article_count": len(articles),
        "articles": [a.to_dict() for a in articles],
        "sentiment": {
            **overall.to_dict(),
            "counts": counts,
            "method": "lexicon_recency_weighted",
        },
        "sentiment_score": sentiment_to_score(overall),
        "reasons": sentiment_reasons(overall, len(articles), settings),
        "warnings": warnings if warnings else None,
    }
