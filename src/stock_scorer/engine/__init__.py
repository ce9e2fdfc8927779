"""Analysis engine: indicators, sentiment, fundamentals and the aggregator."""

from stock_scorer.engine.fundamentals import score_fundamentals
from stock_scorer.engine.indicators import (
    InsufficientDataError,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_macd,
    calculate_rsi,
    calculate_sma,
    calculate_support_resistance,
    calculate_technical_indicators,
    calculate_volatility,
    determine_trend,
    technical_reasons,
    technical_to_score,
)
from stock_scorer.engine.scoring import (
    analyze_stock,
    calculate_confidence,
    overall_score,
    predict,
    recommendation_strength,
)
from stock_scorer.engine.sentiment import (
    aggregate_sentiment,
    analyze_article,
    analyze_news,
    analyze_sentiment,
    calculate_overall_sentiment,
    sentiment_reasons,
    sentiment_to_score,
)

__all__ = [
    "InsufficientDataError",
    "aggregate_sentiment",
    "analyze_article",
    "analyze_news",
    "analyze_sentiment",
    "analyze_stock",
    "calculate_bollinger_bands",
    "calculate_confidence",
    "calculate_ema",
    "calculate_macd",
    "calculate_overall_sentiment",
    "calculate_rsi",
    "calculate_sma",
    "calculate_support_resistance",
    "calculate_technical_indicators",
    "calculate_volatility",
    "determine_trend",
    "overall_score",
    "predict",
    "recommendation_strength",
    "score_fundamentals",
    "sentiment_reasons",
    "sentiment_to_score",
    "technical_reasons",
    "technical_to_score",
]
