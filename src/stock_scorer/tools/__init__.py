"""Stock scoring tools."""

from stock_scorer.tools.analyze import analyze
from stock_scorer.tools.fundamentals import fundamentals_score
from stock_scorer.tools.news import news_sentiment
from stock_scorer.tools.technicals import technicals

__all__ = [
    "analyze",
    "fundamentals_score",
    "news_sentiment",
    "technicals",
]
