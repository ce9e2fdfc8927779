"""Data layer: provider fetches and offline fallbacks."""

from stock_scorer.data.synthetic import (
    synthetic_fundamentals,
    synthetic_news,
    synthetic_price_history,
)
from stock_scorer.data.yfinance_client import (
    ProviderRetryError,
    RetryResult,
    ServerShuttingDownError,
    articles_from_news,
    fetch_fundamentals,
    fetch_news,
    fetch_price_history,
    ratios_from_info,
    shutdown_executor,
)

__all__ = [
    # Synthetic fallbacks
    "synthetic_fundamentals",
    "synthetic_news",
    "synthetic_price_history",
    # yfinance
    "ProviderRetryError",
    "RetryResult",
    "ServerShuttingDownError",
    "articles_from_news",
    "fetch_fundamentals",
    "fetch_news",
    "fetch_price_history",
    "ratios_from_info",
    "shutdown_executor",
]
