"""Async yfinance client with bounded concurrency and retry logic."""

import asyncio
import logging
import os
import random
import re
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

import yfinance as yf
from requests.exceptions import HTTPError

from stock_scorer.models import FundamentalRatios, NewsArticle, PricePoint
from stock_scorer.utils.numeric import safe_float
from stock_scorer.utils.ohlcv import frame_to_price_points, standardize_ohlcv
from stock_scorer.utils.validators import FetchParams, normalize_symbol

logger = logging.getLogger(__name__)

# Bounded concurrency for provider calls
_max_workers = int(os.environ.get("PROVIDER_MAX_WORKERS", "4"))
_executor = ThreadPoolExecutor(max_workers=_max_workers)
_fetch_semaphore = asyncio.Semaphore(_max_workers)

# Retry configuration
_max_retries = int(os.environ.get("PROVIDER_MAX_RETRIES", "3"))
_base_delay = float(os.environ.get("PROVIDER_BASE_DELAY", "1.0"))  # seconds
_max_delay = float(os.environ.get("PROVIDER_MAX_DELAY", "30.0"))  # seconds

# Shutdown coordination
shutdown_event = asyncio.Event()

T = TypeVar("T")

# yfinance info key -> FundamentalRatios field, with a scale applied to the raw value
INFO_RATIO_KEYS: dict[str, tuple[tuple[str, ...], float]] = {
    "pe_ratio": (("trailingPE",), 1.0),
    "peg_ratio": (("pegRatio", "trailingPegRatio"), 1.0),
    "price_to_book": (("priceToBook",), 1.0),
    # yfinance reports debt/equity in percent (150.0 == 1.5x)
    "debt_to_equity": (("debtToEquity",), 0.01),
    "return_on_equity": (("returnOnEquity",), 1.0),
    "return_on_assets": (("returnOnAssets",), 1.0),
    "profit_margin": (("profitMargins",), 1.0),
    "operating_margin": (("operatingMargins",), 1.0),
    "revenue_growth": (("revenueGrowth",), 1.0),
    "earnings_growth": (("earningsGrowth", "earningsQuarterlyGrowth"), 1.0),
    "current_ratio": (("currentRatio",), 1.0),
    "quick_ratio": (("quickRatio",), 1.0),
}


class ServerShuttingDownError(Exception):
    """Raised when server is shutting down."""

    pass


class ProviderRetryError(Exception):
    """Raised when a provider call fails after all retries."""

    def __init__(self, message: str, last_error: Exception | None = None):
        super().__init__(message)
        self.last_error = last_error


@dataclass
class RetryResult:
    """Result of a retry operation with provenance tracking."""

    result: Any
    attempts: int
    total_backoff_seconds: float
    source: str = "yfinance"

    def to_provenance(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "attempts": self.attempts,
            "total_backoff_seconds": self.total_backoff_seconds,
        }


def _is_retryable_error(error: Exception) -> bool:
    """Check if an error is transient (rate limit, 5xx, connection trouble)."""
    if (
        isinstance(error, HTTPError)
        and hasattr(error, "response")
        and error.response is not None
    ):
        status_code = error.response.status_code
        if status_code == 429 or 500 <= status_code < 600:
            return True

    error_str = str(error).lower()
    retryable_patterns = [
        "rate limit",
        "too many requests",
        "connection",
        "timeout",
        "temporary",
    ]
    return any(pattern in error_str for pattern in retryable_patterns)


def _calculate_backoff(attempt: int) -> float:
    """Calculate delay with exponential backoff and jitter."""
    delay = _base_delay * (2**attempt)
    # +/-25% jitter
    jitter = delay * 0.25 * (2 * random.random() - 1)
    return min(delay + jitter, _max_delay)


async def _retry_with_backoff(
    operation_name: str,
    sync_func: Callable[[], T],
    max_retries: int = _max_retries,
) -> RetryResult:
    """
    Execute a blocking provider call in the executor with retry logic.

    Args:
        operation_name: Name for logging (e.g., "fetch_history(AAPL)")
        sync_func: Synchronous function to execute
        max_retries: Maximum number of retry attempts

    Returns:
        RetryResult with result and attempt info

    Raises:
        ProviderRetryError: If all retries exhausted
        ServerShuttingDownError: If server is shutting down
    """
    total_backoff = 0.0

    for attempt in range(max_retries + 1):
        if shutdown_event.is_set():
            raise ServerShuttingDownError("Server is shutting down")

        try:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(_executor, sync_func)
            return RetryResult(
                result=result,
                attempts=attempt + 1,
                total_backoff_seconds=round(total_backoff, 2),
            )
        except Exception as e:
            if not _is_retryable_error(e):
                raise

            if attempt >= max_retries:
                logger.warning(
                    f"{operation_name}: Failed after {attempt + 1} attempts. Last error: {e}"
                )
                raise ProviderRetryError(
                    f"Failed after {attempt + 1} attempts: {e}",
                    last_error=e,
                ) from e

            delay = _calculate_backoff(attempt)
            total_backoff += delay
            logger.info(
                f"{operation_name}: Attempt {attempt + 1} failed ({e}). "
                f"Retrying in {delay:.1f}s..."
            )
            await asyncio.sleep(delay)

    raise ProviderRetryError(f"Failed after {max_retries + 1} attempts")


# ============================================================================
# PAYLOAD MAPPING
# ============================================================================


def ratios_from_info(symbol: str, info: dict[str, Any]) -> FundamentalRatios:
    """
    Map a yfinance info dict to FundamentalRatios.

    Missing, NaN or unparsable values become 0.0, which the scorer treats as
    unknown.
    """
    values: dict[str, float] = {}
    for field, (keys, scale) in INFO_RATIO_KEYS.items():
        raw = 0.0
        for key in keys:
            raw = safe_float(info.get(key))
            if raw != 0.0:
                break
        values[field] = raw * scale
    name = _clean_text(info.get("shortName") or info.get("longName"), max_length=100)
    return FundamentalRatios(symbol=symbol, name=name, **values)


def _clean_text(text: Any, max_length: int) -> str:
    """Strip control characters and truncate untrusted provider text."""
    if not text:
        return ""
    cleaned = re.sub(r"[\x00-\x1f\x7f-\x9f]", " ", str(text)).strip()
    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length] + "..."
    return cleaned


def _parse_published(item: dict[str, Any]) -> datetime | None:
    content = item.get("content") or {}
    pub_date = content.get("pubDate") or content.get("displayTime")
    if pub_date:
        try:
            published = datetime.fromisoformat(str(pub_date).replace("Z", "+00:00"))
        except ValueError:
            return None
        if published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
        return published

    # Older yfinance payloads carry an epoch timestamp at the top level
    epoch = item.get("providerPublishTime")
    if epoch is not None:
        try:
            return datetime.fromtimestamp(int(epoch), tz=timezone.utc)
        except (ValueError, TypeError, OverflowError):
            return None
    return None


def articles_from_news(
    news_items: list[dict[str, Any]] | None,
    days: int | None = None,
    now: datetime | None = None,
) -> list[NewsArticle]:
    """
    Map yfinance news items to NewsArticle records, newest first.

    Items without a parsable publish time are skipped. When `days` is given,
    items older than that are dropped.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days) if days is not None else None

    articles: list[NewsArticle] = []
    for item in news_items or []:
        published = _parse_published(item)
        if published is None:
            continue
        if cutoff is not None and published < cutoff:
            continue

        content = item.get("content") or item
        provider = content.get("provider") or {}
        canonical = content.get("canonicalUrl") or {}
        source = provider.get("displayName") or content.get("publisher")

        articles.append(
            NewsArticle(
                title=_clean_text(content.get("title"), 200),
                description=_clean_text(content.get("summary"), 500),
                published_at=published,
                source=_clean_text(source, 50) or "Unknown",
                url=canonical.get("url") or content.get("link"),
            )
        )

    articles.sort(key=lambda a: a.published_at, reverse=True)
    return articles


# ============================================================================
# FETCHERS
# ============================================================================


async def fetch_price_history(params: FetchParams) -> tuple[list[PricePoint], dict[str, Any]]:
    """
    Fetch price history with bounded concurrency and retry logic.

    Args:
        params: Fetch parameters

    Returns:
        Tuple of (PricePoint records oldest first, provenance dict)

    Raises:
        ServerShuttingDownError: If server is shutting down
        ProviderRetryError: If all retries exhausted for retryable errors
        ValueError: If no data returned for the symbol
    """
    def _fetch() -> list[PricePoint]:
        df = yf.download(**params.to_yf_kwargs())
        if df is None or df.empty:
            raise ValueError(f"No price data returned for {params.symbol}")
        return frame_to_price_points(standardize_ohlcv(df))

    async with _fetch_semaphore:
        retry_result = await _retry_with_backoff(f"fetch_history({params.symbol})", _fetch)
    return retry_result.result, retry_result.to_provenance()


async def fetch_fundamentals(symbol: str) -> tuple[FundamentalRatios, dict[str, Any]]:
    """
    Fetch fundamental ratios from the ticker info payload.

    Raises:
        ServerShuttingDownError: If server is shutting down
        ProviderRetryError: If all retries exhausted for retryable errors
        ValueError: If the symbol is invalid or info is empty
    """
    normalized_symbol = normalize_symbol(symbol)

    def _fetch() -> FundamentalRatios:
        info = yf.Ticker(normalized_symbol).info
        if not info:
            raise ValueError(f"No fundamentals returned for {normalized_symbol}")
        return ratios_from_info(normalized_symbol, info)

    async with _fetch_semaphore:
        retry_result = await _retry_with_backoff(f"fetch_info({normalized_symbol})", _fetch)
    return retry_result.result, retry_result.to_provenance()


async def fetch_news(
    symbol: str,
    days: int = 7,
) -> tuple[list[NewsArticle], dict[str, Any]]:
    """
    Fetch recent news articles. An empty list is a valid result.

    Raises:
        ServerShuttingDownError: If server is shutting down
        ProviderRetryError: If all retries exhausted for retryable errors
    """
    normalized_symbol = normalize_symbol(symbol)

    def _fetch() -> list[NewsArticle]:
        return articles_from_news(yf.Ticker(normalized_symbol).news, days=days)

    async with _fetch_semaphore:
        retry_result = await _retry_with_backoff(f"fetch_news({normalized_symbol})", _fetch)
    return retry_result.result, retry_result.to_provenance()


async def shutdown_executor() -> None:
    """Cleanup on server shutdown."""
    shutdown_event.set()
    _executor.shutdown(wait=False, cancel_futures=True)
