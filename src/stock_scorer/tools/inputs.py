"""Resolve engine inputs from the provider, falling back to synthetic data."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from stock_scorer.data.synthetic import (
    synthetic_fundamentals,
    synthetic_news,
    synthetic_price_history,
)
from stock_scorer.data.yfinance_client import (
    ServerShuttingDownError,
    fetch_fundamentals,
    fetch_news,
    fetch_price_history,
)
from stock_scorer.models import FundamentalRatios, NewsArticle, PricePoint
from stock_scorer.utils.provenance import build_provenance
from stock_scorer.utils.validators import FetchParams

logger = logging.getLogger(__name__)

TIMEOUT_SECONDS = 15.0

T = TypeVar("T")


class InputUnavailableError(Exception):
    """Raised when an input cannot be fetched and synthetic data is not allowed."""

    def __init__(self, name: str, symbol: str, cause: Exception):
        super().__init__(f"Failed to fetch {name} for {symbol}: {cause}")
        self.name = name
        self.symbol = symbol
        self.cause = cause


@dataclass
class ResolvedInput(Generic[T]):
    """One engine input plus where it came from."""

    value: T
    provenance: dict[str, Any]
    warning: str | None = None


async def _resolve(
    name: str,
    symbol: str,
    fetch: Callable[[], Awaitable[tuple[T, dict[str, Any]]]],
    fallback: Callable[[], T],
    allow_synthetic: bool,
) -> ResolvedInput[T]:
    try:
        value, retry_info = await asyncio.wait_for(fetch(), timeout=TIMEOUT_SECONDS)
        return ResolvedInput(value=value, provenance=build_provenance(**retry_info))
    except ServerShuttingDownError:
        raise
    except Exception as e:
        error = TimeoutError(f"exceeded {TIMEOUT_SECONDS}s") if isinstance(e, TimeoutError) else e
        if not allow_synthetic:
            raise InputUnavailableError(name, symbol, error) from e
        logger.warning(f"{name}({symbol}): provider failed ({error}); using synthetic data")
        return ResolvedInput(
            value=fallback(),
            provenance=build_provenance(
                source="synthetic",
                synthetic=True,
                provider_error=f"{type(error).__name__}: {error}",
            ),
            warning=f"{name} unavailable from provider; synthetic data used",
        )


async def load_price_history(
    symbol: str,
    period: str = "6mo",
    allow_synthetic: bool = True,
) -> ResolvedInput[list[PricePoint]]:
    params = FetchParams(symbol=symbol, period=period)
    return await _resolve(
        "price_history",
        params.symbol,
        lambda: fetch_price_history(params),
        lambda: synthetic_price_history(params.symbol),
        allow_synthetic,
    )


async def load_fundamentals(
    symbol: str,
    allow_synthetic: bool = True,
) -> ResolvedInput[FundamentalRatios]:
    return await _resolve(
        "fundamentals",
        symbol,
        lambda: fetch_fundamentals(symbol),
        lambda: synthetic_fundamentals(symbol),
        allow_synthetic,
    )


async def load_news(
    symbol: str,
    days: int = 7,
    allow_synthetic: bool = True,
) -> ResolvedInput[list[NewsArticle]]:
    return await _resolve(
        "news",
        symbol,
        lambda: fetch_news(symbol, days=days),
        lambda: synthetic_news(symbol),
        allow_synthetic,
    )
