"""
Offline stand-ins for provider data.

Used by the tool layer when a provider is unreachable. Output is seeded from
the symbol so repeated calls for the same symbol on the same day agree.
"""

import zlib
from datetime import date, datetime, timedelta, timezone

import numpy as np
import pandas as pd

from stock_scorer.models import FundamentalRatios, NewsArticle, PricePoint

BASE_PRICES = {
    "AAPL": 150.25,
    "GOOGL": 102.75,
    "MSFT": 285.50,
    "TSLA": 195.80,
    "AMZN": 125.30,
    "NVDA": 425.60,
    "META": 295.40,
    "NFLX": 380.90,
}

KNOWN_FUNDAMENTALS: dict[str, dict[str, float]] = {
    "AAPL": {
        "pe_ratio": 28.5,
        "peg_ratio": 1.2,
        "price_to_book": 8.9,
        "debt_to_equity": 0.6,
        "return_on_equity": 0.45,
        "return_on_assets": 0.18,
        "profit_margin": 0.25,
        "operating_margin": 0.28,
        "revenue_growth": 0.08,
        "earnings_growth": 0.12,
        "current_ratio": 1.1,
        "quick_ratio": 0.95,
    },
    "GOOGL": {
        "pe_ratio": 22.3,
        "peg_ratio": 1.1,
        "price_to_book": 4.2,
        "debt_to_equity": 0.2,
        "return_on_equity": 0.28,
        "return_on_assets": 0.15,
        "profit_margin": 0.22,
        "operating_margin": 0.25,
        "revenue_growth": 0.13,
        "earnings_growth": 0.18,
        "current_ratio": 2.8,
        "quick_ratio": 2.8,
    },
}


def _rng(symbol: str, salt: str) -> np.random.Generator:
    seed = zlib.crc32(f"{symbol.upper()}:{salt}".encode("utf-8"))
    return np.random.default_rng(seed)


def synthetic_price_history(
    symbol: str,
    sessions: int = 100,
    end: date | None = None,
) -> list[PricePoint]:
    """
    Generate a plausible daily series: a slow sine wave with up to +/-5% noise.

    Args:
        symbol: Ticker symbol (seeds the generator and picks the base price)
        sessions: Number of business-day sessions
        end: Last session date (default: today)

    Returns:
        PricePoint records, oldest first
    """
    if sessions <= 0:
        return []

    rng = _rng(symbol, "history")
    base_price = BASE_PRICES.get(symbol.upper(), 50.0)
    dates = pd.bdate_range(end=end or date.today(), periods=sessions)

    # Wave index counts down so the newest session sits at phase 0
    steps = np.arange(sessions - 1, -1, -1)
    noise = (rng.random(sessions) - 0.5) * 0.1
    closes = base_price * (1 + np.sin(steps / 10) * 0.1 + noise)
    volumes = rng.integers(1_000_000, 11_000_000, size=sessions)

    return [
        PricePoint(
            date=day.strftime("%Y-%m-%d"),
            open=float(close * 0.995),
            high=float(close * 1.02),
            low=float(close * 0.98),
            close=float(close),
            volume=float(volume),
        )
        for day, close, volume in zip(dates, closes, volumes)
    ]


def synthetic_fundamentals(symbol: str) -> FundamentalRatios:
    """Known ratios for a few large caps, seeded random ranges otherwise."""
    normalized = symbol.upper().strip()
    if normalized in KNOWN_FUNDAMENTALS:
        return FundamentalRatios(symbol=normalized, **KNOWN_FUNDAMENTALS[normalized])

    u = _rng(normalized, "fundamentals").random(12)
    return FundamentalRatios(
        symbol=normalized,
        pe_ratio=15 + u[0] * 20,
        peg_ratio=0.8 + u[1] * 1.5,
        price_to_book=1 + u[2] * 8,
        debt_to_equity=u[3] * 1.5,
        return_on_equity=u[4] * 0.4,
        return_on_assets=u[5] * 0.2,
        profit_margin=u[6] * 0.3,
        operating_margin=u[7] * 0.35,
        revenue_growth=(u[8] - 0.1) * 0.3,
        earnings_growth=(u[9] - 0.1) * 0.4,
        current_ratio=0.5 + u[10] * 3,
        quick_ratio=0.3 + u[11] * 2.5,
    )


def synthetic_news(symbol: str, now: datetime | None = None) -> list[NewsArticle]:
    """Three canned headlines published two, four and six hours ago."""
    normalized = symbol.upper().strip()
    if now is None:
        now = datetime.now(timezone.utc)
    slug = normalized.lower()

    return [
        NewsArticle(
            title=f"{normalized} Reports Strong Quarterly Earnings",
            description=(
                f"{normalized} announced better than expected quarterly results, "
                "showing strong revenue growth and improved profit margins."
            ),
            published_at=now - timedelta(hours=2),
            source="Financial Times",
            url=f"https://example.com/news/{slug}-earnings",
        ),
        NewsArticle(
            title=f"Analysts Upgrade {normalized} Price Target",
            description=(
                f"Several Wall Street analysts have raised their price targets for "
                f"{normalized} following recent positive developments."
            ),
            published_at=now - timedelta(hours=4),
            source="Reuters",
            url=f"https://example.com/news/{slug}-upgrade",
        ),
        NewsArticle(
            title=f"{normalized} Faces Market Volatility Amid Economic Concerns",
            description=(
                f"{normalized} shares experienced volatility as investors weigh "
                "economic uncertainties and sector-specific challenges."
            ),
            published_at=now - timedelta(hours=6),
            source="Bloomberg",
            url=f"https://example.com/news/{slug}-volatility",
        ),
    ]
