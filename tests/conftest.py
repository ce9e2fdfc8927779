"""Pytest configuration and fixtures."""

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from stock_scorer.models import FundamentalRatios, NewsArticle, PricePoint


def make_history(closes: Sequence[float], start: str = "2024-01-01") -> list[PricePoint]:
    """PricePoints with high == low == close, one business day apart."""
    dates = pd.bdate_range(start, periods=len(closes))
    return [
        PricePoint(
            date=day.strftime("%Y-%m-%d"),
            open=float(close),
            high=float(close),
            low=float(close),
            close=float(close),
            volume=1_000_000.0,
        )
        for day, close in zip(dates, closes)
    ]


@pytest.fixture
def history_factory() -> Callable[..., list[PricePoint]]:
    """Build a price history from a list of closes."""
    return make_history


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for recency weighting."""
    return datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_ohlcv_df() -> pd.DataFrame:
    """Sample OHLCV DataFrame shaped like yf.download output."""
    return pd.DataFrame(
        {
            "Date": pd.date_range("2024-01-01", periods=10, freq="D"),
            "Open": [100.0, 101.0, 102.0, 101.5, 103.0, 104.0, 103.5, 105.0, 106.0, 105.5],
            "High": [101.0, 102.5, 103.0, 102.5, 104.5, 105.5, 105.0, 106.5, 107.0, 106.5],
            "Low": [99.5, 100.5, 101.0, 100.5, 102.0, 103.0, 102.5, 104.0, 105.0, 104.5],
            "Close": [100.5, 102.0, 101.5, 102.0, 104.0, 103.5, 104.5, 106.0, 105.5, 106.0],
            "Volume": [1000000] * 10,
        }
    ).set_index("Date")


@pytest.fixture
def sample_price_series() -> pd.Series:
    """Sample close series for indicator testing."""
    return pd.Series(
        [100.0, 101.0, 102.0, 101.5, 103.0, 104.0, 103.5, 105.0, 106.0, 105.5,
         107.0, 108.0, 107.5, 109.0, 110.0, 109.5, 111.0, 112.0, 111.5, 113.0,
         114.0, 113.5, 115.0, 116.0, 115.5, 117.0, 118.0, 117.5, 119.0, 120.0]
    )


@pytest.fixture
def rising_history() -> list[PricePoint]:
    """60 sessions of a steady climb from 100."""
    return make_history([100.0 + i for i in range(60)])


@pytest.fixture
def falling_history() -> list[PricePoint]:
    """60 sessions of a steady slide from 200."""
    return make_history([200.0 - i for i in range(60)])


@pytest.fixture
def value_ratios() -> FundamentalRatios:
    """Cheap, low-debt, high-ROE company with every other ratio unknown."""
    return FundamentalRatios(
        symbol="test",
        pe_ratio=12,
        debt_to_equity=0.2,
        return_on_equity=0.2,
    )


@pytest.fixture
def best_ratios() -> FundamentalRatios:
    """Every scored ratio in its best band."""
    return FundamentalRatios(
        symbol="BEST",
        pe_ratio=10,
        peg_ratio=0.5,
        price_to_book=0.8,
        debt_to_equity=0.1,
        return_on_equity=0.3,
        return_on_assets=0.2,
        profit_margin=0.3,
        operating_margin=0.35,
        revenue_growth=0.2,
        earnings_growth=0.3,
        current_ratio=2.0,
        quick_ratio=1.5,
    )


@pytest.fixture
def worst_ratios() -> FundamentalRatios:
    """Every scored ratio in its worst band."""
    return FundamentalRatios(
        symbol="WORST",
        pe_ratio=40,
        peg_ratio=3,
        price_to_book=5,
        debt_to_equity=2,
        return_on_equity=0.01,
        return_on_assets=0.01,
        profit_margin=0.01,
        operating_margin=0.01,
        revenue_growth=-0.2,
        earnings_growth=-0.3,
        current_ratio=0.5,
        quick_ratio=0.3,
    )


@pytest.fixture
def article_factory(now: datetime) -> Callable[..., NewsArticle]:
    """Build an article published `hours_ago` before the fixed reference time."""
    def _make(title: str, description: str = "", hours_ago: float = 0.0) -> NewsArticle:
        return NewsArticle(
            title=title,
            description=description,
            published_at=now - timedelta(hours=hours_ago),
            source="Test Wire",
        )

    return _make
