"""Tests for synthetic fallback data."""

from datetime import date, datetime, timedelta, timezone

from stock_scorer.data.synthetic import (
    BASE_PRICES,
    synthetic_fundamentals,
    synthetic_news,
    synthetic_price_history,
)


class TestSyntheticPriceHistory:
    """Tests for synthetic_price_history."""

    def test_length_and_order(self) -> None:
        history = synthetic_price_history("AAPL", sessions=100, end=date(2024, 6, 3))

        assert len(history) == 100
        assert history[-1].date == "2024-06-03"
        assert [p.date for p in history] == sorted(p.date for p in history)

    def test_deterministic_per_symbol(self) -> None:
        end = date(2024, 6, 3)
        assert synthetic_price_history("MSFT", end=end) == synthetic_price_history("msft", end=end)
        assert synthetic_price_history("MSFT", end=end) != synthetic_price_history("TSLA", end=end)

    def test_prices_near_base(self) -> None:
        history = synthetic_price_history("NVDA", end=date(2024, 6, 3))
        base = BASE_PRICES["NVDA"]

        for point in history:
            assert 0.8 * base <= point.close <= 1.2 * base
            assert point.low < point.close < point.high
            assert point.volume > 0

    def test_unknown_symbol_uses_default_base(self) -> None:
        history = synthetic_price_history("ZZZZ", sessions=10, end=date(2024, 6, 3))
        assert all(35.0 <= p.close <= 65.0 for p in history)

    def test_no_sessions(self) -> None:
        assert synthetic_price_history("AAPL", sessions=0) == []


class TestSyntheticFundamentals:
    """Tests for synthetic_fundamentals."""

    def test_known_symbol(self) -> None:
        ratios = synthetic_fundamentals("googl")

        assert ratios.symbol == "GOOGL"
        assert ratios.pe_ratio == 22.3
        assert ratios.current_ratio == 2.8

    def test_generated_ranges(self) -> None:
        ratios = synthetic_fundamentals("ZZZZ")

        assert 15 <= ratios.pe_ratio <= 35
        assert 0 <= ratios.debt_to_equity <= 1.5
        assert -0.03 <= ratios.revenue_growth <= 0.27

    def test_deterministic(self) -> None:
        assert synthetic_fundamentals("ZZZZ") == synthetic_fundamentals("zzzz")


class TestSyntheticNews:
    """Tests for synthetic_news."""

    def test_three_recent_articles(self) -> None:
        now = datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)
        articles = synthetic_news("tsla", now=now)

        assert len(articles) == 3
        assert [now - a.published_at for a in articles] == [
            timedelta(hours=2),
            timedelta(hours=4),
            timedelta(hours=6),
        ]
        assert all("TSLA" in a.title for a in articles)
        assert all(a.sentiment is None for a in articles)
