"""Tests for the yfinance client: payload mapping and retry behavior."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest
from requests.exceptions import HTTPError

from stock_scorer.data import yfinance_client
from stock_scorer.data.yfinance_client import (
    ProviderRetryError,
    ServerShuttingDownError,
    _is_retryable_error,
    _retry_with_backoff,
    articles_from_news,
    fetch_fundamentals,
    fetch_news,
    fetch_price_history,
    ratios_from_info,
    shutdown_executor,
)
from stock_scorer.utils.validators import FetchParams

NOW = datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)


def _content_item(title: str, pub_date: str, **extra) -> dict:
    content = {
        "title": title,
        "summary": f"{title} summary",
        "pubDate": pub_date,
        "provider": {"displayName": "Reuters"},
        "canonicalUrl": {"url": f"https://news.example.com/{title.lower().replace(' ', '-')}"},
    }
    content.update(extra)
    return {"id": title, "content": content}


class TestRatiosFromInfo:
    """Tests for mapping the ticker info payload."""

    def test_maps_known_keys(self) -> None:
        info = {
            "trailingPE": 28.5,
            "priceToBook": 8.9,
            "returnOnEquity": 0.45,
            "profitMargins": 0.25,
            "revenueGrowth": 0.08,
            "currentRatio": 1.1,
        }
        ratios = ratios_from_info("aapl", info)

        assert ratios.symbol == "AAPL"
        assert ratios.pe_ratio == 28.5
        assert ratios.price_to_book == 8.9
        assert ratios.return_on_equity == 0.45
        assert ratios.current_ratio == 1.1

    def test_company_name(self) -> None:
        info = {"shortName": "Apple Inc.", "longName": "Apple Incorporated"}
        assert ratios_from_info("AAPL", info).name == "Apple Inc."
        assert ratios_from_info("AAPL", {"longName": "Apple\x00 Inc."}).name == "Apple  Inc."
        assert ratios_from_info("AAPL", {}).name == ""

    def test_debt_to_equity_from_percent(self) -> None:
        ratios = ratios_from_info("AAPL", {"debtToEquity": 150.0})
        assert ratios.debt_to_equity == pytest.approx(1.5)

    def test_fallback_keys(self) -> None:
        info = {"trailingPegRatio": 1.2, "earningsQuarterlyGrowth": 0.12}
        ratios = ratios_from_info("AAPL", info)

        assert ratios.peg_ratio == 1.2
        assert ratios.earnings_growth == 0.12

    def test_primary_key_wins(self) -> None:
        info = {"pegRatio": 0.9, "trailingPegRatio": 1.2}
        assert ratios_from_info("AAPL", info).peg_ratio == 0.9

    def test_missing_and_bad_values_are_unknown(self) -> None:
        info = {"trailingPE": None, "quickRatio": "NaN", "returnOnAssets": "Infinity"}
        ratios = ratios_from_info("AAPL", info)

        assert ratios.pe_ratio == 0.0
        assert ratios.quick_ratio == 0.0
        assert ratios.return_on_assets == 0.0
        assert ratios.operating_margin == 0.0


class TestArticlesFromNews:
    """Tests for mapping yfinance news items."""

    def test_content_payload(self) -> None:
        items = [_content_item("Apple beats estimates", "2024-06-03T10:00:00Z")]
        (article,) = articles_from_news(items, now=NOW)

        assert article.title == "Apple beats estimates"
        assert article.description == "Apple beats estimates summary"
        assert article.source == "Reuters"
        assert article.url == "https://news.example.com/apple-beats-estimates"
        assert article.published_at == datetime(2024, 6, 3, 10, 0, tzinfo=timezone.utc)
        assert article.sentiment is None

    def test_legacy_payload(self) -> None:
        published = datetime(2024, 6, 2, 12, 0, tzinfo=timezone.utc)
        items = [
            {
                "title": "Old style headline",
                "publisher": "Yahoo Finance",
                "link": "https://finance.example.com/old",
                "providerPublishTime": int(published.timestamp()),
            }
        ]
        (article,) = articles_from_news(items, now=NOW)

        assert article.source == "Yahoo Finance"
        assert article.url == "https://finance.example.com/old"
        assert article.description == ""
        assert article.published_at == published

    def test_newest_first(self) -> None:
        items = [
            _content_item("Older", "2024-06-01T09:00:00Z"),
            _content_item("Newer", "2024-06-03T09:00:00Z"),
        ]
        titles = [a.title for a in articles_from_news(items, now=NOW)]
        assert titles == ["Newer", "Older"]

    def test_lookback_window(self) -> None:
        items = [
            _content_item("Inside", "2024-06-02T13:00:00Z"),
            _content_item("Outside", "2024-05-30T09:00:00Z"),
        ]
        titles = [a.title for a in articles_from_news(items, days=1, now=NOW)]
        assert titles == ["Inside"]

    def test_skips_unparsable_dates(self) -> None:
        items = [
            _content_item("No date", ""),
            _content_item("Bad date", "yesterday"),
            _content_item("Good", "2024-06-03T09:00:00Z"),
        ]
        titles = [a.title for a in articles_from_news(items, now=NOW)]
        assert titles == ["Good"]

    def test_unknown_source(self) -> None:
        item = _content_item("Anonymous", "2024-06-03T09:00:00Z", provider=None)
        (article,) = articles_from_news([item], now=NOW)
        assert article.source == "Unknown"

    def test_cleans_control_characters(self) -> None:
        item = _content_item("Line\nbreak", "2024-06-03T09:00:00Z")
        (article,) = articles_from_news([item], now=NOW)
        assert article.title == "Line break"

    def test_no_news(self) -> None:
        assert articles_from_news(None, now=NOW) == []
        assert articles_from_news([], now=NOW) == []


class TestIsRetryableError:
    """Tests for transient error detection."""

    @pytest.mark.parametrize("status", [429, 500, 503])
    def test_retryable_status(self, status: int) -> None:
        error = HTTPError("server error", response=MagicMock(status_code=status))
        assert _is_retryable_error(error) is True

    def test_client_error_not_retryable(self) -> None:
        error = HTTPError("not found", response=MagicMock(status_code=404))
        assert _is_retryable_error(error) is False

    @pytest.mark.parametrize(
        "message", ["Rate limit exceeded", "Too Many Requests", "Connection reset", "Read timeout"]
    )
    def test_retryable_messages(self, message: str) -> None:
        assert _is_retryable_error(RuntimeError(message)) is True

    def test_other_errors_not_retryable(self) -> None:
        assert _is_retryable_error(ValueError("No price data returned for XYZ")) is False


class TestRetryWithBackoff:
    """Tests for _retry_with_backoff."""

    def test_success_first_try(self) -> None:
        result = asyncio.run(_retry_with_backoff("op", lambda: 42))

        assert result.result == 42
        assert result.attempts == 1
        assert result.to_provenance() == {
            "source": "yfinance",
            "attempts": 1,
            "total_backoff_seconds": 0.0,
        }

    def test_retries_transient_errors(self) -> None:
        calls = []

        def flaky() -> str:
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("connection reset by peer")
            return "ok"

        with patch.object(yfinance_client, "_calculate_backoff", return_value=0.0):
            result = asyncio.run(_retry_with_backoff("op", flaky, max_retries=3))

        assert result.result == "ok"
        assert result.attempts == 3

    def test_non_retryable_raises_immediately(self) -> None:
        calls = []

        def broken() -> None:
            calls.append(1)
            raise ValueError("bad symbol")

        with pytest.raises(ValueError, match="bad symbol"):
            asyncio.run(_retry_with_backoff("op", broken, max_retries=3))
        assert len(calls) == 1

    def test_exhausted_retries(self) -> None:
        calls = []

        def always_times_out() -> None:
            calls.append(1)
            raise TimeoutError("read timeout")

        with patch.object(yfinance_client, "_calculate_backoff", return_value=0.0):
            with pytest.raises(ProviderRetryError) as exc_info:
                asyncio.run(_retry_with_backoff("op", always_times_out, max_retries=2))

        assert len(calls) == 3
        assert isinstance(exc_info.value.last_error, TimeoutError)

    def test_shutdown_stops_work(self) -> None:
        with patch.object(yfinance_client.shutdown_event, "is_set", return_value=True):
            with pytest.raises(ServerShuttingDownError):
                asyncio.run(_retry_with_backoff("op", lambda: 42))


class TestShutdownExecutor:
    """Tests for shutdown_executor."""

    def test_sets_event_and_stops_executor(self) -> None:
        event = asyncio.Event()
        executor = MagicMock()
        with patch.object(yfinance_client, "shutdown_event", event), patch.object(
            yfinance_client, "_executor", executor
        ):
            asyncio.run(shutdown_executor())

            assert event.is_set()
            executor.shutdown.assert_called_once_with(wait=False, cancel_futures=True)
            with pytest.raises(ServerShuttingDownError):
                asyncio.run(_retry_with_backoff("op", lambda: 42))


class TestFetchers:
    """Tests for the async fetchers with yfinance patched out."""

    def test_fetch_price_history(self, sample_ohlcv_df: pd.DataFrame) -> None:
        with patch.object(yfinance_client.yf, "download", return_value=sample_ohlcv_df) as dl:
            points, provenance = asyncio.run(fetch_price_history(FetchParams(symbol="aapl")))

        assert len(points) == 10
        assert points[-1].close == 106.0
        assert provenance["source"] == "yfinance"
        assert provenance["attempts"] == 1
        assert dl.call_args.kwargs["tickers"] == "AAPL"

    def test_fetch_price_history_empty(self) -> None:
        with patch.object(yfinance_client.yf, "download", return_value=pd.DataFrame()):
            with pytest.raises(ValueError, match="No price data"):
                asyncio.run(fetch_price_history(FetchParams(symbol="AAPL")))

    def test_fetch_fundamentals(self) -> None:
        ticker = MagicMock()
        ticker.info = {"trailingPE": 12.0, "debtToEquity": 20.0}
        with patch.object(yfinance_client.yf, "Ticker", return_value=ticker):
            ratios, provenance = asyncio.run(fetch_fundamentals("msft"))

        assert ratios.symbol == "MSFT"
        assert ratios.pe_ratio == 12.0
        assert ratios.debt_to_equity == pytest.approx(0.2)
        assert provenance["attempts"] == 1

    def test_fetch_fundamentals_empty_info(self) -> None:
        ticker = MagicMock()
        ticker.info = {}
        with patch.object(yfinance_client.yf, "Ticker", return_value=ticker):
            with pytest.raises(ValueError, match="No fundamentals"):
                asyncio.run(fetch_fundamentals("MSFT"))

    def test_fetch_news_empty_is_valid(self) -> None:
        ticker = MagicMock()
        ticker.news = []
        with patch.object(yfinance_client.yf, "Ticker", return_value=ticker):
            articles, provenance = asyncio.run(fetch_news("MSFT"))

        assert articles == []
        assert provenance["source"] == "yfinance"
