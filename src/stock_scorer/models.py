"""Input and output records of the analysis engine."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

Trend = Literal["bullish", "bearish", "neutral"]
SentimentLabel = Literal["positive", "negative", "neutral"]
Prediction = Literal["buy", "sell", "hold"]


@dataclass(frozen=True)
class PricePoint:
    """One trading session. Series are ascending by date."""

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class FundamentalRatios:
    """
    Fundamental ratio bundle for one symbol.

    A value of exactly 0 means the ratio is unknown and is skipped by the
    fundamental scorer.
    name is the company name from the same payload and is never scored.
    """

    symbol: str
    pe_ratio: float = 0.0
    peg_ratio: float = 0.0
    price_to_book: float = 0.0
    debt_to_equity: float = 0.0
    return_on_equity: float = 0.0
    return_on_assets: float = 0.0
    profit_margin: float = 0.0
    operating_margin: float = 0.0
    revenue_growth: float = 0.0
    earnings_growth: float = 0.0
    current_ratio: float = 0.0
    quick_ratio: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", self.symbol.upper().strip())

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "peRatio": self.pe_ratio,
            "pegRatio": self.peg_ratio,
            "priceToBook": self.price_to_book,
            "debtToEquity": self.debt_to_equity,
            "returnOnEquity": self.return_on_equity,
            "returnOnAssets": self.return_on_assets,
            "profitMargin": self.profit_margin,
            "operatingMargin": self.operating_margin,
            "revenueGrowth": self.revenue_growth,
            "earningsGrowth": self.earnings_growth,
            "currentRatio": self.current_ratio,
            "quickRatio": self.quick_ratio,
        }


@dataclass(frozen=True)
class StockQuote:
    """
    Latest-session summary for one symbol.

    change and change_percent are None when there is no previous close.
    """

    symbol: str
    name: str
    price: float
    change: float | None
    change_percent: float | None
    volume: float
    fifty_two_week_high: float
    fifty_two_week_low: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": round(self.price, 2),
            "change": round(self.change, 2) if self.change is not None else None,
            "changePercent": (
                round(self.change_percent, 2) if self.change_percent is not None else None
            ),
            "volume": int(self.volume),
            "fiftyTwoWeekHigh": round(self.fifty_two_week_high, 2),
            "fiftyTwoWeekLow": round(self.fifty_two_week_low, 2),
        }


@dataclass(frozen=True)
class NewsArticle:
    """
    A news article about a symbol.

    sentiment and sentiment_score are derived fields, filled in on a copy by
    the sentiment analyzer.
    """

    title: str
    description: str
    published_at: datetime
    source: str
    url: str | None = None
    sentiment: SentimentLabel | None = None
    sentiment_score: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "publishedAt": self.published_at.isoformat(),
            "source": self.source,
            "url": self.url,
            "sentiment": self.sentiment,
            "sentimentScore": (
                round(self.sentiment_score, 4) if self.sentiment_score is not None else None
            ),
        }


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    middle: float
    lower: float


@dataclass(frozen=True)
class TechnicalIndicators:
    """Indicator snapshot computed from one price history."""

    sma20: float
    sma50: float
    ema12: float
    ema26: float
    rsi: float
    macd: float
    macd_signal: float
    macd_histogram: float
    bollinger: BollingerBands
    support: float
    resistance: float
    trend: Trend
    volatility: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "sma20": round(self.sma20, 4),
            "sma50": round(self.sma50, 4),
            "ema12": round(self.ema12, 4),
            "ema26": round(self.ema26, 4),
            "rsi": round(self.rsi, 2),
            "macd": round(self.macd, 4),
            "macdSignal": round(self.macd_signal, 4),
            "macdHistogram": round(self.macd_histogram, 4),
            "bollinger": {
                "upper": round(self.bollinger.upper, 4),
                "middle": round(self.bollinger.middle, 4),
                "lower": round(self.bollinger.lower, 4),
            },
            "support": round(self.support, 4),
            "resistance": round(self.resistance, 4),
            "trend": self.trend,
            "volatility": round(self.volatility, 2),
        }


@dataclass(frozen=True)
class SentimentResult:
    """score in [-1, 1], magnitude in [0, 1]."""

    score: float
    magnitude: float
    sentiment: SentimentLabel

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": round(self.score, 4),
            "magnitude": round(self.magnitude, 4),
            "sentiment": self.sentiment,
        }


NEUTRAL_SENTIMENT = SentimentResult(score=0.0, magnitude=0.0, sentiment="neutral")


@dataclass(frozen=True)
class AnalysisResult:
    """Final scored decision for one symbol."""

    symbol: str
    fundamental_score: int
    technical_score: int
    sentiment_score: int
    overall_score: int
    prediction: Prediction
    confidence: float
    reasons: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "fundamentalScore": self.fundamental_score,
            "technicalScore": self.technical_score,
            "sentimentScore": self.sentiment_score,
            "overallScore": self.overall_score,
            "prediction": self.prediction,
            "confidence": self.confidence,
            "reasons": list(self.reasons),
        }
