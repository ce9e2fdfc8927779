"""
Immutable scoring configuration.

Lexicons, rule tables and weights are built once at import into
DEFAULT_CONFIG and passed explicitly to the engine functions. Tuning means
building another AnalysisConfig, never mutating this one.
"""

import operator
from collections.abc import Callable
from dataclasses import dataclass, field

# ============================================================================
# SENTIMENT LEXICON
# ============================================================================

POSITIVE_WORDS = frozenset({
    "good", "great", "excellent", "amazing", "outstanding", "fantastic", "wonderful",
    "profit", "growth", "increase", "rise", "gain", "bull", "bullish", "strong",
    "upgrade", "buy", "recommend", "positive", "optimistic", "robust", "solid",
    "beat", "exceed", "outperform", "success", "successful", "milestone",
    "breakthrough", "achievement", "record", "high", "soar", "surge", "rally",
    "boom", "expansion", "innovative", "advance", "progress", "opportunity",
    "dividend", "earnings", "revenue", "sales", "launch", "partnership",
    "acquisition", "merger", "deal", "contract", "approval", "recovery",
})

NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "horrible", "disappointing", "poor", "weak",
    "loss", "decline", "decrease", "fall", "drop", "bear", "bearish", "crash",
    "downgrade", "sell", "avoid", "negative", "pessimistic", "concern", "worry",
    "miss", "below", "underperform", "failure", "failed", "risk", "threat",
    "warning", "alert", "problem", "issue", "challenge", "difficulty", "crisis",
    "recession", "bankruptcy", "debt", "lawsuit", "investigation", "scandal",
    "volatile", "volatility", "uncertainty", "plunge", "tumble", "slump",
})

INTENSIFIERS = frozenset({
    "very", "extremely", "highly", "significantly", "substantially", "greatly",
    "tremendously", "remarkably", "exceptionally", "considerably", "dramatically",
})


@dataclass(frozen=True)
class Lexicon:
    """Case-insensitive word sets used by the sentiment analyzer."""

    positive: frozenset[str] = POSITIVE_WORDS
    negative: frozenset[str] = NEGATIVE_WORDS
    intensifiers: frozenset[str] = INTENSIFIERS


@dataclass(frozen=True)
class SentimentSettings:
    title_weight: float = 0.7
    description_weight: float = 0.3
    intensifier_weight: float = 1.5
    magnitude_per_hit: float = 0.5
    # |score| above this is positive/negative, otherwise neutral
    label_threshold: float = 0.1
    recency_decay_hours: float = 48.0
    min_recency_weight: float = 0.1
    strong_magnitude: float = 0.6


# ============================================================================
# FUNDAMENTAL RULE TABLE
# ============================================================================


@dataclass(frozen=True)
class Band:
    """One threshold band: fires when comparator(value, threshold) holds."""

    comparator: Callable[[float, float], bool]
    threshold: float
    adjustment: int
    reason: str


@dataclass(frozen=True)
class FundamentalRule:
    """
    Ordered bands for a single ratio.

    The first band that fires wins; a ratio between bands adds nothing.
    Rules with positive_only skip negative values as well as 0.
    """

    field: str
    label: str
    bands: tuple[Band, ...]
    positive_only: bool = False


FUNDAMENTAL_RULES: tuple[FundamentalRule, ...] = (
    FundamentalRule(
        field="pe_ratio",
        label="P/E",
        bands=(
            Band(operator.lt, 15, 15, "Low P/E ratio indicates potential undervaluation"),
            Band(operator.le, 25, 5, "Moderate P/E ratio shows reasonable valuation"),
            Band(operator.gt, 25, -10, "High P/E ratio may indicate overvaluation"),
        ),
        positive_only=True,
    ),
    FundamentalRule(
        field="peg_ratio",
        label="PEG",
        bands=(
            Band(operator.lt, 1, 10, "PEG ratio below 1 suggests good growth value"),
            Band(operator.gt, 2, -8, "High PEG ratio may indicate expensive growth"),
        ),
        positive_only=True,
    ),
    FundamentalRule(
        field="price_to_book",
        label="Price-to-book",
        bands=(
            Band(operator.lt, 1, 8, "Price-to-book below 1 indicates potential value"),
            Band(operator.gt, 3, -5, "High price-to-book ratio suggests premium valuation"),
        ),
        positive_only=True,
    ),
    FundamentalRule(
        field="debt_to_equity",
        label="Debt/Equity",
        bands=(
            Band(operator.lt, 0.3, 10, "Low debt-to-equity ratio shows financial strength"),
            Band(operator.gt, 1, -10, "High debt-to-equity ratio indicates financial risk"),
        ),
    ),
    FundamentalRule(
        field="return_on_equity",
        label="ROE",
        bands=(
            Band(operator.gt, 0.15, 12, "Strong ROE indicates efficient use of shareholder equity"),
            Band(operator.lt, 0.05, -8, "Low ROE suggests poor capital efficiency"),
        ),
    ),
    FundamentalRule(
        field="return_on_assets",
        label="ROA",
        bands=(
            Band(operator.gt, 0.10, 8, "Strong ROA shows efficient asset utilization"),
            Band(operator.lt, 0.02, -5, "Low ROA indicates poor asset efficiency"),
        ),
    ),
    FundamentalRule(
        field="profit_margin",
        label="Profit margin",
        bands=(
            Band(operator.gt, 0.20, 10, "High profit margin demonstrates strong pricing power"),
            Band(operator.lt, 0.05, -8, "Low profit margin suggests operational challenges"),
        ),
    ),
    FundamentalRule(
        field="current_ratio",
        label="Current ratio",
        bands=(
            Band(operator.gt, 1.5, 6, "Strong current ratio indicates good liquidity"),
            Band(operator.lt, 1, -10, "Poor current ratio suggests liquidity concerns"),
        ),
    ),
    FundamentalRule(
        field="revenue_growth",
        label="Revenue growth",
        bands=(
            Band(operator.gt, 0.10, 12, "Strong revenue growth shows business expansion"),
            Band(operator.lt, -0.05, -10, "Declining revenue indicates business challenges"),
        ),
    ),
    FundamentalRule(
        field="earnings_growth",
        label="Earnings growth",
        bands=(
            Band(
                operator.gt, 0.15, 10,
                "Strong earnings growth demonstrates profitability improvement",
            ),
            Band(operator.lt, -0.10, -8, "Declining earnings suggest profitability issues"),
        ),
    ),
)


# ============================================================================
# TECHNICAL AND AGGREGATE WEIGHTS
# ============================================================================


@dataclass(frozen=True)
class TechnicalWeights:
    """Point adjustments applied by technical_to_score around a base of 50."""

    rsi_oversold: float = 30
    rsi_overbought: float = 70
    rsi_healthy: int = 10
    rsi_oversold_bonus: int = 15
    rsi_overbought_penalty: int = -15
    ma_cross: int = 15
    price_above_sma20: int = 10
    price_above_sma50: int = 5
    macd_cross: int = 10
    trend: int = 20
    high_volatility: float = 50
    high_volatility_penalty: int = -5


@dataclass(frozen=True)
class ComponentWeights:
    fundamental: float = 0.40
    technical: float = 0.35
    sentiment: float = 0.25


@dataclass(frozen=True)
class DecisionSettings:
    buy_at_or_above: int = 70
    sell_at_or_below: int = 40
    confidence_floor: float = 0.3
    confidence_variance_scale: float = 1000.0
    # Technical analysis needs more than this many sessions
    min_history: int = 20
    neutral_score: int = 50
    max_reasons: int = 8


@dataclass(frozen=True)
class AnalysisConfig:
    """Everything the engine needs besides the input snapshot."""

    lexicon: Lexicon = field(default_factory=Lexicon)
    sentiment: SentimentSettings = field(default_factory=SentimentSettings)
    fundamental_rules: tuple[FundamentalRule, ...] = FUNDAMENTAL_RULES
    technical: TechnicalWeights = field(default_factory=TechnicalWeights)
    weights: ComponentWeights = field(default_factory=ComponentWeights)
    decision: DecisionSettings = field(default_factory=DecisionSettings)


DEFAULT_CONFIG = AnalysisConfig()
