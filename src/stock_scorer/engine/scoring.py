"""Combine fundamental, technical and sentiment scores into one decision."""

import logging
from collections.abc import Sequence
from datetime import datetime

import numpy as np

from stock_scorer.config import DEFAULT_CONFIG, AnalysisConfig, ComponentWeights, DecisionSettings
from stock_scorer.engine.fundamentals import score_fundamentals
from stock_scorer.engine.indicators import (
    calculate_technical_indicators,
    technical_reasons,
    technical_to_score,
)
from stock_scorer.engine.sentiment import (
    calculate_overall_sentiment,
    sentiment_reasons,
    sentiment_to_score,
)
from stock_scorer.models import (
    AnalysisResult,
    FundamentalRatios,
    NewsArticle,
    Prediction,
    PricePoint,
)
from stock_scorer.utils.numeric import clamp, round_half_up

logger = logging.getLogger(__name__)

INSUFFICIENT_HISTORY_REASON = "Insufficient historical data for technical analysis"

# (minimum adjusted score, label), checked top-down
RECOMMENDATION_LEVELS: tuple[tuple[float, str], ...] = (
    (75, "Strong Buy"),
    (65, "Buy"),
    (55, "Weak Buy"),
    (45, "Hold"),
    (35, "Weak Sell"),
    (25, "Sell"),
)


def overall_score(
    fundamental: int,
    technical: int,
    sentiment: int,
    weights: ComponentWeights = DEFAULT_CONFIG.weights,
) -> int:
    """Weighted blend of the three component scores (40/35/25 by default)."""
    blended = (
        fundamental * weights.fundamental
        + technical * weights.technical
        + sentiment * weights.sentiment
    )
    return int(round_half_up(blended))


def predict(score: int, settings: DecisionSettings = DEFAULT_CONFIG.decision) -> Prediction:
    """buy at or above 70, sell at or below 40, hold in between."""
    if score >= settings.buy_at_or_above:
        return "buy"
    if score <= settings.sell_at_or_below:
        return "sell"
    return "hold"


def calculate_confidence(
    scores: Sequence[float],
    settings: DecisionSettings = DEFAULT_CONFIG.decision,
) -> float:
    """
    Agreement between component scores.

    1 - population variance / 1000, clamped to [0.3, 1.0] and rounded to two
    decimals. Only identical scores give 1.0; any disagreement tops out at 0.99.
    """
    variance = float(np.var(np.asarray(scores, dtype=float)))
    confidence = clamp(1 - variance / settings.confidence_variance_scale,
                       settings.confidence_floor, 1.0)
    confidence = round_half_up(confidence, 2)
    if variance > 0 and confidence >= 1.0:
        return 0.99
    return confidence


def recommendation_strength(score: float, confidence: float) -> str:
    """Graded label for score scaled by confidence."""
    adjusted = score * confidence
    for minimum, label in RECOMMENDATION_LEVELS:
        if adjusted >= minimum:
            return label
    return "Strong Sell"


def analyze_stock(
    symbol: str,
    fundamentals: FundamentalRatios,
    price_history: Sequence[PricePoint],
    articles: Sequence[NewsArticle],
    config: AnalysisConfig = DEFAULT_CONFIG,
    now: datetime | None = None,
) -> AnalysisResult:
    """
    Run the three analyses over one snapshot and combine them.

    Technical analysis needs more than 20 sessions; shorter histories get a
    neutral 50 with a single explanatory reason. An empty article list gives
    a neutral sentiment. Nothing here raises for sparse input.

    Args:
        symbol: Ticker symbol reported in the result
        fundamentals: Ratio bundle (zero fields are unknown)
        price_history: Sessions, oldest first
        articles: News articles for the symbol
        config: Lexicon, rule tables and weights
        now: Reference time for news recency (default: current UTC time)

    Returns:
        AnalysisResult with component scores, prediction, confidence and reasons
    """
    decision = config.decision

    fundamental_score, fundamental_reasons = score_fundamentals(
        fundamentals, config.fundamental_rules
    )

    if len(price_history) > decision.min_history:
        indicators = calculate_technical_indicators(price_history)
        current_price = price_history[-1].close
        technical_score = technical_to_score(indicators, current_price, config.technical)
        tech_reasons = technical_reasons(indicators, current_price, config.technical)
    else:
        logger.info(
            f"{symbol}: {len(price_history)} sessions, technical analysis needs "
            f"more than {decision.min_history}; using neutral score"
        )
        technical_score = decision.neutral_score
        tech_reasons = [INSUFFICIENT_HISTORY_REASON]

    sentiment = calculate_overall_sentiment(articles, config.lexicon, config.sentiment, now=now)
    news_score = sentiment_to_score(sentiment)
    news_reasons = sentiment_reasons(sentiment, len(articles), config.sentiment)

    overall = overall_score(fundamental_score, technical_score, news_score, config.weights)

    reasons = [*fundamental_reasons, *tech_reasons, *news_reasons]

    result = AnalysisResult(
        symbol=symbol,
        fundamental_score=fundamental_score,
        technical_score=technical_score,
        sentiment_score=news_score,
        overall_score=overall,
        prediction=predict(overall, decision),
        confidence=calculate_confidence(
            [fundamental_score, technical_score, news_score], decision
        ),
        reasons=tuple(reasons[: decision.max_reasons]),
    )
    _validate_result_invariants(result, config)
    return result


def _validate_result_invariants(result: AnalysisResult, config: AnalysisConfig) -> None:
    """
    Check a result against its own scoring rules.

    Invariants enforced:
    1. Every score is an integer in [0, 100]
    2. overall_score matches the weighted blend of the component scores
    3. confidence lies in [confidence_floor, 1.0]
    4. reasons never exceed max_reasons

    Logs warnings for violations rather than raising (production-safe).
    """
    violations: list[str] = []

    scores = {
        "fundamental_score": result.fundamental_score,
        "technical_score": result.technical_score,
        "sentiment_score": result.sentiment_score,
        "overall_score": result.overall_score,
    }
    for name, value in scores.items():
        if not isinstance(value, int) or not 0 <= value <= 100:
            violations.append(f"{name}={value} outside integer range [0, 100]")

    expected = overall_score(
        result.fundamental_score,
        result.technical_score,
        result.sentiment_score,
        config.weights,
    )
    if expected != result.overall_score:
        violations.append(f"overall_score={result.overall_score} but weighted blend={expected}")

    floor = config.decision.confidence_floor
    if not floor <= result.confidence <= 1.0:
        violations.append(f"confidence={result.confidence} outside [{floor}, 1.0]")

    if len(result.reasons) > config.decision.max_reasons:
        violations.append(f"{len(result.reasons)} reasons exceed {config.decision.max_reasons}")

    for v in violations:
        logger.warning(f"{result.symbol}: analysis invariant violation: {v}")
