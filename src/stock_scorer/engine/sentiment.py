"""Lexicon-based news sentiment scoring."""

import logging
import re
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone

import numpy as np

from stock_scorer.config import DEFAULT_CONFIG, Lexicon, SentimentSettings
from stock_scorer.models import NEUTRAL_SENTIMENT, NewsArticle, SentimentLabel, SentimentResult
from stock_scorer.utils.numeric import clamp, to_score

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
NEUTRAL_SCORE = 50


def tokenize(text: str) -> list[str]:
    """Lowercase, replace punctuation with spaces, drop tokens of 2 chars or fewer."""
    words = _NON_WORD.sub(" ", text.lower()).split()
    return [w for w in words if len(w) > 2]


def classify_score(
    score: float,
    settings: SentimentSettings = DEFAULT_CONFIG.sentiment,
) -> SentimentLabel:
    if score > settings.label_threshold:
        return "positive"
    if score < -settings.label_threshold:
        return "negative"
    return "neutral"


def analyze_sentiment(
    text: str | None,
    lexicon: Lexicon = DEFAULT_CONFIG.lexicon,
    settings: SentimentSettings = DEFAULT_CONFIG.sentiment,
) -> SentimentResult:
    """
    Score one piece of text against the lexicon.

    Each lexicon hit counts +1 (positive) or -1 (negative) and adds 0.5 to
    magnitude, both scaled by 1.5 when the previous token is an intensifier.
    Totals are divided by the number of hits; words outside the lexicon do
    not dilute the result.

    Args:
        text: Free text (headline or description)
        lexicon: Positive, negative and intensifier word sets
        settings: Weights and label threshold

    Returns:
        SentimentResult with score in [-1, 1] and magnitude in [0, 1]
    """
    if not text:
        return NEUTRAL_SENTIMENT

    words = tokenize(text)

    score = 0.0
    magnitude = 0.0
    hits = 0

    for i, word in enumerate(words):
        prev_word = words[i - 1] if i > 0 else ""
        weight = settings.intensifier_weight if prev_word in lexicon.intensifiers else 1.0

        if word in lexicon.positive:
            score += weight
            magnitude += settings.magnitude_per_hit * weight
            hits += 1
        elif word in lexicon.negative:
            score -= weight
            magnitude += settings.magnitude_per_hit * weight
            hits += 1

    if hits > 0:
        score = clamp(score / hits, -1.0, 1.0)
        magnitude = clamp(magnitude / hits, 0.0, 1.0)

    return SentimentResult(
        score=score,
        magnitude=magnitude,
        sentiment=classify_score(score, settings),
    )


def analyze_article(
    article: NewsArticle,
    lexicon: Lexicon = DEFAULT_CONFIG.lexicon,
    settings: SentimentSettings = DEFAULT_CONFIG.sentiment,
) -> SentimentResult:
    """Title weighted 0.7, description 0.3; magnitude is the larger of the two."""
    title = analyze_sentiment(article.title, lexicon, settings)
    description = analyze_sentiment(article.description, lexicon, settings)

    combined = (
        title.score * settings.title_weight
        + description.score * settings.description_weight
    )
    return SentimentResult(
        score=combined,
        magnitude=max(title.magnitude, description.magnitude),
        sentiment=classify_score(combined, settings),
    )


def analyze_news(
    articles: Sequence[NewsArticle],
    lexicon: Lexicon = DEFAULT_CONFIG.lexicon,
    settings: SentimentSettings = DEFAULT_CONFIG.sentiment,
) -> list[NewsArticle]:
    """
    Attach sentiment to each article.

    The input records are left untouched; annotated copies are returned in
    the same order.
    """
    analyzed: list[NewsArticle] = []
    for article in articles:
        result = analyze_article(article, lexicon, settings)
        analyzed.append(
            replace(article, sentiment=result.sentiment, sentiment_score=result.score)
        )
    return analyzed


def _hours_since(published_at: datetime, now: datetime) -> float:
    # Naive timestamps are read as UTC
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)
    return (now - published_at).total_seconds() / 3600


def calculate_overall_sentiment(
    articles: Sequence[NewsArticle],
    lexicon: Lexicon = DEFAULT_CONFIG.lexicon,
    settings: SentimentSettings = DEFAULT_CONFIG.sentiment,
    now: datetime | None = None,
) -> SentimentResult:
    """
    Recency-weighted aggregate sentiment over a set of articles.

    weight = max(0.1, exp(-hours_since_published / 48)), so news from the
    last day dominates and anything older than about 4.6 days sits at the
    0.1 floor.

    Args:
        articles: News articles (sentiment fields are ignored and recomputed)
        lexicon: Word sets
        settings: Weights, decay and thresholds
        now: Reference time (default: current UTC time)

    Returns:
        Aggregate SentimentResult; neutral zero result for no articles
    """
    if not articles:
        return NEUTRAL_SENTIMENT

    analyzed = analyze_news(articles, lexicon, settings)
    return aggregate_sentiment(analyzed, settings, now=now)


def aggregate_sentiment(
    analyzed: Sequence[NewsArticle],
    settings: SentimentSettings = DEFAULT_CONFIG.sentiment,
    now: datetime | None = None,
) -> SentimentResult:
    """Recency-weighted aggregate over articles already scored by analyze_news."""
    if not analyzed:
        return NEUTRAL_SENTIMENT

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    scores = np.array([a.sentiment_score or 0.0 for a in analyzed])
    hours = np.array([_hours_since(a.published_at, now) for a in analyzed])
    weights = np.maximum(
        settings.min_recency_weight,
        np.exp(-hours / settings.recency_decay_hours),
    )

    total_weight = float(weights.sum())
    score = float((scores * weights).sum() / total_weight) if total_weight > 0 else 0.0
    magnitude = (
        float((np.abs(scores) * weights).sum() / total_weight) if total_weight > 0 else 0.0
    )

    result = SentimentResult(
        score=score,
        magnitude=magnitude,
        sentiment=classify_score(score, settings),
    )
    logger.debug(
        f"Sentiment over {len(analyzed)} articles: score={score:.3f}, "
        f"magnitude={magnitude:.3f}"
    )
    return result


def sentiment_to_score(result: SentimentResult) -> int:
    """
    Map a sentiment result onto 0-100.

    The [-1, 1] score maps linearly to [0, 100] and is then scaled by a
    confidence multiplier of 0.5 + magnitude * 0.5. A result carrying no
    signal at all (no news, or no lexicon hits) scores a neutral 50.
    """
    if result.score == 0 and result.magnitude == 0:
        return NEUTRAL_SCORE

    base = (result.score + 1) / 2 * 100
    multiplier = 0.5 + result.magnitude * 0.5
    return to_score(base * multiplier)


def sentiment_reasons(
    result: SentimentResult,
    article_count: int,
    settings: SentimentSettings = DEFAULT_CONFIG.sentiment,
) -> list[str]:
    """Count-aware explanation of the aggregate sentiment."""
    if article_count == 0:
        return ["No recent news available for sentiment analysis"]

    strong = result.magnitude > settings.strong_magnitude

    if result.sentiment == "positive":
        reasons = [f"Positive news sentiment from {article_count} recent articles"]
        if strong:
            reasons.append("Strong positive sentiment indicates market confidence")
        return reasons

    if result.sentiment == "negative":
        reasons = [f"Negative news sentiment from {article_count} recent articles"]
        if strong:
            reasons.append("Strong negative sentiment suggests market concerns")
        return reasons

    return [f"Neutral news sentiment from {article_count} recent articles"]
