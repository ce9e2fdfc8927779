"""Fundamental ratio scoring."""

from collections.abc import Sequence

from stock_scorer.config import DEFAULT_CONFIG, FundamentalRule
from stock_scorer.models import FundamentalRatios
from stock_scorer.utils.numeric import to_score
from stock_scorer.utils.validators import check_rule


def known_ratio(ratios: FundamentalRatios, field: str) -> float | None:
    """Return the ratio value, or None when it is 0 (unknown)."""
    value = getattr(ratios, field)
    if value == 0:
        return None
    return float(value)


def rule_value(ratios: FundamentalRatios, rule: FundamentalRule) -> float | None:
    """Return the value a rule scores, or None when the rule does not apply."""
    value = known_ratio(ratios, rule.field)
    if value is not None and rule.positive_only and value < 0:
        return None
    return value


def score_fundamentals(
    ratios: FundamentalRatios,
    rules: Sequence[FundamentalRule] = DEFAULT_CONFIG.fundamental_rules,
) -> tuple[int, list[str]]:
    """
    Score a ratio bundle from a neutral 50.

    Each rule fires at most one band (the first whose comparison holds) and
    contributes its adjustment and reason. Unknown ratios are skipped, and so
    are negative values for positive_only rules.

    Args:
        ratios: Fundamental ratio bundle
        rules: Ordered rule table

    Returns:
        Tuple of (score in [0, 100], reasons in rule order)
    """
    score = 50
    reasons: list[str] = []

    for rule in rules:
        value = rule_value(ratios, rule)
        for band in rule.bands:
            if check_rule(value, band.threshold, band.comparator):
                score += band.adjustment
                reasons.append(band.reason)
                break

    return to_score(score), reasons
