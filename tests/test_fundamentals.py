"""Tests for fundamental ratio scoring."""

import operator

import pytest

from stock_scorer.config import FUNDAMENTAL_RULES, Band, FundamentalRule
from stock_scorer.engine.fundamentals import known_ratio, rule_value, score_fundamentals
from stock_scorer.models import FundamentalRatios


class TestKnownRatio:
    """Tests for the zero-means-unknown convention."""

    def test_zero_is_unknown(self) -> None:
        assert known_ratio(FundamentalRatios(symbol="X"), "pe_ratio") is None

    def test_negative_is_known(self) -> None:
        ratios = FundamentalRatios(symbol="X", revenue_growth=-0.2)
        assert known_ratio(ratios, "revenue_growth") == pytest.approx(-0.2)


class TestRuleValue:
    """Tests for the positive-only gate on valuation multiples."""

    @pytest.mark.parametrize("field", ["pe_ratio", "peg_ratio", "price_to_book"])
    def test_negative_multiple_not_scored(self, field: str) -> None:
        ratios = FundamentalRatios(symbol="X", **{field: -1.5})
        rule = next(r for r in FUNDAMENTAL_RULES if r.field == field)

        assert rule_value(ratios, rule) is None
        assert score_fundamentals(ratios) == (50, [])

    def test_negative_growth_still_scored(self) -> None:
        ratios = FundamentalRatios(symbol="X", earnings_growth=-0.3)
        rule = next(r for r in FUNDAMENTAL_RULES if r.field == "earnings_growth")

        assert rule_value(ratios, rule) == pytest.approx(-0.3)

    def test_positive_multiple_scored(self) -> None:
        ratios = FundamentalRatios(symbol="X", peg_ratio=0.5)
        assert score_fundamentals(ratios) == (
            60,
            ["PEG ratio below 1 suggests good growth value"],
        )


class TestScoreFundamentals:
    """Tests for score_fundamentals."""

    def test_value_company(self, value_ratios: FundamentalRatios) -> None:
        """50 + 15 (P/E) + 10 (D/E) + 12 (ROE) = 87."""
        score, reasons = score_fundamentals(value_ratios)

        assert score == 87
        assert reasons == [
            "Low P/E ratio indicates potential undervaluation",
            "Low debt-to-equity ratio shows financial strength",
            "Strong ROE indicates efficient use of shareholder equity",
        ]

    def test_all_unknown_is_neutral(self) -> None:
        score, reasons = score_fundamentals(FundamentalRatios(symbol="X"))
        assert score == 50
        assert reasons == []

    @pytest.mark.parametrize(
        "pe_ratio,expected",
        [(14.99, 65), (15, 55), (20, 55), (25, 55), (25.01, 40)],
    )
    def test_pe_bands(self, pe_ratio: float, expected: int) -> None:
        score, reasons = score_fundamentals(FundamentalRatios(symbol="X", pe_ratio=pe_ratio))
        assert score == expected
        assert len(reasons) == 1

    def test_between_bands_adds_nothing(self) -> None:
        """PEG 1.5 is neither below 1 nor above 2."""
        score, reasons = score_fundamentals(FundamentalRatios(symbol="X", peg_ratio=1.5))
        assert score == 50
        assert reasons == []

    def test_negative_growth_is_penalized(self) -> None:
        score, reasons = score_fundamentals(FundamentalRatios(symbol="X", revenue_growth=-0.2))
        assert score == 40
        assert reasons == ["Declining revenue indicates business challenges"]

    def test_unscored_ratios_ignored(self) -> None:
        ratios = FundamentalRatios(symbol="X", operating_margin=0.9, quick_ratio=5.0)
        assert score_fundamentals(ratios) == (50, [])

    def test_best_case_clamped(self, best_ratios: FundamentalRatios) -> None:
        score, reasons = score_fundamentals(best_ratios)
        assert score == 100
        assert len(reasons) == 10

    def test_worst_case_clamped(self, worst_ratios: FundamentalRatios) -> None:
        score, reasons = score_fundamentals(worst_ratios)
        assert score == 0
        assert len(reasons) == 10

    def test_reasons_follow_rule_order(self, best_ratios: FundamentalRatios) -> None:
        _, reasons = score_fundamentals(best_ratios)
        expected = [rule.bands[0].reason for rule in FUNDAMENTAL_RULES]
        assert reasons == expected

    def test_custom_rules(self) -> None:
        rules = (
            FundamentalRule(
                field="quick_ratio",
                label="Quick ratio",
                bands=(Band(operator.gt, 1, 20, "Quick ratio is healthy"),),
            ),
        )
        ratios = FundamentalRatios(symbol="X", quick_ratio=1.2, pe_ratio=10)
        assert score_fundamentals(ratios, rules) == (70, ["Quick ratio is healthy"])

    def test_empty_rule_table(self, best_ratios: FundamentalRatios) -> None:
        assert score_fundamentals(best_ratios, ()) == (50, [])
