"""
Unit tests for the comparison engine and the comparison flow.
"""

import pytest

from foodbuddy.models.analysis import EnrichedAnalysis, EnrichedRisk
from foodbuddy.services.comparison import (
    ComparisonFlow, ComparisonState, InvalidTransitionError, compare_analyses,
    complexity_label, PRODUCT_A, PRODUCT_B
)


def _analysis(*risks, raw_length=3):
    return EnrichedAnalysis(
        intent="Snack",
        risks=[EnrichedRisk(title=title, description=description) for title, description in risks],
        raw_length=raw_length,
    )


@pytest.fixture
def clean_product():
    return _analysis(("Sodium", "Can cause irritation of the stomach"))


@pytest.fixture
def junk_product():
    return _analysis(
        ("Added Sugar", "Strongly linked to obesity"),
        ("Trans Fat", "Associated with diabetes"),
        ("Red 40", "May cause hyperactivity"),
        ("Preservatives", "Possibly toxic in high doses"),
        raw_length=14,
    )


class TestCompareAnalyses:
    """Winner selection, insight and tags."""

    def test_healthier_product_wins_either_side(self, clean_product, junk_product):
        as_a = compare_analyses(clean_product, junk_product)
        as_b = compare_analyses(junk_product, clean_product)

        assert as_a.winner == PRODUCT_A
        assert as_b.winner == PRODUCT_B
        assert as_a.scores == {PRODUCT_A: 90, PRODUCT_B: 30}

    def test_score_90_beats_40(self):
        ninety = _analysis(("Sodium", "irritation"))
        forty = _analysis(("a", "cancer"), ("b", "diabetes"), ("c", "obesity"))

        for _ in range(3):
            result = compare_analyses(forty, ninety)
            assert result.winner == PRODUCT_B
            assert result.scores[PRODUCT_B] == 90
            assert result.scores[PRODUCT_A] == 40
            assert PRODUCT_B in result.insight

    def test_insight_names_first_high_risk_of_loser(self, clean_product, junk_product):
        result = compare_analyses(clean_product, junk_product)
        assert result.insight == "Product A is the healthier choice because it avoids added sugar."

    def test_insight_fallback_concern(self):
        result = compare_analyses(_analysis(), _analysis(("Salt", "mild")))
        assert result.insight.endswith("avoids more additives.")

    def test_tie_goes_to_product_a(self):
        result = compare_analyses(_analysis(), _analysis())
        assert result.winner == PRODUCT_A

    def test_best_for_tags(self, clean_product, junk_product):
        result = compare_analyses(clean_product, junk_product)
        assert result.best_for.winner == PRODUCT_A
        assert result.best_for.tags == ["Weight Loss", "Kids", "Daily Use"]

    def test_no_daily_use_at_80(self):
        winner = _analysis(("Sugar rush", "diabetes"))
        result = compare_analyses(winner, _analysis(("x", "cancer"), ("y", "cancer")))
        assert result.scores[PRODUCT_A] == 80
        assert result.best_for.tags == ["Kids"]

    def test_complexity_and_alias(self, clean_product, junk_product):
        result = compare_analyses(clean_product, junk_product)
        assert result.complexity == {PRODUCT_A: "Simple", PRODUCT_B: "Complex"}
        assert "bestFor" in result.model_dump(by_alias=True)


class TestComplexityLabel:

    @pytest.mark.parametrize("raw_length,label", [
        (0, "Simple"), (5, "Simple"), (6, "Moderate"), (10, "Moderate"), (11, "Complex"),
    ])
    def test_thresholds(self, raw_length, label):
        assert complexity_label(raw_length) == label


class TestComparisonFlow:
    """State machine transitions."""

    def test_happy_path(self, clean_product, junk_product):
        flow = ComparisonFlow()
        flow.request_compare("oats")
        assert flow.state == ComparisonState.AWAITING_SECOND_ITEM
        flow.submit_second("sugar")
        assert flow.state == ComparisonState.COMPARING

        result = compare_analyses(clean_product, junk_product)
        flow.show_result(result)
        assert flow.state == ComparisonState.SHOWING_RESULT
        assert flow.result is result

        flow.exit()
        assert flow.state == ComparisonState.IDLE
        assert flow.result is None

    def test_failure_returns_to_idle(self):
        flow = ComparisonFlow()
        flow.request_compare("oats")
        flow.submit_second("sugar")
        flow.fail("upstream timeout")

        assert flow.state == ComparisonState.IDLE
        assert flow.error == "upstream timeout"
        assert flow.result is None

    def test_exit_while_awaiting(self):
        flow = ComparisonFlow()
        flow.request_compare("oats")
        flow.exit()
        assert flow.state == ComparisonState.IDLE
        assert flow.first_ingredients is None

    @pytest.mark.parametrize("action", ["submit_second", "fail"])
    def test_invalid_from_idle(self, action):
        flow = ComparisonFlow()
        with pytest.raises(InvalidTransitionError) as exc_info:
            getattr(flow, action)("x")
        assert exc_info.value.state == ComparisonState.IDLE
        assert exc_info.value.action == action

    def test_cannot_request_twice(self):
        flow = ComparisonFlow()
        flow.request_compare("oats")
        with pytest.raises(InvalidTransitionError):
            flow.request_compare("again")

    def test_show_result_requires_comparing(self, clean_product, junk_product):
        flow = ComparisonFlow()
        with pytest.raises(InvalidTransitionError):
            flow.show_result(compare_analyses(clean_product, junk_product))
