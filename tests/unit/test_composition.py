"""
Unit tests for ingredient tokenizing and the composition breakdown.
"""

import pytest

from foodbuddy.models.analysis import Breakdown
from foodbuddy.services.enrichment import (
    KeywordCompositionClassifier, is_clean_label, split_ingredients
)
from foodbuddy.services.enrichment.rules import NATURAL, PROCESSED, ADDITIVE


class TestSplitIngredients:
    """Tokenizer behavior."""

    def test_commas_and_semicolons(self):
        assert split_ingredients("Oats, Honey; Salt") == ["oats", "honey", "salt"]

    def test_blank_tokens_dropped(self):
        assert split_ingredients("Oats,, ; ,Salt,") == ["oats", "salt"]

    def test_empty_text(self):
        assert split_ingredients("") == []
        assert split_ingredients(None) == []


class TestCompositionClassifier:
    """Token buckets and percentages."""

    def setup_method(self):
        self.classifier = KeywordCompositionClassifier()

    def test_classify_token(self):
        assert self.classifier.classify_token("glucose syrup") == PROCESSED
        assert self.classifier.classify_token("citric acid") == ADDITIVE
        assert self.classifier.classify_token("water") == NATURAL

    def test_processed_checked_before_additive(self):
        # "red" would be an additive, "oil" makes it processed first
        assert self.classifier.classify_token("red palm oil") == PROCESSED

    def test_breakdown_percentages(self):
        tokens = self.classifier.tokenize("Sugar, Palm oil, Red 40, Preservative E202")
        assert self.classifier.breakdown(tokens) == Breakdown(natural=25, processed=50, additives=25)

    def test_breakdown_rounds_half_up(self):
        tokens = self.classifier.tokenize("water, sugar, xanthan gum")
        breakdown = self.classifier.breakdown(tokens)
        assert (breakdown.natural, breakdown.processed, breakdown.additives) == (33, 33, 33)

    def test_empty_list_is_all_zero(self):
        assert self.classifier.breakdown([]) == Breakdown(natural=0, processed=0, additives=0)

    @pytest.mark.parametrize("ingredients", [
        "water",
        "water, salt, red 40",
        "oats, milk, sugar, cocoa, salt, guar gum, vanilla extract",
        "a, b, c, d, e, f, sugar",
    ])
    def test_sum_close_to_100(self, ingredients):
        breakdown = self.classifier.breakdown(self.classifier.tokenize(ingredients))
        total = breakdown.natural + breakdown.processed + breakdown.additives
        assert abs(total - 100) <= 2
        for value in (breakdown.natural, breakdown.processed, breakdown.additives):
            assert 0 <= value <= 100


class TestCleanLabel:

    def test_under_limit(self):
        assert is_clean_label(Breakdown(natural=90, processed=0, additives=10))

    def test_at_limit_is_not_clean(self):
        assert not is_clean_label(Breakdown(natural=80, processed=0, additives=20))
