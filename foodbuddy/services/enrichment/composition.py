"""
Ingredient composition breakdown (natural / processed / additive).
"""

from typing import Dict, List, Optional
import math
import re

from foodbuddy.models.analysis import Breakdown
from foodbuddy.services.enrichment.interfaces import ICompositionClassifier
from foodbuddy.services.enrichment.rules import (
    KeywordRule, COMPOSITION_RULES, PROCESSED, ADDITIVE, NATURAL,
    CLEAN_LABEL_ADDITIVE_LIMIT
)

TOKEN_SEPARATORS = re.compile(r"[,;]")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def split_ingredients(ingredients: str) -> List[str]:
    """Split on commas and semicolons, dropping blank tokens."""
    tokens = (token.strip().lower() for token in TOKEN_SEPARATORS.split(ingredients or ""))
    return [token for token in tokens if token]


class KeywordCompositionClassifier(ICompositionClassifier):
    """Buckets each token by the first keyword rule it matches."""

    def __init__(self, rules: Optional[List[KeywordRule]] = None):
        self.rules = rules if rules is not None else COMPOSITION_RULES

    def tokenize(self, ingredients: str) -> List[str]:
        return split_ingredients(ingredients)

    def classify_token(self, token: str) -> str:
        for rule in self.rules:
            if rule.matches(token):
                return rule.label
        return NATURAL

    def count(self, tokens: List[str]) -> Dict[str, int]:
        counts = {NATURAL: 0, PROCESSED: 0, ADDITIVE: 0}
        for token in tokens:
            counts[self.classify_token(token)] += 1
        return counts

    def breakdown(self, tokens: List[str]) -> Breakdown:
        counts = self.count(tokens)
        total = max(1, sum(counts.values()))

        # Buckets are rounded independently, the sum may drift from 100
        return Breakdown(
            natural=_round_half_up(counts[NATURAL] / total * 100),
            processed=_round_half_up(counts[PROCESSED] / total * 100),
            additives=_round_half_up(counts[ADDITIVE] / total * 100),
        )


def is_clean_label(breakdown: Breakdown) -> bool:
    """Clean-label badge: additives stay under the limit."""
    return breakdown.additives < CLEAN_LABEL_ADDITIVE_LIMIT
