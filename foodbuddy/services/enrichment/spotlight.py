"""
Spotlight call-outs, alternative suggestions and plain-language risk
explanations, all keyed on the raw ingredient text and the usage context.
"""

from typing import Dict, List, Optional, Tuple

from foodbuddy.models.analysis import (
    SpotlightItem, Alternative, RiskItem, UsageContext
)
from foodbuddy.services.enrichment.interfaces import ISuggestionGenerator
from foodbuddy.services.enrichment.rules import (
    SpotlightRule, AlternativeRule, SPOTLIGHT_RULES, ALTERNATIVE_RULES,
    DEFAULT_SPOTLIGHT, DEFAULT_ALTERNATIVE, MAX_SPOTLIGHT_ITEMS,
    RISK_EXPLANATIONS
)


class KeywordSuggestionGenerator(ISuggestionGenerator):
    """Rule-table driven spotlight and alternatives generator."""

    def __init__(
        self,
        spotlight_rules: Optional[List[SpotlightRule]] = None,
        alternative_rules: Optional[List[AlternativeRule]] = None,
        explanations: Optional[Dict[Tuple[bool, bool], str]] = None,
        max_spotlight: int = MAX_SPOTLIGHT_ITEMS
    ):
        self.spotlight_rules = spotlight_rules if spotlight_rules is not None else SPOTLIGHT_RULES
        self.alternative_rules = alternative_rules if alternative_rules is not None else ALTERNATIVE_RULES
        self.explanations = explanations or RISK_EXPLANATIONS
        self.max_spotlight = max_spotlight

    def spotlight(self, ingredients: str, context: UsageContext) -> List[SpotlightItem]:
        """Matching call-outs in rule order, never empty."""
        text = (ingredients or "").lower()

        items = [
            SpotlightItem(name=rule.name, type=rule.type, description=rule.describe(context))
            for rule in self.spotlight_rules
            if rule.matches(text)
        ][:self.max_spotlight]

        if not items:
            items.append(SpotlightItem(
                name=DEFAULT_SPOTLIGHT.name,
                type=DEFAULT_SPOTLIGHT.type,
                description=DEFAULT_SPOTLIGHT.describe(context)
            ))

        return items

    def alternatives(self, ingredients: str, context: UsageContext) -> List[Alternative]:
        """One suggestion per matching rule, or a single generic one."""
        text = (ingredients or "").lower()

        suggestions = []
        for rule in self.alternative_rules:
            if rule.matches(text):
                title, description = rule.suggest(context)
                suggestions.append(Alternative(title=title, description=description))

        if not suggestions:
            title, description = DEFAULT_ALTERNATIVE.suggest(context)
            suggestions.append(Alternative(title=title, description=description))

        return suggestions

    def explain_risk(self, risk: RiskItem, context: UsageContext) -> str:
        mentions_sugar = "sugar" in (risk.title or "").lower()
        return self.explanations[(mentions_sugar, context == UsageContext.KIDS)]
