"""
Dietary compliance checks for Vegan, Gluten-Free and Keto.
"""

from typing import List, Optional

from foodbuddy.models.analysis import DietaryStatus
from foodbuddy.services.enrichment.interfaces import IDietaryChecker
from foodbuddy.services.enrichment.rules import DietRule, DIET_RULES


class KeywordDietaryChecker(IDietaryChecker):
    """
    Evaluates each diet rule independently against the lowercased text.

    The rules share no state, so the result for one diet never depends on
    another. Output order follows the rule table.
    """

    def __init__(self, rules: Optional[List[DietRule]] = None):
        self.rules = rules if rules is not None else DIET_RULES

    def check(self, ingredients: str) -> List[DietaryStatus]:
        text = (ingredients or "").lower()

        results = []
        for rule in self.rules:
            status, reason = rule.evaluate(text)
            results.append(DietaryStatus(name=rule.name, status=status, reason=reason))

        return results
