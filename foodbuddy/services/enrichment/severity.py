"""
Severity classification and aggregate health scoring.
"""

from typing import Any, Iterable, List, Optional

from foodbuddy.models.analysis import Severity
from foodbuddy.services.enrichment.interfaces import ISeverityClassifier
from foodbuddy.services.enrichment.rules import (
    KeywordRule, SEVERITY_RULES, SEVERITY_DEDUCTIONS
)

MAX_HEALTH_SCORE = 100
MIN_HEALTH_SCORE = 0


class KeywordSeverityClassifier(ISeverityClassifier):
    """First-match keyword classifier, high-severity keywords checked first."""

    def __init__(self, rules: Optional[List[KeywordRule]] = None):
        self.rules = rules if rules is not None else SEVERITY_RULES

    def classify(self, description: str) -> Severity:
        text = (description or "").lower()
        for rule in self.rules:
            if rule.matches(text):
                return Severity(rule.label)
        return Severity.LOW


default_severity_classifier = KeywordSeverityClassifier()


def classify_severity(description: str) -> Severity:
    """Classify a free-text risk description as high, medium or low."""
    return default_severity_classifier.classify(description)


def risk_description(risk: Any) -> str:
    """Read the description of a risk given as text, dict or model."""
    if isinstance(risk, str):
        return risk
    if isinstance(risk, dict):
        return risk.get("description") or ""
    return getattr(risk, "description", "") or ""


def calculate_health_score(
    risks: Iterable[Any],
    classifier: Optional[ISeverityClassifier] = None
) -> int:
    """
    Fold risk severities into a bounded health score.

    Starts at 100 and deducts 20 / 10 / 5 per high / medium / low risk.

    Args:
        risks: Risk descriptions, risk dicts or risk models
        classifier: Severity classifier, keyword rules by default

    Returns:
        Integer score clamped to [0, 100]
    """
    classifier = classifier or default_severity_classifier

    score = MAX_HEALTH_SCORE
    for risk in risks or []:
        severity = classifier.classify(risk_description(risk))
        score -= SEVERITY_DEDUCTIONS[severity]

    return min(MAX_HEALTH_SCORE, max(MIN_HEALTH_SCORE, score))
