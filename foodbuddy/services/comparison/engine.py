"""
Side-by-side comparison of two enriched analyses.
"""

from typing import List, Optional

from foodbuddy.models.analysis import (
    EnrichedAnalysis, ComparisonResult, BestFor, Severity
)
from foodbuddy.services.enrichment.interfaces import ISeverityClassifier
from foodbuddy.services.enrichment.severity import (
    calculate_health_score, default_severity_classifier
)

PRODUCT_A = "Product A"
PRODUCT_B = "Product B"

FALLBACK_CONCERN = "more additives"
DAILY_USE_MIN_SCORE = 80

SIMPLE_MAX_INGREDIENTS = 5
MODERATE_MAX_INGREDIENTS = 10


def complexity_label(raw_length: int) -> str:
    """Coarse label for how long an ingredient list is."""
    if raw_length <= SIMPLE_MAX_INGREDIENTS:
        return "Simple"
    elif raw_length <= MODERATE_MAX_INGREDIENTS:
        return "Moderate"
    else:
        return "Complex"


def _main_concern(analysis: EnrichedAnalysis, classifier: ISeverityClassifier) -> str:
    for risk in analysis.risks:
        if classifier.classify(risk.description) == Severity.HIGH:
            return risk.title
    return FALLBACK_CONCERN


def _best_for_tags(analysis: EnrichedAnalysis, score: int) -> List[str]:
    tags = []

    if not any("sugar" in risk.title.lower() for risk in analysis.risks):
        tags.append("Weight Loss")

    if not any("hyperactivity" in risk.description.lower() for risk in analysis.risks):
        tags.append("Kids")

    if score > DAILY_USE_MIN_SCORE:
        tags.append("Daily Use")

    return tags


def compare_analyses(
    product_a: EnrichedAnalysis,
    product_b: EnrichedAnalysis,
    classifier: Optional[ISeverityClassifier] = None
) -> ComparisonResult:
    """
    Pick the healthier of two products and explain why.

    Product A wins ties. The insight names the loser's first high-severity
    risk, or a generic concern when it has none.
    """
    classifier = classifier or default_severity_classifier

    score_a = calculate_health_score(product_a.risks, classifier)
    score_b = calculate_health_score(product_b.risks, classifier)

    if score_a >= score_b:
        winner, winner_analysis, winner_score, loser_analysis = PRODUCT_A, product_a, score_a, product_b
    else:
        winner, winner_analysis, winner_score, loser_analysis = PRODUCT_B, product_b, score_b, product_a

    concern = _main_concern(loser_analysis, classifier)
    insight = f"{winner} is the healthier choice because it avoids {concern.lower()}."

    return ComparisonResult(
        winner=winner,
        insight=insight,
        best_for=BestFor(winner=winner, tags=_best_for_tags(winner_analysis, winner_score)),
        scores={PRODUCT_A: score_a, PRODUCT_B: score_b},
        complexity={
            PRODUCT_A: complexity_label(product_a.raw_length),
            PRODUCT_B: complexity_label(product_b.raw_length),
        },
    )
