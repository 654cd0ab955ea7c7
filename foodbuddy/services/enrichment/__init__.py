"""
Analysis enrichment pipeline.

Components:
- Severity classifier and health score
- Ingredient composition breakdown
- Dietary compliance checker
- Spotlight / alternatives generator
- Risk confidence strategies
- AnalysisEnricher orchestrating all of the above
"""

from foodbuddy.services.enrichment.severity import (
    KeywordSeverityClassifier, classify_severity, calculate_health_score
)
from foodbuddy.services.enrichment.composition import (
    KeywordCompositionClassifier, split_ingredients, is_clean_label
)
from foodbuddy.services.enrichment.dietary import KeywordDietaryChecker
from foodbuddy.services.enrichment.spotlight import KeywordSuggestionGenerator
from foodbuddy.services.enrichment.confidence import (
    FixedConfidence, DeterministicConfidence, RandomConfidence,
    create_confidence_strategy
)
from foodbuddy.services.enrichment.orchestrator import (
    AnalysisEnricher, enrich_analysis, get_enricher
)

__all__ = [
    # Severity
    "KeywordSeverityClassifier",
    "classify_severity",
    "calculate_health_score",

    # Composition
    "KeywordCompositionClassifier",
    "split_ingredients",
    "is_clean_label",

    # Dietary / suggestions
    "KeywordDietaryChecker",
    "KeywordSuggestionGenerator",

    # Confidence
    "FixedConfidence",
    "DeterministicConfidence",
    "RandomConfidence",
    "create_confidence_strategy",

    # Orchestration
    "AnalysisEnricher",
    "enrich_analysis",
    "get_enricher",
]
