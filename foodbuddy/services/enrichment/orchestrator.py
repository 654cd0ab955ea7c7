"""
Enrichment orchestrator.

Combines the raw analysis returned by the analysis service with the original
ingredient text into the enriched result consumed by clients. This is the only
place where the two meet, and it performs no I/O.
"""

from typing import List, Optional, Union

import structlog

from foodbuddy.core.config import settings
from foodbuddy.models.analysis import (
    RawAnalysis, EnrichedAnalysis, EnrichedRisk, RiskItem, UsageContext
)
from foodbuddy.services.enrichment.interfaces import (
    ICompositionClassifier, IDietaryChecker, ISuggestionGenerator,
    IConfidenceStrategy
)
from foodbuddy.services.enrichment.composition import (
    KeywordCompositionClassifier, is_clean_label
)
from foodbuddy.services.enrichment.dietary import KeywordDietaryChecker
from foodbuddy.services.enrichment.spotlight import KeywordSuggestionGenerator
from foodbuddy.services.enrichment.confidence import create_confidence_strategy
from foodbuddy.services.enrichment.rules import RULESET_VERSION

logger = structlog.get_logger(__name__)


class AnalysisEnricher:
    """
    Sequences composition, dietary, spotlight and risk augmentation.

    Invalid-input results pass through untouched; everything else comes back
    as a new EnrichedAnalysis. The input is never mutated.
    """

    def __init__(
        self,
        composition: Optional[ICompositionClassifier] = None,
        dietary: Optional[IDietaryChecker] = None,
        suggestions: Optional[ISuggestionGenerator] = None,
        confidence: Optional[IConfidenceStrategy] = None
    ):
        self.composition = composition or KeywordCompositionClassifier()
        self.dietary = dietary or KeywordDietaryChecker()
        self.suggestions = suggestions or KeywordSuggestionGenerator()
        self.confidence = confidence or create_confidence_strategy(settings.confidence_strategy)

    def enrich(
        self,
        raw: RawAnalysis,
        ingredients: str,
        context: UsageContext = UsageContext.GENERAL
    ) -> Union[RawAnalysis, EnrichedAnalysis]:
        """
        Enrich a raw analysis with every derived field.

        Args:
            raw: Analysis returned by the analysis service
            ingredients: Ingredient text the user submitted
            context: Usage scenario adjusting the wording

        Returns:
            The same object for invalid input, otherwise a new EnrichedAnalysis
        """
        if raw.is_invalid_input:
            logger.info("Skipping enrichment for rejected input")
            return raw

        context = UsageContext(context)
        tokens = self.composition.tokenize(ingredients)
        breakdown = self.composition.breakdown(tokens)

        enriched = EnrichedAnalysis(
            intent=raw.intent,
            risks=self._augment_risks(raw.risks, context),
            tradeoffs=[tradeoff.model_copy() for tradeoff in raw.tradeoffs],
            summary=raw.summary,
            disclaimer=raw.disclaimer,
            breakdown=breakdown,
            clean_label=is_clean_label(breakdown),
            dietary=self.dietary.check(ingredients),
            spotlight=self.suggestions.spotlight(ingredients, context),
            alternatives=self.suggestions.alternatives(ingredients, context),
            raw_length=len(tokens),
        )

        logger.debug(
            "Analysis enriched",
            ruleset_version=RULESET_VERSION,
            context=context.value,
            token_count=len(tokens),
            risk_count=len(enriched.risks),
            confidence_strategy=self.confidence.name
        )

        return enriched

    def _augment_risks(self, risks: List[RiskItem], context: UsageContext) -> List[EnrichedRisk]:
        return [
            EnrichedRisk(
                title=risk.title,
                description=risk.description,
                confidence=self.confidence.assign(risk),
                simple_explanation=self.suggestions.explain_risk(risk, context),
            )
            for risk in risks
        ]


_default_enricher: Optional[AnalysisEnricher] = None


def get_enricher() -> AnalysisEnricher:
    """Get or create the shared enricher (singleton)."""
    global _default_enricher
    if _default_enricher is None:
        _default_enricher = AnalysisEnricher()
    return _default_enricher


def enrich_analysis(
    raw: RawAnalysis,
    ingredients: str,
    context: UsageContext = UsageContext.GENERAL
) -> Union[RawAnalysis, EnrichedAnalysis]:
    """Enrich with the shared enricher."""
    return get_enricher().enrich(raw, ingredients, context)
