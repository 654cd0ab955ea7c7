"""
Analysis service: ties the analysis provider, the enrichment pipeline,
the comparison engine and OCR together for the API layer.
"""

import asyncio
import time
from typing import Optional, Tuple, Union
import structlog

from foodbuddy.models.analysis import (
    RawAnalysis, EnrichedAnalysis, ComparisonResponse, UsageContext
)
from foodbuddy.services.llm import (
    IAnalysisService, AnalysisServiceException, InvalidIngredientsException, analysis_manager
)
from foodbuddy.services.ocr import IOCRService, OCRResult, OCRServiceException, ocr_manager
from foodbuddy.services.enrichment import AnalysisEnricher, get_enricher
from foodbuddy.services.comparison import compare_analyses, PRODUCT_A, PRODUCT_B

logger = structlog.get_logger(__name__)


class InvalidComparisonInputException(AnalysisServiceException):
    """One side of a comparison was rejected as non-food input."""

    def __init__(self, product: str):
        super().__init__(f"{product} is not a valid ingredient list", error_code="INVALID_INPUT")
        self.product = product


class AnalysisService:
    """
    Entry point for analyze, compare and scan.

    Collaborators default to the shared managers so routes can build the
    service per request, tests pass doubles instead.
    """

    def __init__(
        self,
        provider: Optional[IAnalysisService] = None,
        enricher: Optional[AnalysisEnricher] = None,
        ocr: Optional[IOCRService] = None
    ):
        self._provider = provider
        self._ocr = ocr
        self.enricher = enricher or get_enricher()

    @property
    def provider(self) -> IAnalysisService:
        if self._provider is None:
            self._provider = analysis_manager.get_service()
        return self._provider

    @property
    def ocr(self) -> IOCRService:
        if self._ocr is None:
            self._ocr = ocr_manager.get_ocr_service()
        return self._ocr

    async def analyze(
        self,
        ingredients: str,
        context: UsageContext = UsageContext.GENERAL
    ) -> Union[RawAnalysis, EnrichedAnalysis]:
        """
        Analyze one ingredient list.

        Returns the raw analysis untouched when the provider rejected the
        input, otherwise the enriched analysis. Blank text is rejected
        before the provider is called.
        """
        if not ingredients or not ingredients.strip():
            raise InvalidIngredientsException()

        start_time = time.time()

        raw = await self.provider.analyze_ingredients(ingredients)
        result = self.enricher.enrich(raw, ingredients, context)

        logger.info(
            "Ingredient analysis completed",
            context=UsageContext(context).value,
            invalid_input=raw.is_invalid_input,
            risk_count=len(result.risks),
            processing_time_ms=round((time.time() - start_time) * 1000, 1)
        )

        return result

    async def compare_products(
        self,
        ingredients_a: str,
        ingredients_b: str,
        context: UsageContext = UsageContext.GENERAL
    ) -> ComparisonResponse:
        """
        Analyze two products concurrently and compare them.

        Both analyses must succeed; any failure fails the whole comparison
        and no partial result is returned.
        """
        try:
            product_a, product_b = await asyncio.gather(
                self.analyze(ingredients_a, context),
                self.analyze(ingredients_b, context)
            )

            for name, product in ((PRODUCT_A, product_a), (PRODUCT_B, product_b)):
                if product.is_invalid_input:
                    raise InvalidComparisonInputException(name)

        except Exception as e:
            logger.warning("Comparison failed", error=str(e))
            raise

        comparison = compare_analyses(product_a, product_b)

        logger.info(
            "Comparison completed",
            winner=comparison.winner,
            scores=comparison.scores
        )

        return ComparisonResponse(product_a=product_a, product_b=product_b, comparison=comparison)

    async def analyze_image(
        self,
        image_data: bytes,
        context: UsageContext = UsageContext.GENERAL
    ) -> Tuple[OCRResult, Union[RawAnalysis, EnrichedAnalysis]]:
        """Extract the ingredient list from a label photo, then analyze it."""
        ocr_result = await self.ocr.extract_text(image_data)

        ingredients = ocr_result.ingredient_text or ocr_result.raw_text.strip()
        if not ingredients:
            raise OCRServiceException(
                "No text detected on the label",
                provider=ocr_result.provider.value,
                error_code="NO_TEXT"
            )

        logger.info(
            "Label scanned",
            ocr_confidence=round(ocr_result.confidence, 3),
            ingredient_chars=len(ingredients)
        )

        return ocr_result, await self.analyze(ingredients, context)
