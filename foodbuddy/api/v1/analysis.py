"""
Ingredient analysis API endpoints: analyze, compare, scan and export.
"""

from typing import Optional, Union
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Form
from fastapi.responses import PlainTextResponse
import structlog

from foodbuddy.core.config import settings
from foodbuddy.core.dependencies import get_analysis_service, get_optional_history_store
from foodbuddy.cache.stores import HistoryStore
from foodbuddy.models.analysis import (
    AnalyzeRequest, CompareRequest, EnrichedAnalysis, HistoryItem, RawAnalysis, UsageContext
)
from foodbuddy.services.analysis_service import AnalysisService, InvalidComparisonInputException
from foodbuddy.services.export import format_analysis_text
from foodbuddy.services.llm import AnalysisServiceException, InvalidIngredientsException
from foodbuddy.services.ocr import OCRServiceException

logger = structlog.get_logger(__name__)

router = APIRouter()

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp"]


def _to_http_exception(e: Exception) -> HTTPException:
    """Map domain exceptions to HTTP errors."""
    if isinstance(e, InvalidIngredientsException):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if isinstance(e, InvalidComparisonInputException):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    if isinstance(e, OCRServiceException):
        if e.error_code == "NO_TEXT":
            return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        if e.error_code == "CLIENT_UNAVAILABLE":
            return HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Label scanning is currently unavailable."
            )
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not read the label. Please try again with a clearer image."
        )

    if isinstance(e, AnalysisServiceException) and e.error_code == "MISSING_API_KEY":
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis service is not configured."
        )

    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="Analysis failed. Please try again."
    )


def _serialize(result: Union[RawAnalysis, EnrichedAnalysis]) -> dict:
    return result.model_dump(mode="json", by_alias=True)


async def _record(
    history: Optional[HistoryStore],
    ingredients: str,
    result: Union[RawAnalysis, EnrichedAnalysis],
    context: UsageContext
) -> None:
    if history is None or not isinstance(result, EnrichedAnalysis):
        return
    await history.add(HistoryItem(ingredients=ingredients, result=result, context=context))


@router.post("/analyze", response_model=None)
async def analyze_ingredients(
    request: AnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
    history: Optional[HistoryStore] = Depends(get_optional_history_store)
):
    """
    Analyze an ingredient list.

    Returns the enriched analysis, or the raw analysis untouched when the
    input is not a food ingredient list. Valid results are added to the
    session history when an X-Session-ID header is sent.
    """
    try:
        result = await service.analyze(request.ingredients, request.context)
    except (AnalysisServiceException, OCRServiceException) as e:
        logger.error("Analysis request failed", error=str(e), error_code=e.error_code)
        raise _to_http_exception(e)

    await _record(history, request.ingredients, result, request.context)

    return _serialize(result)


@router.post("/compare", response_model=None)
async def compare_products(
    request: CompareRequest,
    service: AnalysisService = Depends(get_analysis_service)
):
    """Analyze two ingredient lists and pick the healthier one."""
    try:
        comparison = await service.compare_products(
            request.ingredients_a,
            request.ingredients_b,
            request.context
        )
    except AnalysisServiceException as e:
        logger.error("Comparison request failed", error=str(e), error_code=e.error_code)
        raise _to_http_exception(e)

    return comparison.model_dump(mode="json", by_alias=True)


@router.post("/scan", response_model=None)
async def scan_label(
    image: UploadFile = File(...),
    context: UsageContext = Form(UsageContext.GENERAL),
    service: AnalysisService = Depends(get_analysis_service),
    history: Optional[HistoryStore] = Depends(get_optional_history_store)
):
    """
    Analyze a food label photo.

    The ingredient list is extracted with OCR, then analyzed like typed text.
    """
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid image format. Please upload JPEG, PNG, or WebP images."
        )

    image_data = await image.read()

    if len(image_data) > settings.max_image_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Image file too large. Maximum size is 10MB."
        )

    try:
        ocr_result, result = await service.analyze_image(image_data, context)
    except (AnalysisServiceException, OCRServiceException) as e:
        logger.error("Label scan failed", error=str(e), error_code=e.error_code)
        raise _to_http_exception(e)

    await _record(history, ocr_result.ingredient_text or ocr_result.raw_text, result, context)

    return {
        "ocr": {
            "raw_text": ocr_result.raw_text,
            "ingredient_text": ocr_result.ingredient_text,
            "confidence": ocr_result.confidence,
        },
        "analysis": _serialize(result),
    }


@router.post("/export", response_class=PlainTextResponse)
async def export_analysis(result: EnrichedAnalysis):
    """Render an analysis as plain text."""
    return format_analysis_text(result)
