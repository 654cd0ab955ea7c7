"""
Google Vision OCR Service Implementation.
Extracts ingredient lists from food label photos.
"""

import time
import asyncio
from typing import Dict, Any, Optional
import structlog

from google.cloud import vision

from foodbuddy.core.config import settings
from foodbuddy.services.ocr.interfaces import (
    IOCRService, OCRResult, OCRProvider, OCRServiceException
)
from foodbuddy.services.ocr.ingredient_text import extract_ingredient_section


logger = structlog.get_logger(__name__)


class GoogleVisionOCRService(IOCRService):
    """
    Google Vision API implementation for OCR processing.

    Features:
    - Document text detection
    - Word-level confidence averaging
    - Language detection
    - Ingredient section extraction
    """

    def __init__(self, credentials_path: Optional[str] = None):
        self.client = None
        self.credentials_path = credentials_path or settings.google_application_credentials
        self._initialize_client()

    def _initialize_client(self) -> None:
        """Initialize Google Vision client with error handling."""
        try:
            if self.credentials_path:
                self.client = vision.ImageAnnotatorClient.from_service_account_file(self.credentials_path)
            else:
                # Falls back to application default credentials
                self.client = vision.ImageAnnotatorClient()
            logger.info("Google Vision client initialized successfully")
        except Exception as e:
            logger.warning("Google Vision client unavailable", error=str(e))
            self.client = None

    async def extract_text(self, image_data: bytes, **kwargs) -> OCRResult:
        """
        Extract text using Google Vision API.

        Args:
            image_data: Raw image bytes
            **kwargs: Additional parameters (language_hints)
        """
        if not self.client:
            raise OCRServiceException(
                "Google Vision client not initialized",
                provider=OCRProvider.GOOGLE_VISION.value,
                error_code="CLIENT_UNAVAILABLE"
            )

        start_time = time.time()

        request = vision.AnnotateImageRequest(
            image=vision.Image(content=image_data),
            features=[vision.Feature(type_=vision.Feature.Type.DOCUMENT_TEXT_DETECTION)],
            image_context=vision.ImageContext(
                language_hints=kwargs.get("language_hints", ["en"])
            )
        )

        try:
            # Execute in thread pool to avoid blocking
            response = await asyncio.get_event_loop().run_in_executor(
                None, self.client.annotate_image, request
            )
        except Exception as e:
            logger.error("OCR extraction failed", error=str(e))
            raise OCRServiceException(
                f"OCR extraction failed: {str(e)}",
                provider=OCRProvider.GOOGLE_VISION.value,
                error_code="EXTRACTION_FAILED"
            )

        if response.error.message:
            raise OCRServiceException(
                f"Google Vision API error: {response.error.message}",
                provider=OCRProvider.GOOGLE_VISION.value,
                error_code="API_ERROR"
            )

        processing_time = (time.time() - start_time) * 1000
        return self._process_vision_response(response, processing_time)

    def _process_vision_response(self, response, processing_time: float) -> OCRResult:
        """Process Google Vision API response into structured result."""
        text_annotations = response.text_annotations
        full_text_annotation = response.full_text_annotation

        if not text_annotations:
            return OCRResult(
                raw_text="",
                confidence=0.0,
                processing_time_ms=processing_time,
                provider=OCRProvider.GOOGLE_VISION
            )

        raw_text = text_annotations[0].description

        confidences = []
        detected_language = None
        for page in full_text_annotation.pages:
            for block in page.blocks:
                for paragraph in block.paragraphs:
                    for word in paragraph.words:
                        confidences.append(word.confidence)
                        if detected_language is None and word.property.detected_languages:
                            detected_language = word.property.detected_languages[0].language_code

        confidence = sum(confidences) / len(confidences) if confidences else 0.0

        result = OCRResult(
            raw_text=raw_text,
            confidence=confidence,
            detected_language=detected_language,
            processing_time_ms=processing_time,
            provider=OCRProvider.GOOGLE_VISION,
            ingredient_text=extract_ingredient_section(raw_text),
            text_blocks=[annotation.description for annotation in text_annotations[1:]]
        )

        logger.info(
            "Label text extracted",
            confidence=round(confidence, 3),
            language=detected_language,
            processing_time_ms=round(processing_time, 1),
            ingredient_chars=len(result.ingredient_text)
        )

        return result

    def get_provider_info(self) -> Dict[str, Any]:
        """Get information about Google Vision provider."""
        return {
            "provider": "Google Vision API",
            "version": "v1",
            "supported_formats": ["JPEG", "PNG", "WebP"],
            "is_available": self.client is not None
        }
