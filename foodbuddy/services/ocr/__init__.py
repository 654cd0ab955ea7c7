"""
OCR Service Package.
Turns food label photos into ingredient text.

Components:
- IOCRService: Interface for OCR providers
- GoogleVisionOCRService: Google Vision API implementation
- extract_ingredient_section: Ingredient list extraction from raw text
- OCRServiceManager: Service lifecycle management
"""

from foodbuddy.services.ocr.interfaces import (
    IOCRService, OCRResult, OCRProvider, OCRServiceException
)
from foodbuddy.services.ocr.ingredient_text import extract_ingredient_section
from foodbuddy.services.ocr.google_vision import GoogleVisionOCRService
from foodbuddy.services.ocr.manager import OCRServiceFactory, OCRServiceManager, ocr_manager

__all__ = [
    # Interfaces
    "IOCRService",
    "OCRResult",
    "OCRProvider",
    "OCRServiceException",

    # Implementations
    "GoogleVisionOCRService",
    "extract_ingredient_section",

    # Management
    "OCRServiceFactory",
    "OCRServiceManager",
    "ocr_manager"
]
