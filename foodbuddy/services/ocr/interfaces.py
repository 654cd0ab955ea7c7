"""
OCR service interface for label photos.

The pipeline only consumes the extracted text; providers are free in how
they get it.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from enum import Enum
import structlog

logger = structlog.get_logger(__name__)


class OCRProvider(str, Enum):
    """Supported OCR providers."""
    GOOGLE_VISION = "google_vision"


@dataclass
class OCRResult:
    """Extracted text with confidence and metadata."""

    raw_text: str
    confidence: float
    detected_language: Optional[str] = None
    processing_time_ms: float = 0.0
    provider: OCRProvider = OCRProvider.GOOGLE_VISION

    # Text after the "Ingredients:" header, flattened to one line
    ingredient_text: str = ""
    text_blocks: List[str] = field(default_factory=list)

    @property
    def has_text(self) -> bool:
        return bool(self.raw_text.strip())


class IOCRService(ABC):
    """Interface for OCR services following Strategy Pattern."""

    @abstractmethod
    async def extract_text(self, image_data: bytes, **kwargs) -> OCRResult:
        """
        Extract text from a label photo.

        Args:
            image_data: Raw image bytes
            **kwargs: Provider-specific parameters

        Returns:
            OCRResult with raw and ingredient text
        """
        pass

    @abstractmethod
    def get_provider_info(self) -> Dict[str, Any]:
        """Get information about the OCR provider."""
        pass


class OCRServiceException(Exception):
    """OCR provider unavailable or failed."""

    def __init__(self, message: str, provider: Optional[str] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
        self.error_code = error_code
