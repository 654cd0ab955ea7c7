"""
OCR Service Factory and lifecycle management.

Architecture Pattern: Factory + Configuration
"""

from typing import Optional
import structlog

from foodbuddy.services.ocr.interfaces import IOCRService, OCRProvider
from foodbuddy.services.ocr.google_vision import GoogleVisionOCRService


logger = structlog.get_logger(__name__)


class OCRServiceFactory:
    """Factory for creating OCR services based on configuration."""

    @staticmethod
    def create_ocr_service(
        provider: OCRProvider = OCRProvider.GOOGLE_VISION,
        **kwargs
    ) -> IOCRService:
        """
        Create OCR service instance based on provider.

        Args:
            provider: OCR provider to use
            **kwargs: Provider-specific configuration

        Returns:
            IOCRService implementation
        """
        if provider != OCRProvider.GOOGLE_VISION:
            logger.warning(f"Unknown OCR provider: {provider}, using Google Vision")

        return GoogleVisionOCRService(
            credentials_path=kwargs.get('credentials_path')
        )


class OCRServiceManager:
    """Manages OCR service lifecycle."""

    def __init__(self, provider: OCRProvider = OCRProvider.GOOGLE_VISION):
        self._ocr_service: Optional[IOCRService] = None
        self._provider = provider

    def get_ocr_service(self) -> IOCRService:
        """Get or create OCR service instance (singleton)."""
        if self._ocr_service is None:
            self._ocr_service = OCRServiceFactory.create_ocr_service(
                provider=self._provider
            )
            logger.info("OCR service created", provider=self._provider.value)

        return self._ocr_service


# Global instance
ocr_manager = OCRServiceManager()
