"""
Factory and manager for the analysis service.

Architecture Pattern : Factory + Singleton Manager
"""

from typing import Dict, Optional, Type
import structlog

from .interfaces import (
    IAnalysisService, LLMProvider, AnalysisServiceException
)
from .groq_service import GroqAnalysisService

logger = structlog.get_logger(__name__)


class AnalysisServiceFactory:
    """Creates analysis services by provider."""

    _services: Dict[LLMProvider, Type[IAnalysisService]] = {
        LLMProvider.GROQ_GPT_OSS_20B: GroqAnalysisService,
        LLMProvider.GROQ_GPT_OSS_120B: GroqAnalysisService,
        LLMProvider.GROQ_LLAMA_70B: GroqAnalysisService,
    }

    @classmethod
    def create_service(cls, provider: Optional[LLMProvider] = None, **kwargs) -> IAnalysisService:
        """
        Create an analysis service for a provider.

        Args:
            provider: Provider to use, configured model when omitted
            **kwargs: Provider-specific configuration

        Returns:
            IAnalysisService: Service instance
        """
        service_class = cls._services.get(provider, GroqAnalysisService)

        try:
            return service_class(provider=provider, **kwargs)
        except AnalysisServiceException:
            raise
        except Exception as e:
            logger.error("Failed to create analysis service", provider=provider, error=str(e))
            raise AnalysisServiceException(
                f"Failed to create {provider} service: {str(e)}",
                provider=str(provider)
            )


class AnalysisServiceManager:
    """
    Owns the lifecycle of the analysis service.

    The service is created lazily so the app starts without an API key;
    requests then fail with a service error instead of a crash.
    """

    def __init__(self, provider: Optional[LLMProvider] = None):
        self._provider = provider
        self._service: Optional[IAnalysisService] = None

    def get_service(self) -> IAnalysisService:
        """Get or create the analysis service (singleton)."""
        if self._service is None:
            self._service = AnalysisServiceFactory.create_service(self._provider)
            logger.info("Analysis service created", provider=self._service.provider_name)

        return self._service

    def set_service(self, service: IAnalysisService) -> None:
        """Replace the service, used to plug in alternative providers."""
        self._service = service

    async def cleanup(self):
        if self._service is not None:
            await self._service.close()
            self._service = None
        logger.info("Analysis service manager cleanup completed")


# Global instance
analysis_manager = AnalysisServiceManager()
