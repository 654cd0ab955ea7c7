"""
Interfaces for the ingredient analysis service.

The analysis service turns an ingredient list into a RawAnalysis. Concrete
providers implement IAnalysisService; callers only ever see RawAnalysis values
or one of the exceptions below.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime
import structlog

from foodbuddy.models.analysis import RawAnalysis

logger = structlog.get_logger(__name__)


class LLMProvider(str, Enum):
    """Supported analysis providers."""

    GROQ_GPT_OSS_20B = "openai/gpt-oss-20b"
    GROQ_GPT_OSS_120B = "openai/gpt-oss-120b"
    GROQ_LLAMA_70B = "llama-3.3-70b-versatile"


@dataclass
class AnalysisRequest:
    """Single analysis request with its tuning knobs."""

    ingredients: str

    temperature: float = 0.1
    max_tokens: int = 2000
    timeout: float = 30.0

    # Metadata
    request_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class AnalysisUsage:
    """Token usage reported by the provider for one call."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    processing_time: float = 0.0


class IAnalysisService(ABC):
    """Main interface for analysis providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @abstractmethod
    async def analyze_ingredients(self, ingredients: str) -> RawAnalysis:
        """
        Analyze an ingredient list.

        Args:
            ingredients: Ingredient text, non-empty after trimming

        Returns:
            RawAnalysis: Structured analysis, possibly the invalid-input sentinel

        Raises:
            InvalidIngredientsException: Blank ingredient text
            AnalysisServiceException: Any upstream failure
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


# ===== EXCEPTIONS =====

class AnalysisServiceException(Exception):
    """Base exception for the analysis service."""

    def __init__(self, message: str, provider: Optional[str] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
        self.error_code = error_code
        self.timestamp = datetime.now()


class AnalysisValidationException(AnalysisServiceException):
    """The provider answered, but not with a usable analysis."""

    def __init__(self, message: str, validation_errors: List[str] = None, provider: Optional[str] = None):
        super().__init__(message, provider=provider, error_code="MALFORMED_RESPONSE")
        self.validation_errors = validation_errors or []


class InvalidIngredientsException(AnalysisServiceException):
    """Rejected before any upstream call, maps to HTTP 400."""

    def __init__(self, message: str = "Ingredients text is required"):
        super().__init__(message, error_code="EMPTY_INGREDIENTS")
