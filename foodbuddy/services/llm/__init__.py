"""
Analysis service package.

Components:
- IAnalysisService: Interface for analysis providers
- GroqAnalysisService: Groq-hosted, OpenAI-compatible implementation
- AnalysisServiceFactory / AnalysisServiceManager: Service lifecycle
"""

from .interfaces import (
    IAnalysisService,
    AnalysisRequest,
    AnalysisUsage,
    LLMProvider,
    AnalysisServiceException,
    AnalysisValidationException,
    InvalidIngredientsException,
)
from .groq_service import GroqAnalysisService
from .manager import AnalysisServiceFactory, AnalysisServiceManager, analysis_manager

__all__ = [
    # Interfaces
    "IAnalysisService",
    "AnalysisRequest",
    "AnalysisUsage",
    "LLMProvider",

    # Exceptions
    "AnalysisServiceException",
    "AnalysisValidationException",
    "InvalidIngredientsException",

    # Implementations
    "GroqAnalysisService",

    # Management
    "AnalysisServiceFactory",
    "AnalysisServiceManager",
    "analysis_manager",
]
