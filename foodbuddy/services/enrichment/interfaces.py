"""
Interfaces for the enrichment pipeline classifiers.

Each heuristic sits behind one of these contracts so a keyword classifier can
be replaced by a model-backed one without changing the orchestrator.
"""

from abc import ABC, abstractmethod
from typing import List

from foodbuddy.models.analysis import (
    Severity, Breakdown, DietaryStatus, SpotlightItem, Alternative,
    ConfidenceTag, RiskItem, UsageContext
)


class ISeverityClassifier(ABC):
    """Maps a risk description to a severity tier."""

    @abstractmethod
    def classify(self, description: str) -> Severity:
        pass


class ICompositionClassifier(ABC):
    """Splits ingredient text into natural / processed / additive shares."""

    @abstractmethod
    def tokenize(self, ingredients: str) -> List[str]:
        """
        Split raw ingredient text into normalized tokens.

        Args:
            ingredients: Ingredient list as typed or scanned

        Returns:
            Lowercased, trimmed, non-empty tokens
        """
        pass

    @abstractmethod
    def breakdown(self, tokens: List[str]) -> Breakdown:
        pass


class IDietaryChecker(ABC):
    """Flags diet compliance for a fixed set of diets."""

    @abstractmethod
    def check(self, ingredients: str) -> List[DietaryStatus]:
        pass


class ISuggestionGenerator(ABC):
    """Produces spotlight call-outs, alternatives and risk explanations."""

    @abstractmethod
    def spotlight(self, ingredients: str, context: UsageContext) -> List[SpotlightItem]:
        pass

    @abstractmethod
    def alternatives(self, ingredients: str, context: UsageContext) -> List[Alternative]:
        pass

    @abstractmethod
    def explain_risk(self, risk: RiskItem, context: UsageContext) -> str:
        pass


class IConfidenceStrategy(ABC):
    """Assigns a confidence tag to a risk."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def assign(self, risk: RiskItem) -> ConfidenceTag:
        pass
