"""
Confidence strategies for risk annotations.

The analysis service reports no confidence of its own, so the tag is derived
locally. The deterministic strategy is the default: the same risk text always
gets the same tag.
"""

from typing import Dict, Optional, Type
import hashlib
import random

import structlog

from foodbuddy.models.analysis import ConfidenceTag, RiskItem
from foodbuddy.services.enrichment.interfaces import IConfidenceStrategy

logger = structlog.get_logger(__name__)

HIGH_CONFIDENCE_SHARE = 0.6


class FixedConfidence(IConfidenceStrategy):
    """Always the same tag."""

    def __init__(self, tag: ConfidenceTag = ConfidenceTag.HIGH):
        self.tag = tag

    @property
    def name(self) -> str:
        return "fixed"

    def assign(self, risk: RiskItem) -> ConfidenceTag:
        return self.tag


class DeterministicConfidence(IConfidenceStrategy):
    """Hash-bucketed tag, roughly 60% High and 40% Medium across risks."""

    def __init__(self, high_share: float = HIGH_CONFIDENCE_SHARE):
        self.high_share = high_share

    @property
    def name(self) -> str:
        return "deterministic"

    def assign(self, risk: RiskItem) -> ConfidenceTag:
        digest = hashlib.sha256(
            f"{risk.title}\x1f{risk.description}".encode("utf-8")
        ).digest()
        bucket = int.from_bytes(digest[:4], "big") / 0xFFFFFFFF
        return ConfidenceTag.HIGH if bucket < self.high_share else ConfidenceTag.MEDIUM


class RandomConfidence(IConfidenceStrategy):
    """Independent random draw per risk, seedable for reproducible runs."""

    def __init__(self, high_share: float = HIGH_CONFIDENCE_SHARE, seed: Optional[int] = None):
        self.high_share = high_share
        self._random = random.Random(seed)

    @property
    def name(self) -> str:
        return "random"

    def assign(self, risk: RiskItem) -> ConfidenceTag:
        return ConfidenceTag.HIGH if self._random.random() < self.high_share else ConfidenceTag.MEDIUM


_STRATEGIES: Dict[str, Type[IConfidenceStrategy]] = {
    "fixed": FixedConfidence,
    "deterministic": DeterministicConfidence,
    "random": RandomConfidence,
}


def create_confidence_strategy(name: str) -> IConfidenceStrategy:
    """Build a strategy by name, falling back to the deterministic one."""
    strategy_class = _STRATEGIES.get((name or "").lower())

    if not strategy_class:
        logger.warning(
            "Unknown confidence strategy, using deterministic",
            requested_strategy=name,
            available_strategies=list(_STRATEGIES.keys())
        )
        strategy_class = DeterministicConfidence

    return strategy_class()
