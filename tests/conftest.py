"""
Shared fixtures: analysis payloads, an in-memory Redis double and service doubles.
"""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from foodbuddy.models.analysis import RawAnalysis, RiskItem, TradeoffItem, INVALID_INPUT_INTENT
from foodbuddy.services.enrichment import AnalysisEnricher, FixedConfidence
from foodbuddy.services.llm import IAnalysisService


class InMemoryRedisClient:
    """Implements the RedisClient list surface on plain dicts."""

    def __init__(self):
        self.lists: Dict[str, List[str]] = {}

    async def ping(self) -> bool:
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.lists.pop(key, None) is not None)

    async def push_capped(self, key: str, value: Any, limit: int, ttl: Optional[int] = None) -> bool:
        entries = self.lists.setdefault(key, [])
        entries.insert(0, json.dumps(value, default=str))
        del entries[limit:]
        return True

    async def append(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        self.lists.setdefault(key, []).append(json.dumps(value, default=str))
        return True

    async def get_list(self, key: str) -> List[Any]:
        return [json.loads(entry) for entry in self.lists.get(key, [])]

    async def remove_value(self, key: str, value: Any) -> int:
        encoded = json.dumps(value, default=str)
        entries = self.lists.get(key, [])
        removed = entries.count(encoded)
        self.lists[key] = [entry for entry in entries if entry != encoded]
        return removed


@pytest.fixture
def redis_double():
    return InMemoryRedisClient()


@pytest.fixture
def sugary_raw_analysis():
    """Raw analysis as the provider would return it for a sweet kids snack."""
    return RawAnalysis(
        intent="Sweet snack for children",
        risks=[
            RiskItem(title="Added Sugar", description="High sugar intake is linked to obesity and diabetes."),
            RiskItem(title="Artificial Dye", description="Red 40 may cause hyperactivity in sensitive children."),
        ],
        tradeoffs=[
            TradeoffItem(title="Taste vs Health", description="Very palatable but nutritionally poor."),
        ],
        summary="An occasional treat, not a daily snack.",
        disclaimer="Not medical advice.",
    )


@pytest.fixture
def invalid_raw_analysis():
    return RawAnalysis(
        intent=INVALID_INPUT_INTENT,
        summary="The input does not look like a food ingredient list.",
        disclaimer="Not medical advice.",
    )


@pytest.fixture
def enricher():
    """Enricher with a fixed confidence tag so outputs are fully reproducible."""
    return AnalysisEnricher(confidence=FixedConfidence())


@pytest.fixture
def mock_provider(sugary_raw_analysis):
    provider = Mock(spec=IAnalysisService)
    provider.provider_name = "mock"
    provider.analyze_ingredients = AsyncMock(return_value=sugary_raw_analysis)
    provider.close = AsyncMock()
    return provider
