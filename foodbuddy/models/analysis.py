"""
Analysis models shared by the enrichment pipeline, the comparison engine
and the API layer.
"""

from typing import List, Optional, Dict
from enum import Enum
from datetime import datetime, timezone
import uuid

from pydantic import BaseModel, ConfigDict, Field, validator


INVALID_INPUT_INTENT = "Invalid input"


class Severity(str, Enum):
    """Risk severity tiers derived from risk descriptions."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class UsageContext(str, Enum):
    """Usage scenario that adjusts suggestion wording."""
    GENERAL = "general"
    KIDS = "kids"
    ATHLETE = "athlete"
    VEGAN = "vegan"


class ConfidenceTag(str, Enum):
    """Confidence attached to each risk."""
    HIGH = "High"
    MEDIUM = "Medium"


class DietStatus(str, Enum):
    SAFE = "safe"
    UNSAFE = "unsafe"
    WARNING = "warning"


class SpotlightType(str, Enum):
    GOOD = "good"
    BAD = "bad"
    NEUTRAL = "neutral"


class RiskItem(BaseModel):
    """Single risk reported by the analysis service."""

    title: str = ""
    description: str = ""


class TradeoffItem(BaseModel):
    """Single trade-off reported by the analysis service."""

    title: str = ""
    description: str = ""


class RawAnalysis(BaseModel):
    """Structured analysis as returned by the analysis service."""

    intent: str = ""
    risks: List[RiskItem] = Field(default_factory=list)
    tradeoffs: List[TradeoffItem] = Field(default_factory=list)
    summary: str = ""
    disclaimer: str = ""

    @property
    def is_invalid_input(self) -> bool:
        """True when the service rejected the input as non-food."""
        return self.intent == INVALID_INPUT_INTENT


class EnrichedRisk(RiskItem):
    """Risk augmented with a confidence tag and a plain-language explanation."""

    confidence: ConfidenceTag = ConfidenceTag.HIGH
    simple_explanation: str = ""


class Breakdown(BaseModel):
    """Percentage split of ingredient tokens."""

    natural: int = Field(default=0, ge=0, le=100)
    processed: int = Field(default=0, ge=0, le=100)
    additives: int = Field(default=0, ge=0, le=100)


class DietaryStatus(BaseModel):
    name: str
    status: DietStatus
    reason: Optional[str] = None


class SpotlightItem(BaseModel):
    name: str
    type: SpotlightType
    description: str


class Alternative(BaseModel):
    title: str
    description: str


class EnrichedAnalysis(RawAnalysis):
    """Raw analysis plus every field derived by the enrichment pipeline."""

    model_config = ConfigDict(populate_by_name=True)

    risks: List[EnrichedRisk] = Field(default_factory=list)
    breakdown: Breakdown = Field(default_factory=Breakdown)
    clean_label: bool = True
    dietary: List[DietaryStatus] = Field(default_factory=list)
    spotlight: List[SpotlightItem] = Field(default_factory=list)
    alternatives: List[Alternative] = Field(default_factory=list)
    raw_length: int = Field(default=0, ge=0, alias="_rawLength")


class BestFor(BaseModel):
    winner: str
    tags: List[str] = Field(default_factory=list)


class ComparisonResult(BaseModel):
    """Verdict of a side-by-side comparison of two enriched analyses."""

    model_config = ConfigDict(populate_by_name=True)

    winner: str
    insight: str
    best_for: BestFor = Field(alias="bestFor")
    scores: Dict[str, int] = Field(default_factory=dict)
    complexity: Dict[str, str] = Field(default_factory=dict)


class HistoryItem(BaseModel):
    """Persisted record of one analysis."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    ingredients: str
    result: EnrichedAnalysis
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    context: UsageContext = UsageContext.GENERAL


# ===== API PAYLOADS =====

class AnalyzeRequest(BaseModel):
    """Single-product analysis request."""

    ingredients: str
    context: UsageContext = UsageContext.GENERAL


class CompareRequest(BaseModel):
    """Two-product comparison request."""

    ingredients_a: str
    ingredients_b: str
    context: UsageContext = UsageContext.GENERAL


class ComparisonResponse(BaseModel):
    """Both enriched analyses plus the comparison verdict."""

    product_a: EnrichedAnalysis
    product_b: EnrichedAnalysis
    comparison: ComparisonResult


class ShoppingListRequest(BaseModel):
    item: str

    @validator("item")
    def validate_item(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Shopping list item cannot be empty")
        return v
