"""
Keyword rule tables for the enrichment pipeline.

Every heuristic of the pipeline reads its keywords from here. Classifiers take
a table through their constructor, so adding a keyword never needs new control
flow. Bump RULESET_VERSION whenever a table changes.
"""

from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
import re

from foodbuddy.models.analysis import (
    Severity, DietStatus, SpotlightType, UsageContext
)

RULESET_VERSION = "2024.1"


@dataclass(frozen=True)
class KeywordRule:
    """A label that fires when any of its keywords occurs in the text."""

    label: str
    keywords: Tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


@dataclass(frozen=True)
class DietRule:
    """Diet that becomes unsafe when a keyword occurs, unless an allow-listed phrase does too."""

    name: str
    unsafe_keywords: Tuple[str, ...]
    reason: str
    allow_list: Tuple[str, ...] = ()

    @property
    def pattern(self) -> "re.Pattern[str]":
        return re.compile("|".join(re.escape(k) for k in self.unsafe_keywords))

    def evaluate(self, text: str) -> Tuple[DietStatus, Optional[str]]:
        if not self.pattern.search(text):
            return DietStatus.SAFE, None
        if any(phrase in text for phrase in self.allow_list):
            return DietStatus.SAFE, None
        return DietStatus.UNSAFE, self.reason


@dataclass(frozen=True)
class SpotlightRule:
    """Spotlight call-out with optional context-specific wording."""

    name: str
    type: SpotlightType
    keywords: Tuple[str, ...]
    description: str
    context_descriptions: Dict[UsageContext, str] = field(default_factory=dict)

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)

    def describe(self, context: UsageContext) -> str:
        return self.context_descriptions.get(context, self.description)


@dataclass(frozen=True)
class AlternativeRule:
    """Substitute suggestion with optional context-specific variants."""

    keywords: Tuple[str, ...]
    title: str
    description: str
    context_variants: Dict[UsageContext, Tuple[str, str]] = field(default_factory=dict)

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)

    def suggest(self, context: UsageContext) -> Tuple[str, str]:
        return self.context_variants.get(context, (self.title, self.description))


# ===== SEVERITY =====

# Checked in order, first match wins
SEVERITY_RULES: List[KeywordRule] = [
    KeywordRule(Severity.HIGH.value, ("cancer", "diabetes", "obesity", "toxic")),
    KeywordRule(Severity.MEDIUM.value, ("irritation", "allergic", "hyperactivity")),
]

SEVERITY_DEDUCTIONS: Dict[Severity, int] = {
    Severity.HIGH: 20,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}


# ===== COMPOSITION =====

PROCESSED = "processed"
ADDITIVE = "additive"
NATURAL = "natural"

# Checked in order, unmatched tokens are natural
COMPOSITION_RULES: List[KeywordRule] = [
    KeywordRule(PROCESSED, ("extract", "syrup", "flour", "oil", "salt", "sugar")),
    KeywordRule(ADDITIVE, ("red", "blue", "yellow", "acid", "gum", "benzoate", "sorbate", "glutamate")),
]

CLEAN_LABEL_ADDITIVE_LIMIT = 20


# ===== DIETARY =====

DIET_RULES: List[DietRule] = [
    DietRule(
        name="Vegan",
        unsafe_keywords=(
            "milk", "whey", "casein", "cheese", "butter", "cream", "yogurt",
            "lactose", "egg", "honey", "beef", "chicken", "pork", "gelatin",
        ),
        reason="Animal Products",
    ),
    DietRule(
        name="Gluten-Free",
        unsafe_keywords=("wheat", "barley", "rye", "malt", "gluten", "flour"),
        reason="Contains Gluten",
        allow_list=("almond flour", "coconut flour", "rice flour"),
    ),
    DietRule(
        name="Keto",
        unsafe_keywords=(
            "sugar", "syrup", "dextrose", "fructose", "maltodextrin",
            "corn", "potato", "rice", "flour", "oats",
        ),
        reason="High Carbs",
    ),
]


# ===== SPOTLIGHT =====

MAX_SPOTLIGHT_ITEMS = 4

SPOTLIGHT_RULES: List[SpotlightRule] = [
    SpotlightRule(
        name="Whole Grains",
        type=SpotlightType.GOOD,
        keywords=("whole grain", "oats", "wheat"),
        description="Good source of fiber for steady, long-lasting energy.",
    ),
    SpotlightRule(
        name="Protein",
        type=SpotlightType.GOOD,
        keywords=("protein", "chicken", "egg", "whey"),
        description="Helps keep you full and supports muscle repair.",
        context_descriptions={
            UsageContext.ATHLETE: "Supports post-workout recovery and muscle growth.",
            UsageContext.VEGAN: "Protein source detected, check that it is plant-based.",
        },
    ),
    SpotlightRule(
        name="Fructose Syrup",
        type=SpotlightType.BAD,
        keywords=("fructose", "corn syrup"),
        description="Concentrated sugar linked to weight gain and blood sugar spikes.",
    ),
    SpotlightRule(
        name="Artificial Colors",
        type=SpotlightType.BAD,
        keywords=("red 40", "blue 1"),
        description="Synthetic dyes with no nutritional value.",
        context_descriptions={
            UsageContext.KIDS: "Synthetic dyes linked to hyperactivity in some children.",
        },
    ),
    SpotlightRule(
        name="Palm Oil",
        type=SpotlightType.BAD,
        keywords=("palm oil",),
        description="High in saturated fat and often heavily refined.",
    ),
]

DEFAULT_SPOTLIGHT = SpotlightRule(
    name="Ingredients",
    type=SpotlightType.NEUTRAL,
    keywords=(),
    description="Standard mix with no standout ingredients.",
)


# ===== ALTERNATIVES =====

# Checked in order, every matching rule contributes one suggestion
ALTERNATIVE_RULES: List[AlternativeRule] = [
    AlternativeRule(
        keywords=("sugar", "syrup"),
        title="Stevia or Monk Fruit",
        description="Zero-calorie natural sweeteners that skip the sugar spike.",
        context_variants={
            UsageContext.KIDS: (
                "Diluted Fruit Juice",
                "Mix 100% fruit juice with water for sweetness without added sugar.",
            ),
        },
    ),
    AlternativeRule(
        keywords=("oil", "fried"),
        title="Air-Popped Snacks",
        description="Air-popped or baked snacks keep the crunch with far less fat.",
    ),
]

DEFAULT_ALTERNATIVE = AlternativeRule(
    keywords=(),
    title="Whole Food Option",
    description="Choose whole, minimally processed foods with short ingredient lists.",
)


# ===== RISK EXPLANATIONS =====

# Keyed by (title mentions sugar, context is kids)
RISK_EXPLANATIONS: Dict[Tuple[bool, bool], str] = {
    (True, True): "Too much sugar can give kids a quick energy spike followed by a crash.",
    (True, False): "Extra sugar adds empty calories and can spike your blood sugar.",
    (False, True): "Growing bodies are more sensitive to this, so keep portions small.",
    (False, False): "Fine once in a while, but best kept out of your daily routine.",
}
