from foodbuddy.services.comparison.engine import (
    compare_analyses, complexity_label, PRODUCT_A, PRODUCT_B
)
from foodbuddy.services.comparison.flow import (
    ComparisonFlow, ComparisonState, InvalidTransitionError
)

__all__ = [
    "compare_analyses",
    "complexity_label",
    "PRODUCT_A",
    "PRODUCT_B",
    "ComparisonFlow",
    "ComparisonState",
    "InvalidTransitionError",
]
