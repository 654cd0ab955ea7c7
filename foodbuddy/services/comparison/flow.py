"""
Comparison flow state machine.

idle -> awaiting_second_item -> comparing -> showing_result -> idle, with any
failure while comparing returning to idle. Clients drive the transitions;
the compare endpoint answers in a single request.
"""

from typing import Dict, Optional, Set
from enum import Enum

import structlog

from foodbuddy.models.analysis import ComparisonResult

logger = structlog.get_logger(__name__)


class ComparisonState(str, Enum):
    IDLE = "idle"
    AWAITING_SECOND_ITEM = "awaiting_second_item"
    COMPARING = "comparing"
    SHOWING_RESULT = "showing_result"


class InvalidTransitionError(Exception):
    """Raised when an action is not allowed in the current state."""

    def __init__(self, action: str, state: ComparisonState):
        super().__init__(f"Cannot {action} while {state.value}")
        self.action = action
        self.state = state


_ALLOWED: Dict[str, Set[ComparisonState]] = {
    "request_compare": {ComparisonState.IDLE},
    "submit_second": {ComparisonState.AWAITING_SECOND_ITEM},
    "show_result": {ComparisonState.COMPARING},
    "fail": {ComparisonState.COMPARING},
}


class ComparisonFlow:
    """Tracks one comparison from the first product to the verdict."""

    def __init__(self):
        self.state = ComparisonState.IDLE
        self.first_ingredients: Optional[str] = None
        self.second_ingredients: Optional[str] = None
        self.result: Optional[ComparisonResult] = None
        self.error: Optional[str] = None

    def _transition(self, action: str, target: ComparisonState) -> None:
        if self.state not in _ALLOWED[action]:
            raise InvalidTransitionError(action, self.state)
        logger.debug("Comparison flow transition", action=action, source=self.state.value, target=target.value)
        self.state = target

    def request_compare(self, first_ingredients: str) -> None:
        self._transition("request_compare", ComparisonState.AWAITING_SECOND_ITEM)
        self.first_ingredients = first_ingredients
        self.second_ingredients = None
        self.result = None
        self.error = None

    def submit_second(self, second_ingredients: str) -> None:
        self._transition("submit_second", ComparisonState.COMPARING)
        self.second_ingredients = second_ingredients

    def show_result(self, result: ComparisonResult) -> None:
        self._transition("show_result", ComparisonState.SHOWING_RESULT)
        self.result = result

    def fail(self, error: str) -> None:
        """Drop the whole comparison, no partial result is kept."""
        self._transition("fail", ComparisonState.IDLE)
        self.error = error
        self.result = None

    def exit(self) -> None:
        """Leave compare mode from any state."""
        logger.debug("Comparison flow exit", source=self.state.value)
        self.state = ComparisonState.IDLE
        self.first_ingredients = None
        self.second_ingredients = None
        self.result = None
