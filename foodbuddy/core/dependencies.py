"""
FastAPI dependencies for sessions, stores and services.
"""

import re
from typing import Optional
from fastapi import Depends, Header, HTTPException, status
import structlog

from foodbuddy.cache.stores import HistoryStore, ShoppingListStore
from foodbuddy.services.analysis_service import AnalysisService

logger = structlog.get_logger(__name__)

SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def _validate_session_id(session_id: str) -> str:
    if not SESSION_ID_PATTERN.match(session_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Session-ID header"
        )
    return session_id


async def get_session_id(x_session_id: str = Header(...)) -> str:
    """Session identifier scoping history and shopping list."""
    return _validate_session_id(x_session_id)


async def get_optional_session_id(x_session_id: Optional[str] = Header(None)) -> Optional[str]:
    """Session identifier when the client sent one; analyses are not recorded otherwise."""
    if x_session_id is None:
        return None
    return _validate_session_id(x_session_id)


def get_analysis_service() -> AnalysisService:
    return AnalysisService()


async def get_history_store(session_id: str = Depends(get_session_id)) -> HistoryStore:
    return HistoryStore(session_id)


async def get_optional_history_store(
    session_id: Optional[str] = Depends(get_optional_session_id)
) -> Optional[HistoryStore]:
    if session_id is None:
        return None
    return HistoryStore(session_id)


async def get_shopping_list_store(session_id: str = Depends(get_session_id)) -> ShoppingListStore:
    return ShoppingListStore(session_id)
