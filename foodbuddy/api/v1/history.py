"""
Analysis history endpoints, scoped by the X-Session-ID header.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from foodbuddy.cache.stores import HistoryStore
from foodbuddy.core.dependencies import get_history_store
from foodbuddy.services.export import format_analysis_text

router = APIRouter()


@router.get("")
async def list_history(history: HistoryStore = Depends(get_history_store)) -> List[dict]:
    """Most recent analyses first."""
    return [item.model_dump(mode="json", by_alias=True) for item in await history.list()]


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(history: HistoryStore = Depends(get_history_store)):
    await history.clear()


@router.get("/{history_id}/export", response_class=PlainTextResponse)
async def export_history_item(history_id: str, history: HistoryStore = Depends(get_history_store)):
    item = await history.get(history_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="History entry not found")
    return format_analysis_text(item.result)
