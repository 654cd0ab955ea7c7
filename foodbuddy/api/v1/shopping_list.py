"""
Shopping list endpoints, scoped by the X-Session-ID header.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from foodbuddy.cache.stores import ShoppingListStore
from foodbuddy.core.dependencies import get_shopping_list_store
from foodbuddy.models.analysis import ShoppingListRequest

router = APIRouter()


@router.get("")
async def get_shopping_list(store: ShoppingListStore = Depends(get_shopping_list_store)):
    return {"items": await store.list()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_shopping_list_item(
    request: ShoppingListRequest,
    store: ShoppingListStore = Depends(get_shopping_list_store)
):
    """Add an item; items already on the list are left as they are."""
    added = await store.add(request.item)
    return {"added": added, "items": await store.list()}


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_shopping_list(store: ShoppingListStore = Depends(get_shopping_list_store)):
    await store.clear()


@router.delete("/{item}")
async def remove_shopping_list_item(item: str, store: ShoppingListStore = Depends(get_shopping_list_store)):
    if not await store.remove(item):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not on the shopping list")
    return {"items": await store.list()}
