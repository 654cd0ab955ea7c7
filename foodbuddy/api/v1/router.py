"""
Main API v1 router.
"""

from fastapi import APIRouter
from foodbuddy.api.v1 import analysis, history, shopping_list

api_router = APIRouter()

api_router.include_router(
    analysis.router,
    prefix="/analysis",
    tags=["analysis"]
)

api_router.include_router(
    history.router,
    prefix="/history",
    tags=["history"]
)

api_router.include_router(
    shopping_list.router,
    prefix="/shopping-list",
    tags=["shopping-list"]
)
