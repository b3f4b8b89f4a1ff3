"""
Catalog Router - Menu and Reviews

Endpoints:
- GET /menu - List all menu items
- GET /reviews - List all customer reviews
"""

from typing import Any

from fastapi import APIRouter

from bistro.database import MENU_COLLECTION, REVIEWS_COLLECTION, find_all

router = APIRouter()


@router.get("/menu", summary="List menu items")
async def list_menu() -> list[dict[str, Any]]:
    return await find_all(MENU_COLLECTION)


@router.get("/reviews", summary="List reviews")
async def list_reviews() -> list[dict[str, Any]]:
    return await find_all(REVIEWS_COLLECTION)
