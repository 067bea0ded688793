"""
Interactions Router - Likes and bookmarks.

Creating an existing like/bookmark is an error (ALREADY_LIKED /
ALREADY_BOOKMARKED) and removing a missing one is too (NOT_LIKED /
NOT_BOOKMARKED); neither request is idempotent.

Example Usage:
    POST /cards/{card_id}/like - Like a card
    DELETE /cards/{card_id}/bookmark - Remove a bookmark
    GET /interactions/likes - Cards the caller liked
    GET /interactions/stats/{card_id} - Counts from interaction rows
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from .dependencies import ServiceContainer, get_current_user, get_optional_user, get_services
from ..models.interaction import InteractionType
from ..utils.pagination import MAX_PAGE_SIZE

router = APIRouter()


@router.post("/cards/{card_id}/like", status_code=status.HTTP_201_CREATED)
async def like_card(
    card_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.interactions.add(user, card_id, InteractionType.LIKE)
    return {"success": True, "data": result}


@router.delete("/cards/{card_id}/like")
async def unlike_card(
    card_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.interactions.remove(user, card_id, InteractionType.LIKE)
    return {"success": True, "data": result}


@router.post("/cards/{card_id}/bookmark", status_code=status.HTTP_201_CREATED)
async def bookmark_card(
    card_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.interactions.add(user, card_id, InteractionType.BOOKMARK)
    return {"success": True, "data": result}


@router.delete("/cards/{card_id}/bookmark")
async def unbookmark_card(
    card_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.interactions.remove(user, card_id, InteractionType.BOOKMARK)
    return {"success": True, "data": result}


@router.get("/interactions/likes")
async def liked_cards(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.interactions.list_cards(user["id"], InteractionType.LIKE, page, limit)
    return {"success": True, "data": result}


@router.get("/interactions/bookmarks")
async def bookmarked_cards(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.interactions.list_cards(user["id"], InteractionType.BOOKMARK, page, limit)
    return {"success": True, "data": result}


@router.get("/interactions/stats/{card_id}")
async def interaction_stats(
    card_id: str,
    user: Optional[Dict] = Depends(get_optional_user),
    services: ServiceContainer = Depends(get_services)
):
    stats = await services.interactions.card_stats(card_id, user["id"] if user else None)
    return {"success": True, "data": stats}


@router.delete("/interactions/{interaction_id}")
async def delete_interaction(
    interaction_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """Remove one of the caller's likes or bookmarks by its row ID (403 for others' rows)."""
    result = await services.interactions.delete_by_id(user["id"], interaction_id)
    return {"success": True, "data": result}
