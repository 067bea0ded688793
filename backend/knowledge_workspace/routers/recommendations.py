"""
Recommendations Router - Trending, personalized and tag/category suggestions.

Example Usage:
    GET /recommendations/trending?days=7&limit=10
    GET /recommendations/personalized?limit=10
    POST /recommendations/suggest {"title": ..., "content": ..., "tags": [...]}
"""
from typing import Dict

from fastapi import APIRouter, Depends, Query

from .dependencies import ServiceContainer, get_current_user, get_services
from ..api.dto import SuggestRequest
from ..utils.pagination import MAX_PAGE_SIZE

router = APIRouter(prefix="/recommendations")


@router.get("/trending")
async def trending(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    services: ServiceContainer = Depends(get_services)
):
    """
    Public cards with the most view/like/bookmark events in the last ``days``.
    
    Each card carries a ``trend`` block with per-action counts and the
    score; ties are ordered by card ID.
    """
    cards = await services.recommendations.trending(days=days, limit=limit)
    return {"success": True, "data": cards}


@router.get("/personalized")
async def personalized(
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """Cards matching the tags/categories the caller engaged with or follows."""
    cards = await services.recommendations.personalized(user["id"], limit=limit)
    return {"success": True, "data": cards}


@router.post("/suggest")
async def suggest(
    body: SuggestRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = services.recommendations.suggest(body.title, body.content, body.tags)
    return {"success": True, **result}
