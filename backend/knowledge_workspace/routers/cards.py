"""
Cards Router - Knowledge card CRUD.

Visibility: public cards are readable by anyone, shared cards by any
signed-in user, private cards by their author only. Hidden cards answer 404.
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from .dependencies import ServiceContainer, get_current_user, get_optional_user, get_services
from ..api.dto import CardCreateRequest, CardUpdateRequest
from ..utils.pagination import MAX_PAGE_SIZE

router = APIRouter(prefix="/cards")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_card(
    body: CardCreateRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """Create a card; a missing category is suggested from its text."""
    card = await services.cards.create_card(
        user["id"],
        body.title,
        body.content,
        tags=body.tags,
        category=body.category,
        visibility=body.visibility
    )
    return {"success": True, "data": card}


@router.get("")
async def list_cards(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.cards.list_public(category=category, tag=tag, page=page, limit=limit)
    return {"success": True, "data": result}


@router.get("/mine")
async def list_my_cards(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.cards.list_mine(user["id"], page=page, limit=limit)
    return {"success": True, "data": result}


@router.get("/{card_id}")
async def get_card(
    card_id: str,
    user: Optional[Dict] = Depends(get_optional_user),
    services: ServiceContainer = Depends(get_services)
):
    card = await services.cards.view_card(card_id, user["id"] if user else None)
    return {"success": True, "data": card}


@router.patch("/{card_id}")
async def update_card(
    card_id: str,
    body: CardUpdateRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    card = await services.cards.update_card(card_id, user["id"], body.model_dump(exclude_none=True))
    return {"success": True, "data": card}


@router.delete("/{card_id}")
async def delete_card(
    card_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    await services.cards.delete_card(card_id, user["id"])
    return {"success": True, "message": "Card deleted successfully"}


@router.get("/{card_id}/related")
async def related_cards(
    card_id: str,
    limit: int = Query(5, ge=1, le=MAX_PAGE_SIZE),
    user: Optional[Dict] = Depends(get_optional_user),
    services: ServiceContainer = Depends(get_services)
):
    """Public cards sharing a tag or the category. Hidden source cards answer 404."""
    card = await services.cards.require_card(card_id, user["id"] if user else None)
    cards = await services.recommendations.related(card, limit=limit)
    return {"success": True, "data": {"cards": cards}}
