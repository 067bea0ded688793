"""
Search Router - One query over notes, documents, members, workspaces and cards.

Example Usage:
    GET /search?q=kafka
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends

from .dependencies import ServiceContainer, get_current_user, get_services

router = APIRouter(prefix="/search")


@router.get("")
async def search(
    q: Optional[str] = None,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """Up to five hits per group; a blank query returns empty groups."""
    result = await services.search.search(user["id"], q)
    return {"success": True, "data": result["results"], "query": result["query"]}
