"""
Analytics Router - Append and read the caller's activity log.
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from .dependencies import ServiceContainer, get_current_user, get_services
from ..api.dto import AnalyticsLogRequest
from ..models.interaction import ActionType
from ..utils.pagination import MAX_PAGE_SIZE

router = APIRouter(prefix="/analytics")


@router.post("/logs", status_code=status.HTTP_201_CREATED)
async def create_log(
    body: AnalyticsLogRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    if body.card_id is not None:
        await services.cards.require_card(body.card_id, user["id"])
    log = await services.analytics.record(user["id"], body.action_type, body.card_id, body.metadata)
    return {"success": True, "data": log}


@router.get("/logs")
async def list_logs(
    action_type: Optional[ActionType] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.analytics.list_logs(user["id"], action_type=action_type, page=page, limit=limit)
    return {"success": True, "data": result}


@router.get("/summary")
async def summary(
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.analytics.summary(user["id"])
    return {"success": True, "data": result}
