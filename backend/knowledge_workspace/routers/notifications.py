"""
Notifications Router - The caller's notification inbox.

Example Usage:
    GET /notifications?read=false - Unread notifications
    PATCH /notifications/read-all - Mark everything read
    PATCH /notifications/{id}/read - Mark one read
    DELETE /notifications/read - Delete every read notification
    DELETE /notifications/{id} - Delete one
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query

from .dependencies import ServiceContainer, get_current_user, get_services
from ..utils.pagination import MAX_PAGE_SIZE

router = APIRouter(prefix="/notifications")


@router.get("")
async def list_notifications(
    read: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.notifications.list_for_user(user["id"], read=read, page=page, limit=limit)
    return {"success": True, "data": result}


# Must be declared before /{notification_id}/read
@router.patch("/read-all")
async def mark_all_read(
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    modified = await services.notifications.mark_all_read(user["id"])
    return {"success": True, "data": {"modified": modified}}


# Must be declared before /{notification_id}
@router.delete("/read")
async def delete_read(
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    deleted = await services.notifications.delete_read(user["id"])
    return {"success": True, "message": f"{deleted} read notifications deleted", "data": {"deleted_count": deleted}}


@router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    notification = await services.notifications.mark_read(notification_id, user["id"])
    return {"success": True, "data": notification}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    await services.notifications.delete(notification_id, user["id"])
    return {"success": True, "message": "Notification deleted"}
