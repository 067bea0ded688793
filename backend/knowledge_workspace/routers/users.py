"""
Users Router - Public profiles.

Example Usage:
    GET /users/profile/{id} - Any user's profile (signed-in callers)
    PATCH /users/profile/{id} - Update your own name and preferences
"""
from typing import Dict

from fastapi import APIRouter, Depends

from .dependencies import ServiceContainer, get_current_user, get_services
from ..api.dto import ProfileUpdateRequest

router = APIRouter(prefix="/users")


@router.get("/profile/{user_id}")
async def get_profile(
    user_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    profile = await services.users.get_user(user_id)
    return {"success": True, "data": profile}


@router.patch("/profile/{user_id}")
async def update_profile(
    user_id: str,
    body: ProfileUpdateRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    updated = await services.users.update_profile(
        user["id"],
        user_id,
        name=body.name,
        favorite_topics=body.preferences.favorite_topics if body.preferences else None
    )
    return {"success": True, "message": "Profile updated successfully", "data": updated}
