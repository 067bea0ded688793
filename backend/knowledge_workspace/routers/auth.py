"""
Auth Router - Sign-up, login and the current user's profile.

Example Usage:
    POST /auth/signup - Create an account and receive a token
    POST /auth/login - Exchange credentials for a token
    GET /auth/me - Current user
    PATCH /auth/me/preferences - Update favorite topics
"""
from typing import Dict

from fastapi import APIRouter, Depends, Request, status

from .dependencies import ServiceContainer, get_current_user, get_services
from ..api.dto import LoginRequest, PreferencesRequest, SignupRequest
from ..middleware.rate_limit import auth_rate_limit

router = APIRouter(prefix="/auth")


@router.post("/signup", status_code=status.HTTP_201_CREATED)
@auth_rate_limit
async def signup(
    request: Request,
    body: SignupRequest,
    services: ServiceContainer = Depends(get_services)
):
    """
    Create an account.
    
    Status Codes:
        201: Account created, token returned
        400: Blank name, e-mail or password
        409: E-mail already registered
    """
    user, token = await services.users.signup(body.name, body.email, body.password)
    return {"success": True, "data": {"token": token, "user": user}}


@router.post("/login")
@auth_rate_limit
async def login(
    request: Request,
    body: LoginRequest,
    services: ServiceContainer = Depends(get_services)
):
    """Exchange e-mail and password for a bearer token (401 on bad credentials)."""
    user, token = await services.users.login(body.email, body.password)
    return {"success": True, "data": {"token": token, "user": user}}


@router.get("/me")
async def me(user: Dict = Depends(get_current_user)):
    return {"success": True, "data": user}


@router.patch("/me/preferences")
async def update_preferences(
    body: PreferencesRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """Favorite topics seed personalized recommendations."""
    updated = await services.users.update_preferences(user["id"], body.favorite_topics)
    return {"success": True, "data": updated}
