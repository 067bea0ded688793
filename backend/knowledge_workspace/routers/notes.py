"""
Notes Router - Notes kept inside workspaces.

Example Usage:
    POST /notes - Create (Personal workspace when workspace_id is omitted)
    GET /notes?workspace_id=... - The caller's notes, pinned first
    GET /notes/{id} - Read (workspace members)
    PATCH /notes/{id} - Update (author only)
    DELETE /notes/{id} - Delete (author only)
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from .dependencies import ServiceContainer, get_current_user, get_services
from ..api.dto import NoteCreateRequest, NoteUpdateRequest
from ..utils.pagination import MAX_PAGE_SIZE

router = APIRouter(prefix="/notes")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_note(
    body: NoteCreateRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    note = await services.notes.create(
        user["id"],
        body.title,
        body.content,
        tags=body.tags,
        workspace_id=body.workspace_id,
        is_pinned=body.is_pinned
    )
    return {"success": True, "data": note}


@router.get("")
async def list_notes(
    workspace_id: Optional[str] = None,
    include_archived: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    result = await services.notes.list_for_user(
        user["id"], workspace_id=workspace_id, include_archived=include_archived, page=page, limit=limit
    )
    return {"success": True, "data": result}


@router.get("/{note_id}")
async def get_note(
    note_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    note = await services.notes.get(note_id, user["id"])
    return {"success": True, "data": note}


@router.patch("/{note_id}")
async def update_note(
    note_id: str,
    body: NoteUpdateRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    note = await services.notes.update(note_id, user["id"], body.model_dump(exclude_none=True))
    return {"success": True, "data": note}


@router.delete("/{note_id}")
async def delete_note(
    note_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    await services.notes.delete(note_id, user["id"])
    return {"success": True, "message": "Note deleted"}
