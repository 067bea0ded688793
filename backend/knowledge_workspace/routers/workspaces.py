"""
Workspaces Router - Workspace CRUD, membership and document intake.

Example Usage:
    POST /workspaces - Create a workspace
    GET /workspaces - Workspaces the caller owns or belongs to
    POST /workspaces/{id}/members - Add a member (owner only)
    POST /workspaces/{id}/documents - Upload a document (multipart)
    POST /workspaces/{id}/documents/link - Register a remotely hosted file
"""
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from .dependencies import ServiceContainer, get_current_user, get_services
from ..api.dto import DocumentLinkRequest, WorkspaceCreateRequest, WorkspaceMemberRequest
from ..core.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/workspaces")


def _split_tags(tags: Optional[str]) -> List[str]:
    """Form uploads send tags as one comma-separated string."""
    if not tags:
        return []
    return [tag for tag in tags.split(",") if tag.strip()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_workspace(
    body: WorkspaceCreateRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    workspace = await services.workspaces.create(user["id"], body.name, body.description)
    return {"success": True, "data": workspace}


@router.get("")
async def list_workspaces(
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    workspaces = await services.workspaces.list_for_user(user["id"])
    return {"success": True, "data": workspaces}


@router.get("/{workspace_id}")
async def get_workspace(
    workspace_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    workspace = await services.workspaces.get_for_user(workspace_id, user["id"])
    return {"success": True, "data": workspace}


@router.post("/{workspace_id}/members")
async def add_member(
    workspace_id: str,
    body: WorkspaceMemberRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    workspace = await services.workspaces.add_member(workspace_id, user["id"], body.user_id)
    return {"success": True, "data": workspace}


@router.delete("/{workspace_id}")
async def delete_workspace(
    workspace_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """
    Delete a workspace with all of its documents.
    
    Stored files are removed best-effort; a file that cannot be deleted
    is logged and does not fail the request.
    """
    removed = await services.workspaces.delete(workspace_id, user["id"])
    return {"success": True, "data": {"deleted_documents": removed}}


@router.get("/{workspace_id}/documents")
async def list_documents(
    workspace_id: str,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    documents = await services.documents.list_for_workspace(workspace_id, user["id"])
    return {"success": True, "data": documents}


@router.post("/{workspace_id}/documents", status_code=status.HTTP_201_CREATED)
async def upload_document(
    workspace_id: str,
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """
    Upload a document into a workspace.
    
    Text is extracted once at upload. A file whose text cannot be read
    (scanned PDF, corrupt DOCX) is still stored; summarization later falls
    back to the title and description.
    
    Args:
        workspace_id: Target workspace
        file: The file to upload (required)
        title: Display title (defaults to the file name)
        description: Free text, also used as substitute content
        tags: Comma-separated tags
    
    Status Codes:
        201: Document created
        400: Empty file or malformed workspace ID
        403: Caller is not a workspace member
        404: Workspace not found
        413: File exceeds MAX_UPLOAD_SIZE_MB
    """
    content = await file.read()
    document = await services.documents.upload(
        workspace_id,
        user["id"],
        file_name=file.filename or "upload",
        content_type=file.content_type or "",
        content=content,
        title=title,
        description=description,
        tags=_split_tags(tags)
    )
    return {"success": True, "data": document}


@router.post("/{workspace_id}/documents/link", status_code=status.HTTP_201_CREATED)
async def link_document(
    workspace_id: str,
    body: DocumentLinkRequest,
    user: Dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services)
):
    """Register a file hosted elsewhere; its text is extracted on first summarize."""
    document = await services.documents.link(
        workspace_id,
        user["id"],
        title=body.title,
        file_url=body.file_url,
        file_name=body.file_name,
        file_type=body.file_type,
        file_size=body.file_size,
        description=body.description,
        tags=body.tags
    )
    return {"success": True, "data": document}
