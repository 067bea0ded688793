"""
Workspaces: the tenant boundary that owns documents and members.
"""
from typing import Dict, List, Optional

from .database import DatabaseInterface
from .file_service import FileService
from ..api.exceptions import (
    MissingFieldsError,
    PermissionDeniedError,
    UserNotFoundError,
    WorkspaceNotFoundError,
)
from ..core.logging_config import get_logger
from ..models.workspace import Workspace
from ..utils.validators import is_blank, new_id, validate_id

logger = get_logger(__name__)


def has_access(workspace: Dict, user_id: str) -> bool:
    return workspace["owner_id"] == user_id or user_id in workspace.get("member_ids", [])


class WorkspaceService:
    def __init__(self, db: DatabaseInterface, file_service: Optional[FileService] = None):
        self.db = db
        self.file_service = file_service
    
    async def create(self, owner_id: str, name: str, description: Optional[str] = None) -> Dict:
        if is_blank(name):
            raise MissingFieldsError("Workspace name is required")
        workspace = Workspace(id=new_id(), name=name.strip(), description=description, owner_id=owner_id)
        created = await self.db.create_workspace(workspace.model_dump())
        logger.info(f"Workspace created: {created['id']} by {owner_id}")
        return created
    
    async def list_for_user(self, user_id: str) -> List[Dict]:
        return await self.db.list_workspaces_for_user(user_id)
    
    async def get_for_user(self, workspace_id: str, user_id: str) -> Dict:
        """
        Load a workspace the user owns or belongs to.
        
        Raises:
            InvalidIdError: If workspace_id is malformed
            WorkspaceNotFoundError: If it does not exist
            PermissionDeniedError: WORKSPACE_ACCESS_DENIED for outsiders
        """
        validate_id(workspace_id, "workspace ID")
        workspace = await self.db.get_workspace(workspace_id)
        if not workspace:
            raise WorkspaceNotFoundError()
        if not has_access(workspace, user_id):
            raise PermissionDeniedError(
                "You do not have permission to access this workspace",
                code="WORKSPACE_ACCESS_DENIED"
            )
        return workspace
    
    async def _owned(self, workspace_id: str, user_id: str) -> Dict:
        workspace = await self.get_for_user(workspace_id, user_id)
        if workspace["owner_id"] != user_id:
            raise PermissionDeniedError("Only the workspace owner can do this")
        return workspace
    
    async def add_member(self, workspace_id: str, owner_id: str, member_id: str) -> Dict:
        workspace = await self._owned(workspace_id, owner_id)
        validate_id(member_id, "user ID")
        if not await self.db.get_user(member_id):
            raise UserNotFoundError()
        if member_id == workspace["owner_id"] or member_id in workspace["member_ids"]:
            return workspace
        return await self.db.update_workspace(workspace_id, {"member_ids": workspace["member_ids"] + [member_id]})
    
    async def delete(self, workspace_id: str, user_id: str) -> int:
        """
        Delete a workspace, its documents and (best-effort) their stored files.
        
        Returns:
            Number of documents removed
        """
        await self._owned(workspace_id, user_id)
        removed = await self.db.delete_workspace(workspace_id)
        if self.file_service:
            for doc in removed:
                try:
                    await self.file_service.delete_file(doc["file_url"], workspace_id)
                except OSError as e:
                    logger.warning(f"Could not delete file for document {doc['id']}: {e}")
        logger.info(f"Workspace deleted: {workspace_id} ({len(removed)} documents)")
        return len(removed)
