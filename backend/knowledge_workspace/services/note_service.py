"""
Workspace notes: short authored text kept next to a workspace's documents.

Members of a workspace can read its notes; only the author can change or
delete one. Notes without an explicit workspace go to the author's
"Personal" workspace, created on first use.
"""
from typing import Dict, List, Optional

from .database import DatabaseInterface
from .workspace_service import WorkspaceService
from ..api.exceptions import MissingFieldsError, NoteNotFoundError
from ..core.logging_config import get_logger
from ..models.note import Note
from ..utils.pagination import paginate
from ..utils.tag_extractor import normalize_tags
from ..utils.validators import is_blank, new_id, validate_id

logger = get_logger(__name__)

PERSONAL_WORKSPACE = "Personal"

_EDITABLE_FIELDS = ("title", "content", "tags", "is_pinned", "is_archived")


class NoteService:
    def __init__(self, db: DatabaseInterface, workspaces: WorkspaceService):
        self.db = db
        self.workspaces = workspaces
    
    async def _personal_workspace(self, user_id: str) -> Dict:
        for workspace in await self.db.list_workspaces_for_user(user_id):
            if workspace["owner_id"] == user_id and workspace["name"] == PERSONAL_WORKSPACE:
                return workspace
        return await self.workspaces.create(user_id, PERSONAL_WORKSPACE, "Personal workspace")
    
    async def create(
        self,
        user_id: str,
        title: str,
        content: str = "",
        tags: Optional[List[str]] = None,
        workspace_id: Optional[str] = None,
        is_pinned: bool = False
    ) -> Dict:
        """
        Create a note in a workspace the user can access.
        
        Raises:
            MissingFieldsError: If the title is blank
            InvalidIdError, WorkspaceNotFoundError, PermissionDeniedError
        """
        if is_blank(title):
            raise MissingFieldsError("Note title is required")
        if workspace_id:
            workspace = await self.workspaces.get_for_user(workspace_id, user_id)
        else:
            workspace = await self._personal_workspace(user_id)
        note = Note(
            id=new_id(),
            title=title.strip(),
            content=content or "",
            tags=normalize_tags(tags),
            workspace_id=workspace["id"],
            author_id=user_id,
            is_pinned=is_pinned
        )
        created = await self.db.create_note(note.model_dump())
        logger.info(f"Note created: {created['id']} in workspace {workspace['id']}")
        return created
    
    async def list_for_user(
        self,
        user_id: str,
        workspace_id: Optional[str] = None,
        include_archived: bool = False,
        page: int = 1,
        limit: int = 20
    ) -> Dict:
        """The caller's own notes, pinned first, optionally limited to one workspace."""
        if workspace_id:
            await self.workspaces.get_for_user(workspace_id, user_id)
            workspace_ids = [workspace_id]
        else:
            workspace_ids = [ws["id"] for ws in await self.db.list_workspaces_for_user(user_id)]
        notes = [
            note for note in await self.db.list_notes(workspace_ids, include_archived=include_archived)
            if note["author_id"] == user_id
        ]
        items, pagination = paginate(notes, page, limit)
        return {"notes": items, "pagination": pagination}
    
    async def get(self, note_id: str, user_id: str) -> Dict:
        """Read a note; any member of its workspace may."""
        validate_id(note_id, "note ID")
        note = await self.db.get_note(note_id)
        if not note:
            raise NoteNotFoundError()
        await self.workspaces.get_for_user(note["workspace_id"], user_id)
        return note
    
    async def _authored(self, note_id: str, user_id: str) -> Dict:
        validate_id(note_id, "note ID")
        note = await self.db.get_note(note_id)
        # Other people's notes are reported as missing
        if not note or note["author_id"] != user_id:
            raise NoteNotFoundError("Note not found or access denied")
        return note
    
    async def update(self, note_id: str, user_id: str, updates: Dict) -> Dict:
        await self._authored(note_id, user_id)
        changes = {key: value for key, value in updates.items() if key in _EDITABLE_FIELDS and value is not None}
        if "title" in changes:
            if is_blank(changes["title"]):
                raise MissingFieldsError("title cannot be blank")
            changes["title"] = changes["title"].strip()
        if "tags" in changes:
            changes["tags"] = normalize_tags(changes["tags"])
        return await self.db.update_note(note_id, changes)
    
    async def delete(self, note_id: str, user_id: str) -> None:
        await self._authored(note_id, user_id)
        await self.db.delete_note(note_id)
        logger.info(f"Note deleted: {note_id}")
