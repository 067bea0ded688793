"""
Quick search across everything a user can reach: their notes, documents
and members of their workspaces, the workspaces themselves, and readable
knowledge cards.

Matching is a case-insensitive substring test; each group returns at most
SEARCH_GROUP_LIMIT hits in datastore order.
"""
import re
from typing import Dict, Iterable, List, Optional

from .analytics_service import AnalyticsService
from .card_service import can_read
from .database import DatabaseInterface
from ..core.logging_config import get_logger
from ..models.interaction import ActionType

logger = get_logger(__name__)

MAX_QUERY_LENGTH = 60
SEARCH_GROUP_LIMIT = 5
SNIPPET_LENGTH = 100

_STRIPPED_CHARS = re.compile(r"[<>]")

_GROUPS = ("notes", "documents", "members", "workspaces", "cards")


def sanitize_query(query: Optional[str]) -> str:
    """Trim, cap at MAX_QUERY_LENGTH characters and drop angle brackets."""
    return _STRIPPED_CHARS.sub("", (query or "").strip()[:MAX_QUERY_LENGTH]).strip()


def _matches(needle: str, *fields: Optional[str]) -> bool:
    return any(needle in (field or "").lower() for field in fields)


def _first(items: Iterable[Dict], limit: int = SEARCH_GROUP_LIMIT) -> List[Dict]:
    results = []
    for item in items:
        if len(results) >= limit:
            break
        results.append(item)
    return results


class SearchService:
    def __init__(self, db: DatabaseInterface, analytics: Optional[AnalyticsService] = None):
        self.db = db
        self.analytics = analytics
    
    async def search(self, user_id: str, query: Optional[str]) -> Dict:
        """
        Search the caller's reachable content.
        
        Args:
            user_id: Caller
            query: Raw query string
        
        Returns:
            ``{"query": sanitized, "results": {group: [hits]}}``; every group is
            empty when the sanitized query is blank
        """
        cleaned = sanitize_query(query)
        results: Dict[str, List[Dict]] = {group: [] for group in _GROUPS}
        if not cleaned:
            return {"query": cleaned, "results": results}
        needle = cleaned.lower()
        
        workspaces = await self.db.list_workspaces_for_user(user_id)
        names = {ws["id"]: ws["name"] for ws in workspaces}
        
        notes = await self.db.list_notes(names.keys())
        results["notes"] = _first(
            {
                "id": note["id"],
                "title": note["title"],
                "content": (note.get("content") or "")[:SNIPPET_LENGTH],
                "workspace": names.get(note["workspace_id"]),
                "workspace_id": note["workspace_id"],
                "created_at": note.get("created_at"),
                "type": "note",
            }
            for note in notes
            if note["author_id"] == user_id and _matches(needle, note["title"], note.get("content"))
        )
        
        documents = []
        for workspace in workspaces:
            documents.extend(await self.db.list_documents(workspace["id"]))
        results["documents"] = _first(
            {
                "id": doc["id"],
                "title": doc["title"],
                "file_name": doc.get("file_name"),
                "file_type": doc.get("file_type"),
                "file_size": doc.get("file_size", 0),
                "workspace_id": doc["workspace_id"],
                "created_at": doc.get("created_at"),
                "type": "document",
            }
            for doc in documents
            if _matches(needle, doc["title"], doc.get("file_name"))
        )
        
        results["members"] = await self._members(workspaces, needle)
        
        results["workspaces"] = _first(
            {
                "id": ws["id"],
                "name": ws["name"],
                "description": ws.get("description"),
                "is_owner": ws["owner_id"] == user_id,
                "created_at": ws.get("created_at"),
                "type": "workspace",
            }
            for ws in workspaces
            if _matches(needle, ws["name"])
        )
        
        cards = await self.db.list_cards()
        results["cards"] = _first(
            {
                "id": card["id"],
                "title": card["title"],
                "category": card.get("category"),
                "tags": card.get("tags", []),
                "visibility": card.get("visibility"),
                "author_id": card["author_id"],
                "created_at": card.get("created_at"),
                "type": "card",
            }
            for card in cards
            if can_read(card, user_id)
            and _matches(needle, card["title"], card.get("content"), *card.get("tags", []))
        )
        
        if self.analytics:
            self.analytics.record_in_background(user_id, ActionType.SEARCH, metadata={"query": cleaned})
        logger.debug(
            f"Search '{cleaned}' for {user_id}: "
            + ", ".join(f"{group}={len(hits)}" for group, hits in results.items())
        )
        return {"query": cleaned, "results": results}
    
    async def _members(self, workspaces: List[Dict], needle: str) -> List[Dict]:
        """Unique owners and members of the given workspaces whose name or email matches."""
        seen = set()
        members = []
        for workspace in workspaces:
            for member_id in [workspace["owner_id"], *workspace.get("member_ids", [])]:
                if member_id in seen:
                    continue
                seen.add(member_id)
                record = await self.db.get_user(member_id)
                if not record or not _matches(needle, record.get("name"), record.get("email")):
                    continue
                members.append({
                    "id": record["id"],
                    "name": record["name"],
                    "email": record["email"],
                    "role": "owner" if member_id == workspace["owner_id"] else "member",
                    "type": "member",
                })
                if len(members) >= SEARCH_GROUP_LIMIT:
                    return members
        return members
