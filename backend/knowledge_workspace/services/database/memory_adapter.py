"""
In-memory adapter implementing DatabaseInterface.
Perfect for demos and testing - stores all data in memory using Python dicts.
Data is lost on restart (on-demand, no persistence).
"""
import asyncio
import copy
from datetime import datetime, timezone
from typing import List, Dict, Optional, Iterable, Tuple

from .base import DatabaseInterface
from ...api.exceptions import DuplicateInteractionError
from ...core.logging_config import get_logger

logger = get_logger(__name__)

COLLECTIONS = (
    "users",
    "workspaces",
    "documents",
    "cards",
    "interactions",
    "analytics_logs",
    "notifications",
    "notes",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse(timestamp: Optional[str]) -> datetime:
    if not timestamp:
        return datetime.min.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(timestamp)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _stamp(record: Dict, *fields: str) -> Dict:
    """Fill blank timestamp fields with the current time."""
    now = _now()
    for field in fields:
        if not record.get(field):
            record[field] = now
    return record


def _newest_first(records: Iterable[Dict], field: str = "created_at") -> List[Dict]:
    return sorted(records, key=lambda r: _parse(r.get(field)), reverse=True)


class MemoryAdapter(DatabaseInterface):
    """
    In-memory database adapter using Python dictionaries.
    Stores all data in memory - perfect for demos and testing.
    Data is lost when the application restarts.

    A single asyncio.Lock serializes every write so counter updates and
    the unique interaction insert cannot interleave between awaits.
    """
    
    def __init__(self):
        # collection name -> {id: record}
        self._data: Dict[str, Dict[str, Dict]] = {name: {} for name in COLLECTIONS}
        
        # Index for fast lookups
        self._email_index: Dict[str, str] = {}  # email -> user_id
        self._interaction_index: Dict[Tuple[str, str, str], str] = {}  # (user, card, type) -> id
        
        self._lock = asyncio.Lock()
    
    async def initialize(self):
        """Initialize database (clears any existing data, useful for testing)."""
        for records in self._data.values():
            records.clear()
        self._rebuild_indexes()
    
    async def close(self):
        """Close database connection (no-op for in-memory)."""
        pass
    
    async def _commit(self, *collections: str):
        """Hook called after every write. Persistent adapters override it."""
        pass
    
    def _rebuild_indexes(self):
        self._email_index = {
            user["email"].lower(): user_id for user_id, user in self._data["users"].items()
        }
        self._interaction_index = {
            (row["user_id"], row["card_id"], row["type"]): row_id
            for row_id, row in self._data["interactions"].items()
        }
    
    # Generic helpers
    async def _insert(self, collection: str, record: Dict) -> Dict:
        record_id = record.get("id")
        if not record_id:
            raise ValueError(f"Record in '{collection}' must have an 'id' field")
        
        _stamp(record, "created_at", "updated_at")
        
        async with self._lock:
            self._data[collection][record_id] = copy.deepcopy(record)
            await self._commit(collection)
            return copy.deepcopy(self._data[collection][record_id])
    
    def _get(self, collection: str, record_id: str) -> Optional[Dict]:
        record = self._data[collection].get(record_id)
        return copy.deepcopy(record) if record else None
    
    async def _update(self, collection: str, record_id: str, updates: Dict) -> Optional[Dict]:
        async with self._lock:
            record = self._data[collection].get(record_id)
            if record is None:
                return None
            for key, value in updates.items():
                record[key] = copy.deepcopy(value)
            record["updated_at"] = _now()
            await self._commit(collection)
            return copy.deepcopy(record)
    
    async def _increment(self, collection: str, record_id: str, field: str, delta: int) -> Optional[int]:
        async with self._lock:
            record = self._data[collection].get(record_id)
            if record is None:
                return None
            record[field] = max(0, int(record.get(field) or 0) + delta)
            await self._commit(collection)
            return record[field]
    
    def _bump(self, card_id: str, field: str, delta: int):
        """Adjust a card counter; callers hold the lock."""
        card = self._data["cards"].get(card_id)
        if card is not None:
            card[field] = max(0, int(card.get(field) or 0) + delta)
    
    # User operations
    async def create_user(self, user_data: Dict) -> Dict:
        email = user_data["email"].lower()
        _stamp(user_data, "created_at", "updated_at")
        async with self._lock:
            if email in self._email_index:
                raise ValueError(f"User with email '{email}' already exists")
            self._data["users"][user_data["id"]] = copy.deepcopy(user_data)
            self._email_index[email] = user_data["id"]
            await self._commit("users")
            return copy.deepcopy(user_data)
    
    async def get_user(self, user_id: str) -> Optional[Dict]:
        return self._get("users", user_id)
    
    async def get_user_by_email(self, email: str) -> Optional[Dict]:
        user_id = self._email_index.get(email.lower())
        return self._get("users", user_id) if user_id else None
    
    async def update_user(self, user_id: str, updates: Dict) -> Optional[Dict]:
        return await self._update("users", user_id, updates)
    
    # Workspace operations
    async def create_workspace(self, workspace_data: Dict) -> Dict:
        return await self._insert("workspaces", workspace_data)
    
    async def get_workspace(self, workspace_id: str) -> Optional[Dict]:
        return self._get("workspaces", workspace_id)
    
    async def list_workspaces_for_user(self, user_id: str) -> List[Dict]:
        workspaces = [
            copy.deepcopy(ws) for ws in self._data["workspaces"].values()
            if ws.get("owner_id") == user_id or user_id in ws.get("member_ids", [])
        ]
        return _newest_first(workspaces)
    
    async def update_workspace(self, workspace_id: str, updates: Dict) -> Optional[Dict]:
        return await self._update("workspaces", workspace_id, updates)
    
    async def delete_workspace(self, workspace_id: str) -> List[Dict]:
        async with self._lock:
            if self._data["workspaces"].pop(workspace_id, None) is None:
                return []
            documents = self._data["documents"]
            doomed = [doc_id for doc_id, doc in documents.items() if doc.get("workspace_id") == workspace_id]
            removed = [documents.pop(doc_id) for doc_id in doomed]
            notes = self._data["notes"]
            for note_id in [n_id for n_id, note in notes.items() if note.get("workspace_id") == workspace_id]:
                del notes[note_id]
            await self._commit("workspaces", "documents", "notes")
        logger.debug(f"Deleted workspace {workspace_id} with {len(removed)} documents")
        return removed
    
    # Document operations
    async def create_document(self, doc_data: Dict) -> Dict:
        return await self._insert("documents", doc_data)
    
    async def get_document(self, doc_id: str) -> Optional[Dict]:
        return self._get("documents", doc_id)
    
    async def list_documents(self, workspace_id: str) -> List[Dict]:
        docs = [
            copy.deepcopy(doc) for doc in self._data["documents"].values()
            if doc.get("workspace_id") == workspace_id
        ]
        return _newest_first(docs)
    
    async def update_document(self, doc_id: str, updates: Dict) -> Optional[Dict]:
        return await self._update("documents", doc_id, updates)
    
    async def delete_document(self, doc_id: str) -> bool:
        async with self._lock:
            if self._data["documents"].pop(doc_id, None) is None:
                return False
            await self._commit("documents")
            return True
    
    async def increment_document_counter(self, doc_id: str, field: str, delta: int = 1) -> Optional[int]:
        return await self._increment("documents", doc_id, field, delta)
    
    # Knowledge card operations
    async def create_card(self, card_data: Dict) -> Dict:
        return await self._insert("cards", card_data)
    
    async def get_card(self, card_id: str) -> Optional[Dict]:
        return self._get("cards", card_id)
    
    async def get_cards(self, card_ids: Iterable[str]) -> Dict[str, Dict]:
        cards = self._data["cards"]
        return {card_id: copy.deepcopy(cards[card_id]) for card_id in card_ids if card_id in cards}
    
    async def list_cards(
        self,
        visibility: Optional[str] = None,
        author_id: Optional[str] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None
    ) -> List[Dict]:
        tag = tag.lower() if tag else None
        matches = []
        for card in self._data["cards"].values():
            if visibility and card.get("visibility") != visibility:
                continue
            if author_id and card.get("author_id") != author_id:
                continue
            if category and card.get("category") != category:
                continue
            if tag and tag not in card.get("tags", []):
                continue
            matches.append(copy.deepcopy(card))
        return _newest_first(matches)
    
    async def update_card(self, card_id: str, updates: Dict) -> Optional[Dict]:
        return await self._update("cards", card_id, updates)
    
    async def delete_card(self, card_id: str) -> bool:
        async with self._lock:
            if self._data["cards"].pop(card_id, None) is None:
                return False
            interactions = self._data["interactions"]
            for row_id in [i for i, row in interactions.items() if row["card_id"] == card_id]:
                row = interactions.pop(row_id)
                self._interaction_index.pop((row["user_id"], row["card_id"], row["type"]), None)
            await self._commit("cards", "interactions")
            return True
    
    async def increment_card_counter(self, card_id: str, field: str, delta: int = 1) -> Optional[int]:
        return await self._increment("cards", card_id, field, delta)
    
    # Like / bookmark operations
    async def create_interaction(self, interaction_data: Dict, counter_field: Optional[str] = None) -> Dict:
        key = (interaction_data["user_id"], interaction_data["card_id"], interaction_data["type"])
        _stamp(interaction_data, "created_at")
        async with self._lock:
            if key in self._interaction_index:
                raise DuplicateInteractionError(f"Interaction already exists: {key}")
            self._data["interactions"][interaction_data["id"]] = copy.deepcopy(interaction_data)
            self._interaction_index[key] = interaction_data["id"]
            if counter_field:
                self._bump(interaction_data["card_id"], counter_field, 1)
            await self._commit("interactions", "cards")
            return copy.deepcopy(interaction_data)
    
    async def get_interaction(self, interaction_id: str) -> Optional[Dict]:
        return self._get("interactions", interaction_id)
    
    async def find_interaction(self, user_id: str, card_id: str, interaction_type: str) -> Optional[Dict]:
        row_id = self._interaction_index.get((user_id, card_id, interaction_type))
        return self._get("interactions", row_id) if row_id else None
    
    async def delete_interaction(self, interaction_id: str, counter_field: Optional[str] = None) -> bool:
        async with self._lock:
            row = self._data["interactions"].pop(interaction_id, None)
            if row is None:
                return False
            self._interaction_index.pop((row["user_id"], row["card_id"], row["type"]), None)
            if counter_field:
                self._bump(row["card_id"], counter_field, -1)
            await self._commit("interactions", "cards")
            return True
    
    async def list_interactions(
        self,
        user_id: Optional[str] = None,
        card_id: Optional[str] = None,
        interaction_type: Optional[str] = None
    ) -> List[Dict]:
        rows = [
            copy.deepcopy(row) for row in self._data["interactions"].values()
            if (user_id is None or row["user_id"] == user_id)
            and (card_id is None or row["card_id"] == card_id)
            and (interaction_type is None or row["type"] == interaction_type)
        ]
        return _newest_first(rows)
    
    # Analytics operations
    async def create_analytics_log(self, log_data: Dict) -> Dict:
        _stamp(log_data, "timestamp")
        async with self._lock:
            self._data["analytics_logs"][log_data["id"]] = copy.deepcopy(log_data)
            await self._commit("analytics_logs")
            return copy.deepcopy(log_data)
    
    async def list_analytics_logs(
        self,
        user_id: Optional[str] = None,
        action_types: Optional[Iterable[str]] = None,
        since: Optional[str] = None
    ) -> List[Dict]:
        actions = set(action_types) if action_types is not None else None
        cutoff = _parse(since) if since else None
        logs = []
        for log in self._data["analytics_logs"].values():
            if user_id is not None and log.get("user_id") != user_id:
                continue
            if actions is not None and log.get("action_type") not in actions:
                continue
            if cutoff is not None and _parse(log.get("timestamp")) < cutoff:
                continue
            logs.append(copy.deepcopy(log))
        return _newest_first(logs, field="timestamp")
    
    # Notification operations
    async def create_notification(self, notification_data: Dict) -> Dict:
        return await self._insert("notifications", notification_data)
    
    async def get_notification(self, notification_id: str) -> Optional[Dict]:
        return self._get("notifications", notification_id)
    
    async def list_notifications(self, user_id: str, read: Optional[bool] = None) -> List[Dict]:
        notifications = [
            copy.deepcopy(n) for n in self._data["notifications"].values()
            if n["user_id"] == user_id and (read is None or n.get("read", False) == read)
        ]
        return _newest_first(notifications)
    
    async def update_notification(self, notification_id: str, updates: Dict) -> Optional[Dict]:
        return await self._update("notifications", notification_id, updates)
    
    async def mark_all_notifications_read(self, user_id: str, read_at: str) -> int:
        modified = 0
        async with self._lock:
            for notification in self._data["notifications"].values():
                if notification["user_id"] == user_id and not notification.get("read"):
                    notification["read"] = True
                    notification["read_at"] = read_at
                    notification["updated_at"] = read_at
                    modified += 1
            if modified:
                await self._commit("notifications")
        return modified
    
    async def delete_notification(self, notification_id: str) -> bool:
        async with self._lock:
            if self._data["notifications"].pop(notification_id, None) is None:
                return False
            await self._commit("notifications")
            return True
    
    async def delete_read_notifications(self, user_id: str) -> int:
        async with self._lock:
            notifications = self._data["notifications"]
            doomed = [n_id for n_id, n in notifications.items() if n["user_id"] == user_id and n.get("read")]
            for n_id in doomed:
                del notifications[n_id]
            if doomed:
                await self._commit("notifications")
        return len(doomed)
    
    # Note operations
    async def create_note(self, note_data: Dict) -> Dict:
        return await self._insert("notes", note_data)
    
    async def get_note(self, note_id: str) -> Optional[Dict]:
        return self._get("notes", note_id)
    
    async def list_notes(self, workspace_ids: Iterable[str], include_archived: bool = False) -> List[Dict]:
        workspace_ids = set(workspace_ids)
        notes = [
            copy.deepcopy(note) for note in self._data["notes"].values()
            if note.get("workspace_id") in workspace_ids
            and (include_archived or not note.get("is_archived"))
        ]
        notes = _newest_first(notes, field="updated_at")
        # stable sort keeps recency order inside each group
        return sorted(notes, key=lambda note: not note.get("is_pinned"))
    
    async def update_note(self, note_id: str, updates: Dict) -> Optional[Dict]:
        return await self._update("notes", note_id, updates)
    
    async def delete_note(self, note_id: str) -> bool:
        async with self._lock:
            if self._data["notes"].pop(note_id, None) is None:
                return False
            await self._commit("notes")
            return True
    
    # Maintenance
    async def purge_expired(self, analytics_before: str, read_notifications_before: str) -> Dict[str, int]:
        analytics_cutoff = _parse(analytics_before)
        notification_cutoff = _parse(read_notifications_before)
        async with self._lock:
            logs = self._data["analytics_logs"]
            expired_logs = [
                log_id for log_id, log in logs.items()
                if _parse(log.get("timestamp")) < analytics_cutoff
            ]
            for log_id in expired_logs:
                del logs[log_id]
            
            notifications = self._data["notifications"]
            expired_notifications = [
                n_id for n_id, n in notifications.items()
                if n.get("read") and _parse(n.get("read_at") or n.get("created_at")) < notification_cutoff
            ]
            for n_id in expired_notifications:
                del notifications[n_id]
            
            if expired_logs or expired_notifications:
                await self._commit("analytics_logs", "notifications")
        
        return {
            "analytics_logs": len(expired_logs),
            "notifications": len(expired_notifications),
        }
    
    async def reconcile_card_counters(self, counter_fields: Dict[str, str]) -> Dict[str, Dict[str, int]]:
        corrected: Dict[str, Dict[str, int]] = {}
        async with self._lock:
            actual: Dict[Tuple[str, str], int] = {}
            for row in self._data["interactions"].values():
                key = (row["card_id"], row["type"])
                actual[key] = actual.get(key, 0) + 1
            
            now = _now()
            for card_id, card in self._data["cards"].items():
                fixes = {
                    field: actual.get((card_id, interaction_type), 0)
                    for interaction_type, field in counter_fields.items()
                    if card.get(field, 0) != actual.get((card_id, interaction_type), 0)
                }
                if fixes:
                    card.update(fixes)
                    card["updated_at"] = now
                    corrected[card_id] = fixes
            if corrected:
                await self._commit("cards")
        return corrected
