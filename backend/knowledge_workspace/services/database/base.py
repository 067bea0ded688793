"""
Abstract base class for database adapters.
All database implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Iterable
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class DatabaseInterface(ABC):
    """
    Abstract interface for database operations.
    All database adapters must implement these methods.
    This allows plug-and-play database support without changing business logic.

    Records are plain dicts keyed by ``id``. Counter updates and the
    unique interaction insert are atomic within one adapter instance.
    """
    
    # User operations
    @abstractmethod
    async def create_user(self, user_data: Dict) -> Dict:
        """Create a new user record."""
        pass
    
    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[Dict]:
        """Get a user by ID."""
        pass
    
    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[Dict]:
        """Get a user by (case-insensitive) e-mail address."""
        pass
    
    @abstractmethod
    async def update_user(self, user_id: str, updates: Dict) -> Optional[Dict]:
        """Update a user."""
        pass
    
    # Workspace operations
    @abstractmethod
    async def create_workspace(self, workspace_data: Dict) -> Dict:
        """Create a new workspace record."""
        pass
    
    @abstractmethod
    async def get_workspace(self, workspace_id: str) -> Optional[Dict]:
        """Get a workspace by ID."""
        pass
    
    @abstractmethod
    async def list_workspaces_for_user(self, user_id: str) -> List[Dict]:
        """Get workspaces the user owns or is a member of."""
        pass
    
    @abstractmethod
    async def update_workspace(self, workspace_id: str, updates: Dict) -> Optional[Dict]:
        """Update a workspace."""
        pass
    
    @abstractmethod
    async def delete_workspace(self, workspace_id: str) -> List[Dict]:
        """Delete a workspace with its documents and notes; returns the deleted documents."""
        pass
    
    # Document operations
    @abstractmethod
    async def create_document(self, doc_data: Dict) -> Dict:
        """Create a new document record."""
        pass
    
    @abstractmethod
    async def get_document(self, doc_id: str) -> Optional[Dict]:
        """Get a document by ID."""
        pass
    
    @abstractmethod
    async def list_documents(self, workspace_id: str) -> List[Dict]:
        """Get all documents of a workspace, newest first."""
        pass
    
    @abstractmethod
    async def update_document(self, doc_id: str, updates: Dict) -> Optional[Dict]:
        """Update a document."""
        pass
    
    @abstractmethod
    async def delete_document(self, doc_id: str) -> bool:
        """Delete a document."""
        pass
    
    @abstractmethod
    async def increment_document_counter(self, doc_id: str, field: str, delta: int = 1) -> Optional[int]:
        """Atomically add ``delta`` to a document counter, floored at zero."""
        pass
    
    # Knowledge card operations
    @abstractmethod
    async def create_card(self, card_data: Dict) -> Dict:
        """Create a new knowledge card."""
        pass
    
    @abstractmethod
    async def get_card(self, card_id: str) -> Optional[Dict]:
        """Get a card by ID."""
        pass
    
    @abstractmethod
    async def get_cards(self, card_ids: Iterable[str]) -> Dict[str, Dict]:
        """Get several cards at once, keyed by ID. Missing IDs are skipped."""
        pass
    
    @abstractmethod
    async def list_cards(
        self,
        visibility: Optional[str] = None,
        author_id: Optional[str] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None
    ) -> List[Dict]:
        """Get cards matching every given filter, newest first."""
        pass
    
    @abstractmethod
    async def update_card(self, card_id: str, updates: Dict) -> Optional[Dict]:
        """Update a card."""
        pass
    
    @abstractmethod
    async def delete_card(self, card_id: str) -> bool:
        """Delete a card and its likes/bookmarks."""
        pass
    
    @abstractmethod
    async def increment_card_counter(self, card_id: str, field: str, delta: int = 1) -> Optional[int]:
        """Atomically add ``delta`` to a card counter, floored at zero."""
        pass
    
    # Like / bookmark operations
    @abstractmethod
    async def create_interaction(self, interaction_data: Dict, counter_field: Optional[str] = None) -> Dict:
        """
        Insert a like/bookmark row.
        When counter_field is given, the card's counter is raised in the same write.

        Raises:
            DuplicateInteractionError: If (user_id, card_id, type) already exists
        """
        pass
    
    @abstractmethod
    async def get_interaction(self, interaction_id: str) -> Optional[Dict]:
        """Get a like/bookmark row by ID."""
        pass
    
    @abstractmethod
    async def find_interaction(self, user_id: str, card_id: str, interaction_type: str) -> Optional[Dict]:
        """Get the row for a (user, card, type) triple, if any."""
        pass
    
    @abstractmethod
    async def delete_interaction(self, interaction_id: str, counter_field: Optional[str] = None) -> bool:
        """Delete a like/bookmark row, lowering counter_field on its card in the same write."""
        pass
    
    @abstractmethod
    async def list_interactions(
        self,
        user_id: Optional[str] = None,
        card_id: Optional[str] = None,
        interaction_type: Optional[str] = None
    ) -> List[Dict]:
        """Get like/bookmark rows matching every given filter, newest first."""
        pass
    
    # Analytics operations
    @abstractmethod
    async def create_analytics_log(self, log_data: Dict) -> Dict:
        """Append an analytics event."""
        pass
    
    @abstractmethod
    async def list_analytics_logs(
        self,
        user_id: Optional[str] = None,
        action_types: Optional[Iterable[str]] = None,
        since: Optional[str] = None
    ) -> List[Dict]:
        """Get analytics events matching every given filter, newest first."""
        pass
    
    # Notification operations
    @abstractmethod
    async def create_notification(self, notification_data: Dict) -> Dict:
        """Create a notification."""
        pass
    
    @abstractmethod
    async def get_notification(self, notification_id: str) -> Optional[Dict]:
        """Get a notification by ID."""
        pass
    
    @abstractmethod
    async def list_notifications(self, user_id: str, read: Optional[bool] = None) -> List[Dict]:
        """Get a user's notifications, newest first."""
        pass
    
    @abstractmethod
    async def update_notification(self, notification_id: str, updates: Dict) -> Optional[Dict]:
        """Update a notification."""
        pass
    
    @abstractmethod
    async def mark_all_notifications_read(self, user_id: str, read_at: str) -> int:
        """Mark every unread notification of a user as read; returns how many changed."""
        pass
    
    @abstractmethod
    async def delete_notification(self, notification_id: str) -> bool:
        """Delete a notification."""
        pass
    
    @abstractmethod
    async def delete_read_notifications(self, user_id: str) -> int:
        """Delete every read notification of a user; returns how many were removed."""
        pass
    
    # Note operations
    @abstractmethod
    async def create_note(self, note_data: Dict) -> Dict:
        """Create a note."""
        pass
    
    @abstractmethod
    async def get_note(self, note_id: str) -> Optional[Dict]:
        """Get a note by ID."""
        pass
    
    @abstractmethod
    async def list_notes(self, workspace_ids: Iterable[str], include_archived: bool = False) -> List[Dict]:
        """Get notes of the given workspaces, pinned first, then most recently updated."""
        pass
    
    @abstractmethod
    async def update_note(self, note_id: str, updates: Dict) -> Optional[Dict]:
        """Update a note."""
        pass
    
    @abstractmethod
    async def delete_note(self, note_id: str) -> bool:
        """Delete a note."""
        pass
    
    # Maintenance
    @abstractmethod
    async def purge_expired(self, analytics_before: str, read_notifications_before: str) -> Dict[str, int]:
        """Drop analytics events and read notifications older than the given ISO timestamps."""
        pass
    
    @abstractmethod
    async def reconcile_card_counters(self, counter_fields: Dict[str, str]) -> Dict[str, Dict[str, int]]:
        """
        Recount interaction rows and reset drifted card counters in one write.
        
        Args:
            counter_fields: Interaction type -> card counter field
        
        Returns:
            card_id -> corrected counter values, for the cards that changed
        """
        pass
    
    @abstractmethod
    async def initialize(self):
        """Initialize database (create tables/collections, indexes, etc.)."""
        pass
    
    @abstractmethod
    async def close(self):
        """Close database connection."""
        pass
