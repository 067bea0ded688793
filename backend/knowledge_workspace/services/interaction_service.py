"""
Like / bookmark interactions.

Each (user, card, type) pair is either absent or present. Adding a
present pair or removing an absent one is an error, never a no-op.
Counter updates are atomic in the datastore and floored at zero; the
analytics event and the author notification are queued as best-effort
work.
"""
from typing import Dict, Optional

from .analytics_service import AnalyticsService
from .card_service import CardService, can_read
from .database import DatabaseInterface
from .notification_service import NotificationService
from ..api.exceptions import (
    DuplicateInteractionError,
    InteractionNotFoundError,
    InteractionStateError,
    PermissionDeniedError,
)
from ..core.logging_config import get_logger
from ..models.interaction import ActionType, BookmarkLike, InteractionType
from ..models.notification import NotificationType
from ..utils.pagination import paginate
from ..utils.validators import new_id, validate_id

logger = get_logger(__name__)

_COUNTER_FIELDS = {
    InteractionType.LIKE: "like_count",
    InteractionType.BOOKMARK: "bookmark_count",
}

_PAST_TENSE = {
    InteractionType.LIKE: "liked",
    InteractionType.BOOKMARK: "bookmarked",
}

_ERROR_CODES = {
    InteractionType.LIKE: ("ALREADY_LIKED", "NOT_LIKED"),
    InteractionType.BOOKMARK: ("ALREADY_BOOKMARKED", "NOT_BOOKMARKED"),
}

_MESSAGES = {
    InteractionType.LIKE: ('{name} liked your card "{title}"', NotificationType.LIKE),
    InteractionType.BOOKMARK: ('{name} bookmarked your card "{title}"', NotificationType.BOOKMARK),
}


class InteractionService:
    def __init__(
        self,
        db: DatabaseInterface,
        cards: CardService,
        notifications: NotificationService,
        analytics: AnalyticsService
    ):
        self.db = db
        self.cards = cards
        self.notifications = notifications
        self.analytics = analytics
    
    async def _counter(self, card_id: str, field: str) -> int:
        card = await self.db.get_card(card_id)
        return card.get(field, 0) if card else 0
    
    async def add(self, user: Dict, card_id: str, interaction_type: InteractionType) -> Dict:
        """
        Like or bookmark a card.
        
        Args:
            user: Acting user (needs ``id`` and ``name``)
            card_id: Target card
            interaction_type: like or bookmark
        
        Returns:
            The new row plus the card's updated counter
        
        Raises:
            CardNotFoundError: If the card does not exist
            InteractionStateError: ALREADY_LIKED / ALREADY_BOOKMARKED
        """
        card = await self.cards.require_card(card_id, user["id"])
        field = _COUNTER_FIELDS[interaction_type]
        row = BookmarkLike(id=new_id(), user_id=user["id"], card_id=card_id, type=interaction_type)
        try:
            created = await self.db.create_interaction(row.model_dump(mode="json"), counter_field=field)
        except DuplicateInteractionError:
            already, _ = _ERROR_CODES[interaction_type]
            raise InteractionStateError(f"Card already {_PAST_TENSE[interaction_type]}", code=already)
        count = await self._counter(card_id, field)
        
        self.analytics.record_in_background(user["id"], ActionType(interaction_type.value), card_id)
        if card["author_id"] != user["id"]:
            template, notification_type = _MESSAGES[interaction_type]
            self.notifications.notify_in_background(
                card["author_id"],
                template.format(name=user.get("name") or "Someone", title=card["title"]),
                notification_type,
                related_card_id=card_id,
                related_user_id=user["id"]
            )
        
        logger.debug(f"{user['id']} {_PAST_TENSE[interaction_type]} card {card_id} ({field}={count})")
        return {"interaction": created, field: count}
    
    async def remove(self, user: Dict, card_id: str, interaction_type: InteractionType) -> Dict:
        """
        Undo a like or bookmark.
        
        Raises:
            CardNotFoundError: If the card does not exist
            InteractionStateError: NOT_LIKED / NOT_BOOKMARKED
        """
        await self.cards.require_card(card_id, user["id"])
        _, missing = _ERROR_CODES[interaction_type]
        field = _COUNTER_FIELDS[interaction_type]
        row = await self.db.find_interaction(user["id"], card_id, interaction_type.value)
        if not row or not await self.db.delete_interaction(row["id"], counter_field=field):
            raise InteractionStateError(f"Card not {_PAST_TENSE[interaction_type]}", code=missing)
        return {field: await self._counter(card_id, field)}
    
    async def delete_by_id(self, user_id: str, interaction_id: str) -> Dict:
        """Remove one of the caller's own likes/bookmarks by row ID."""
        validate_id(interaction_id, "interaction ID")
        row = await self.db.get_interaction(interaction_id)
        if not row:
            raise InteractionNotFoundError()
        if row["user_id"] != user_id:
            raise PermissionDeniedError("Not authorized to delete this interaction")
        field = _COUNTER_FIELDS[InteractionType(row["type"])]
        if not await self.db.delete_interaction(interaction_id, counter_field=field):
            raise InteractionNotFoundError()
        return {"card_id": row["card_id"], "type": row["type"], field: await self._counter(row["card_id"], field)}
    
    async def list_cards(self, user_id: str, interaction_type: InteractionType, page: int = 1, limit: int = 20) -> Dict:
        """Cards the user liked or bookmarked, most recent first. Deleted or hidden cards are skipped."""
        rows = await self.db.list_interactions(user_id=user_id, interaction_type=interaction_type.value)
        cards_by_id = await self.db.get_cards(row["card_id"] for row in rows)
        entries = []
        for row in rows:
            card = cards_by_id.get(row["card_id"])
            if card and can_read(card, user_id):
                entries.append({**card, "interaction_id": row["id"], f"{_PAST_TENSE[interaction_type]}_at": row["created_at"]})
        items, pagination = paginate(entries, page, limit)
        return {"cards": items, "pagination": pagination}
    
    async def card_stats(self, card_id: str, user_id: Optional[str] = None) -> Dict:
        """Counts computed from interaction rows, not the cached counters."""
        card = await self.cards.require_card(card_id, user_id)
        rows = await self.db.list_interactions(card_id=card_id)
        likes = [row for row in rows if row["type"] == InteractionType.LIKE.value]
        bookmarks = [row for row in rows if row["type"] == InteractionType.BOOKMARK.value]
        return {
            "card_id": card_id,
            "like_count": len(likes),
            "bookmark_count": len(bookmarks),
            "view_count": card.get("view_count", 0),
            "has_liked": user_id is not None and any(row["user_id"] == user_id for row in likes),
            "has_bookmarked": user_id is not None and any(row["user_id"] == user_id for row in bookmarks),
        }
