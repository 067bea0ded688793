"""
Knowledge card CRUD with visibility gating.
"""
from typing import Dict, List, Optional

from .analytics_service import AnalyticsService
from .database import DatabaseInterface
from ..api.exceptions import CardNotFoundError, MissingFieldsError, PermissionDeniedError
from ..core.logging_config import get_logger
from ..models.card import KnowledgeCard, Visibility
from ..models.interaction import ActionType
from ..utils.pagination import paginate
from ..utils.tag_extractor import normalize_tags, suggest_category
from ..utils.validators import is_blank, new_id, validate_id

logger = get_logger(__name__)

_EDITABLE_FIELDS = ("title", "content", "tags", "category", "visibility")


def can_read(card: Dict, viewer_id: Optional[str]) -> bool:
    """
    Visibility rules: public cards are open to everyone, shared cards to
    any signed-in user, private cards only to their author.
    """
    visibility = card.get("visibility", Visibility.PUBLIC.value)
    if visibility == Visibility.PUBLIC.value:
        return True
    if viewer_id is None:
        return False
    if visibility == Visibility.SHARED.value:
        return True
    return card.get("author_id") == viewer_id


class CardService:
    def __init__(self, db: DatabaseInterface, analytics: Optional[AnalyticsService] = None):
        self.db = db
        self.analytics = analytics
    
    async def require_card(self, card_id: str, viewer_id: Optional[str] = None) -> Dict:
        """
        Load a card the viewer may read.
        
        Raises:
            InvalidIdError: If card_id is malformed
            CardNotFoundError: If missing or hidden from the viewer
        """
        validate_id(card_id, "card ID")
        card = await self.db.get_card(card_id)
        if not card or not can_read(card, viewer_id):
            raise CardNotFoundError()
        return card
    
    async def create_card(
        self,
        author_id: str,
        title: str,
        content: str,
        tags: Optional[List[str]] = None,
        category: Optional[str] = None,
        visibility: Visibility = Visibility.PUBLIC
    ) -> Dict:
        if is_blank(title) or is_blank(content):
            raise MissingFieldsError("Title and content are required")
        tags = normalize_tags(tags)
        card = KnowledgeCard(
            id=new_id(),
            title=title.strip(),
            content=content,
            author_id=author_id,
            tags=tags,
            category=category.strip() if category and category.strip() else suggest_category(title, content, tags),
            visibility=visibility
        )
        created = await self.db.create_card(card.model_dump(mode="json"))
        logger.info(f"Card created: {created['id']} by {author_id}")
        if self.analytics:
            self.analytics.record_in_background(author_id, ActionType.CREATE, created["id"])
        return created
    
    async def view_card(self, card_id: str, viewer_id: Optional[str] = None) -> Dict:
        """Read a card, counting the view and logging it for signed-in readers."""
        card = await self.require_card(card_id, viewer_id)
        card["view_count"] = await self.db.increment_card_counter(card_id, "view_count", 1)
        if viewer_id and self.analytics:
            self.analytics.record_in_background(viewer_id, ActionType.VIEW, card_id)
        return card
    
    async def list_public(
        self,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Dict:
        cards = await self.db.list_cards(visibility=Visibility.PUBLIC.value, category=category, tag=tag)
        items, pagination = paginate(cards, page, limit)
        return {"cards": items, "pagination": pagination}
    
    async def list_mine(self, author_id: str, page: int = 1, limit: int = 20) -> Dict:
        cards = await self.db.list_cards(author_id=author_id)
        items, pagination = paginate(cards, page, limit)
        return {"cards": items, "pagination": pagination}
    
    async def _authored(self, card_id: str, user_id: str) -> Dict:
        validate_id(card_id, "card ID")
        card = await self.db.get_card(card_id)
        if not card:
            raise CardNotFoundError()
        if card["author_id"] != user_id:
            raise PermissionDeniedError("Only the author can modify this card")
        return card
    
    async def update_card(self, card_id: str, user_id: str, updates: Dict) -> Dict:
        await self._authored(card_id, user_id)
        changes = {key: value for key, value in updates.items() if key in _EDITABLE_FIELDS and value is not None}
        if "tags" in changes:
            changes["tags"] = normalize_tags(changes["tags"])
        if "visibility" in changes:
            changes["visibility"] = Visibility(changes["visibility"]).value
        for field in ("title", "content", "category"):
            if field in changes and is_blank(changes[field]):
                raise MissingFieldsError(f"{field} cannot be blank")
        updated = await self.db.update_card(card_id, changes)
        if self.analytics:
            self.analytics.record_in_background(user_id, ActionType.UPDATE, card_id)
        return updated
    
    async def delete_card(self, card_id: str, user_id: str) -> None:
        await self._authored(card_id, user_id)
        await self.db.delete_card(card_id)
        logger.info(f"Card deleted: {card_id}")
        if self.analytics:
            self.analytics.record_in_background(user_id, ActionType.DELETE, card_id)
