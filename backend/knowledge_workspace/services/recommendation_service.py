"""
Recommendation aggregation: trending, personalized and related cards, and
tag/category suggestions.

Every operation is read-only and deterministic for a given
datastore state. Ties are broken by card ID so repeated calls return
the same order.
"""
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from .database import DatabaseInterface
from ..core.logging_config import get_logger
from ..models.card import Visibility
from ..models.interaction import ENGAGEMENT_ACTIONS
from ..utils.tag_extractor import suggest_category, suggest_tags
from ..utils.validators import require_fields

logger = get_logger(__name__)

# How many of the user's own recent events seed personalized results
PERSONALIZED_HISTORY = 50


class RecommendationService:
    def __init__(self, db: DatabaseInterface):
        self.db = db
    
    async def trending(self, days: int = 7, limit: int = 10, now: Optional[datetime] = None) -> List[Dict]:
        """
        Cards with the most view/like/bookmark events in the trailing window.
        
        Args:
            days: Window length in days
            limit: Maximum number of cards returned
            now: Reference time (defaults to the current UTC time)
        
        Returns:
            Public cards ordered by event count (desc) then card ID, each
            carrying a ``trend`` block with the per-action counts
        """
        now = now or datetime.now(timezone.utc)
        since = (now - timedelta(days=max(0, days))).isoformat()
        logs = await self.db.list_analytics_logs(action_types=ENGAGEMENT_ACTIONS, since=since)
        
        stats: Dict[str, Dict[str, int]] = defaultdict(lambda: {"views": 0, "likes": 0, "bookmarks": 0, "score": 0})
        for log in logs:
            card_id = log.get("card_id")
            if not card_id:
                continue
            entry = stats[card_id]
            entry[f"{log['action_type']}s"] += 1
            entry["score"] += 1
        
        ranked = sorted(stats.items(), key=lambda item: (-item[1]["score"], item[0]))
        cards = await self.db.get_cards(card_id for card_id, _ in ranked)
        
        results = []
        for card_id, trend in ranked:
            card = cards.get(card_id)
            if not card or card.get("visibility") != Visibility.PUBLIC.value:
                continue
            results.append({**card, "trend": dict(trend)})
            if len(results) >= limit:
                break
        
        logger.debug(f"Trending over {days}d: {len(stats)} candidate cards, returning {len(results)}")
        return results
    
    async def personalized(self, user_id: str, limit: int = 10) -> List[Dict]:
        """
        Public cards by other authors that share a tag or category with
        the user's recent engagement or favorite topics.
        
        Returns:
            Cards ordered by view_count desc, like_count desc, then ID
        """
        history = await self.db.list_analytics_logs(user_id=user_id, action_types=ENGAGEMENT_ACTIONS)
        history = history[:PERSONALIZED_HISTORY]
        seen_cards = await self.db.get_cards(log["card_id"] for log in history if log.get("card_id"))
        
        interest_tags = set()
        interest_categories = set()
        for card in seen_cards.values():
            interest_tags.update(card.get("tags", []))
            if card.get("category"):
                interest_categories.add(card["category"])
        
        user = await self.db.get_user(user_id)
        if user:
            favorite_topics = user.get("preferences", {}).get("favorite_topics", [])
            interest_tags.update(topic.lower() for topic in favorite_topics)
        
        if not interest_tags and not interest_categories:
            return []
        
        candidates = [
            card for card in await self.db.list_cards(visibility=Visibility.PUBLIC.value)
            if card["author_id"] != user_id
            and (interest_tags.intersection(card.get("tags", [])) or card.get("category") in interest_categories)
        ]
        candidates.sort(key=lambda c: (-c.get("view_count", 0), -c.get("like_count", 0), c["id"]))
        return candidates[:limit]
    
    async def related(self, card: Dict, limit: int = 5) -> List[Dict]:
        """
        Public cards sharing a tag or the category with ``card``.
        
        Returns:
            Cards other than ``card``, ordered by view_count desc, like_count desc, then ID
        """
        tags = set(card.get("tags", []))
        candidates = [
            other for other in await self.db.list_cards(visibility=Visibility.PUBLIC.value)
            if other["id"] != card["id"]
            and (tags.intersection(other.get("tags", [])) or (card.get("category") and other.get("category") == card["category"]))
        ]
        candidates.sort(key=lambda c: (-c.get("view_count", 0), -c.get("like_count", 0), c["id"]))
        return candidates[:max(0, limit)]
    
    def suggest(self, title: Optional[str], content: Optional[str], tags: Optional[List[str]] = None) -> Dict:
        """
        Suggest tags and a category for new content.
        
        Raises:
            MissingFieldsError: If title or content is blank
        """
        require_fields("Title and content are required", title=title, content=content)
        return {
            "suggested_tags": suggest_tags(title, content),
            "suggested_category": suggest_category(title, content, tags),
        }
