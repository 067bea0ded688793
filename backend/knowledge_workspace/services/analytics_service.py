"""
Analytics event log.

Events are append-only; recommendation ranking reads them. Writes made
as a side effect of another action go through the background queue so
they can never fail that action.
"""
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .background import BackgroundTaskQueue
from .database import DatabaseInterface
from ..core.logging_config import get_logger
from ..models.interaction import ActionType, AnalyticsLog
from ..utils.pagination import paginate
from ..utils.validators import new_id

logger = get_logger(__name__)


class AnalyticsService:
    def __init__(self, db: DatabaseInterface, queue: Optional[BackgroundTaskQueue] = None):
        self.db = db
        self.queue = queue
    
    async def record(
        self,
        user_id: str,
        action_type: ActionType,
        card_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        timestamp: Optional[str] = None
    ) -> Dict:
        """Append an analytics event and return it."""
        log = AnalyticsLog(
            id=new_id(),
            user_id=user_id,
            action_type=ActionType(action_type),
            card_id=card_id,
            metadata=metadata or {},
            timestamp=timestamp or datetime.now(timezone.utc).isoformat()
        )
        return await self.db.create_analytics_log(log.model_dump(mode="json"))
    
    def record_in_background(
        self,
        user_id: str,
        action_type: ActionType,
        card_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Queue an analytics event; failures are logged by the queue, never raised."""
        # Stamp now so the event time does not depend on queue latency
        timestamp = datetime.now(timezone.utc).isoformat()
        
        async def _write():
            await self.record(user_id, action_type, card_id, metadata, timestamp)
        
        if self.queue is None:
            logger.warning(f"No background queue, analytics event '{action_type}' dropped")
            return False
        return self.queue.submit(f"analytics:{ActionType(action_type).value}", _write)
    
    async def list_logs(
        self,
        user_id: str,
        action_type: Optional[ActionType] = None,
        page: int = 1,
        limit: int = 20
    ) -> Dict:
        actions = [ActionType(action_type).value] if action_type else None
        logs = await self.db.list_analytics_logs(user_id=user_id, action_types=actions)
        items, pagination = paginate(logs, page, limit)
        return {"logs": items, "pagination": pagination}
    
    async def summary(self, user_id: str) -> Dict:
        """Per-action event counts for a user."""
        logs = await self.db.list_analytics_logs(user_id=user_id)
        counts = Counter(log["action_type"] for log in logs)
        return {
            "total": len(logs),
            "by_action": {action.value: counts.get(action.value, 0) for action in ActionType},
        }
