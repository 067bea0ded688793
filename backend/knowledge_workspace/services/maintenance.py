"""
Periodic maintenance: retention purge and counter reconciliation.

Counters on cards are updated atomically on every like/bookmark, so
reconciliation only has work to do after crashes or manual data edits.
"""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from .database import DatabaseInterface
from ..core.config import (
    ANALYTICS_RETENTION_DAYS,
    MAINTENANCE_INTERVAL_SECONDS,
    READ_NOTIFICATION_RETENTION_DAYS,
)
from ..core.logging_config import get_logger
from ..models.interaction import InteractionType

logger = get_logger(__name__)

_COUNTER_FIELDS = {
    InteractionType.LIKE.value: "like_count",
    InteractionType.BOOKMARK.value: "bookmark_count",
}


class MaintenanceJob:
    def __init__(
        self,
        db: DatabaseInterface,
        interval_seconds: int = MAINTENANCE_INTERVAL_SECONDS,
        analytics_retention_days: int = ANALYTICS_RETENTION_DAYS,
        notification_retention_days: int = READ_NOTIFICATION_RETENTION_DAYS
    ):
        self.db = db
        self.interval_seconds = interval_seconds
        self.analytics_retention_days = analytics_retention_days
        self.notification_retention_days = notification_retention_days
        self._task: Optional[asyncio.Task] = None
    
    async def purge_expired(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """Drop analytics events past retention and read notifications past expiry."""
        now = now or datetime.now(timezone.utc)
        removed = await self.db.purge_expired(
            analytics_before=(now - timedelta(days=self.analytics_retention_days)).isoformat(),
            read_notifications_before=(now - timedelta(days=self.notification_retention_days)).isoformat()
        )
        if any(removed.values()):
            logger.info(f"Purged expired records: {removed}")
        return removed
    
    async def reconcile_counters(self) -> int:
        """
        Reset like/bookmark counters that drifted from the interaction rows.
        
        Returns:
            Number of cards corrected
        """
        corrected = await self.db.reconcile_card_counters(_COUNTER_FIELDS)
        for card_id, fixes in corrected.items():
            logger.warning(f"Counter drift on card {card_id}: {fixes}")
        return len(corrected)
    
    async def run_once(self) -> Dict[str, int]:
        removed = await self.purge_expired()
        corrected = await self.reconcile_counters()
        return {**removed, "cards_reconciled": corrected}
    
    async def _loop(self):
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Maintenance run failed: {e}", exc_info=True)
            await asyncio.sleep(self.interval_seconds)
    
    def start(self):
        if self._task is None:
            self._task = asyncio.create_task(self._loop(), name="maintenance")
            logger.info(f"Maintenance job scheduled every {self.interval_seconds}s")
    
    async def stop(self):
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
