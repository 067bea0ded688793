"""
User notifications.

Interaction side effects create notifications through ``notify_in_background``;
reading, marking and deleting are owner-only.
"""
from datetime import datetime, timezone
from typing import Dict, Optional

from .background import BackgroundTaskQueue
from .database import DatabaseInterface
from ..api.exceptions import NotificationNotFoundError, PermissionDeniedError
from ..core.logging_config import get_logger
from ..models.notification import MAX_MESSAGE_LENGTH, Notification, NotificationType
from ..utils.pagination import paginate
from ..utils.validators import new_id, validate_id

logger = get_logger(__name__)


class NotificationService:
    def __init__(self, db: DatabaseInterface, queue: Optional[BackgroundTaskQueue] = None):
        self.db = db
        self.queue = queue
    
    async def create(
        self,
        user_id: str,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
        related_card_id: Optional[str] = None,
        related_user_id: Optional[str] = None
    ) -> Dict:
        notification = Notification(
            id=new_id(),
            user_id=user_id,
            message=message[:MAX_MESSAGE_LENGTH],
            type=notification_type,
            related_card_id=related_card_id,
            related_user_id=related_user_id
        )
        return await self.db.create_notification(notification.model_dump(mode="json"))
    
    def notify_in_background(
        self,
        user_id: str,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
        related_card_id: Optional[str] = None,
        related_user_id: Optional[str] = None
    ) -> bool:
        """Queue a notification; failures are logged by the queue, never raised."""
        async def _write():
            await self.create(user_id, message, notification_type, related_card_id, related_user_id)
        
        if self.queue is None:
            logger.warning(f"No background queue, notification for {user_id} dropped")
            return False
        return self.queue.submit(f"notify:{NotificationType(notification_type).value}", _write)
    
    async def list_for_user(self, user_id: str, read: Optional[bool] = None, page: int = 1, limit: int = 20) -> Dict:
        notifications = await self.db.list_notifications(user_id, read=read)
        unread = notifications if read is False else await self.db.list_notifications(user_id, read=False)
        items, pagination = paginate(notifications, page, limit)
        return {
            "notifications": items,
            "unread_count": len(unread),
            "pagination": pagination,
        }
    
    async def _owned(self, notification_id: str, user_id: str) -> Dict:
        validate_id(notification_id, "notification ID")
        notification = await self.db.get_notification(notification_id)
        if not notification:
            raise NotificationNotFoundError()
        if notification["user_id"] != user_id:
            raise PermissionDeniedError("Not authorized to access this notification")
        return notification
    
    async def mark_read(self, notification_id: str, user_id: str) -> Dict:
        notification = await self._owned(notification_id, user_id)
        if notification.get("read"):
            return notification
        return await self.db.update_notification(notification_id, {
            "read": True,
            "read_at": datetime.now(timezone.utc).isoformat()
        })
    
    async def mark_all_read(self, user_id: str) -> int:
        modified = await self.db.mark_all_notifications_read(user_id, datetime.now(timezone.utc).isoformat())
        logger.debug(f"Marked {modified} notifications read for {user_id}")
        return modified
    
    async def delete(self, notification_id: str, user_id: str) -> None:
        await self._owned(notification_id, user_id)
        await self.db.delete_notification(notification_id)
    
    async def delete_read(self, user_id: str) -> int:
        deleted = await self.db.delete_read_notifications(user_id)
        logger.debug(f"Deleted {deleted} read notifications for {user_id}")
        return deleted
