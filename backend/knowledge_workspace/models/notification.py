from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional

MAX_MESSAGE_LENGTH = 500


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SYSTEM = "system"
    LIKE = "like"
    BOOKMARK = "bookmark"
    COMMENT = "comment"


class Notification(BaseModel):
    id: str
    user_id: str
    message: str = Field(max_length=MAX_MESSAGE_LENGTH)
    type: NotificationType = NotificationType.INFO
    related_card_id: Optional[str] = None
    related_user_id: Optional[str] = None
    read: bool = False
    read_at: Optional[str] = None  # Drives the read-notification expiry
    created_at: Optional[str] = None
