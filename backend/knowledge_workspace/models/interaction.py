from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class ActionType(str, Enum):
    VIEW = "view"
    LIKE = "like"
    BOOKMARK = "bookmark"
    SEARCH = "search"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SHARE = "share"
    LOGIN = "login"
    SIGNUP = "signup"


# Actions that count towards trending / personalized recommendations
ENGAGEMENT_ACTIONS = (ActionType.VIEW.value, ActionType.LIKE.value, ActionType.BOOKMARK.value)


class InteractionType(str, Enum):
    LIKE = "like"
    BOOKMARK = "bookmark"


class AnalyticsLog(BaseModel):
    id: str
    user_id: str
    action_type: ActionType
    card_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: str


class BookmarkLike(BaseModel):
    id: str
    user_id: str
    card_id: str
    type: InteractionType
    created_at: Optional[str] = None
