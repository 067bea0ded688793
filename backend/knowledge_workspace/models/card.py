from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    SHARED = "shared"  # Readable by any signed-in user


class CardRating(BaseModel):
    average: float = 0.0
    count: int = 0


class KnowledgeCard(BaseModel):
    id: str
    title: str
    content: str
    author_id: str
    tags: List[str] = Field(default_factory=list)
    category: str
    visibility: Visibility = Visibility.PUBLIC
    view_count: int = 0
    like_count: int = 0
    bookmark_count: int = 0
    rating: CardRating = Field(default_factory=CardRating)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
