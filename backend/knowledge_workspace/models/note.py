from pydantic import BaseModel, Field
from typing import Optional, List


class Note(BaseModel):
    id: str
    title: str = Field(max_length=200)
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    workspace_id: str
    author_id: str
    is_pinned: bool = False
    is_archived: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
