from pydantic import BaseModel, Field
from typing import Optional, List


class Workspace(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    member_ids: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
