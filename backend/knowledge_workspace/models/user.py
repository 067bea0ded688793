from pydantic import BaseModel, Field
from typing import Optional, List


class UserPreferences(BaseModel):
    favorite_topics: List[str] = Field(default_factory=list)


class User(BaseModel):
    id: str
    name: str
    email: str
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class UserRecord(User):
    """Stored user row, including the password hash that is never returned."""
    password_hash: str
