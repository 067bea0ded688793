"""
Data Transfer Objects (DTOs) for API layer.
Separates API contracts from the stored records in ``models``.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any

from ..models.card import Visibility
from ..models.interaction import ActionType


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: str
    password: str


class PreferencesRequest(BaseModel):
    favorite_topics: List[str] = Field(default_factory=list)


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    preferences: Optional[PreferencesRequest] = None


class WorkspaceCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class WorkspaceMemberRequest(BaseModel):
    user_id: str


class DocumentLinkRequest(BaseModel):
    """Register a document hosted elsewhere (e.g. object storage URL)."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    file_url: str
    file_name: str
    file_type: str = "application/octet-stream"
    file_size: int = Field(0, ge=0)
    tags: List[str] = Field(default_factory=list)


class CardCreateRequest(BaseModel):
    title: str = Field(..., max_length=200)
    content: str = Field(..., max_length=10000)
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = Field(None, max_length=100)
    visibility: Visibility = Visibility.PUBLIC


class CardUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = Field(None, max_length=10000)
    tags: Optional[List[str]] = None
    category: Optional[str] = Field(None, max_length=100)
    visibility: Optional[Visibility] = None


class NoteCreateRequest(BaseModel):
    """A note without workspace_id lands in the caller's Personal workspace."""
    title: str = Field(..., max_length=200)
    content: str = Field("", max_length=20000)
    tags: List[str] = Field(default_factory=list)
    workspace_id: Optional[str] = None
    is_pinned: bool = False


class NoteUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = Field(None, max_length=20000)
    tags: Optional[List[str]] = None
    is_pinned: Optional[bool] = None
    is_archived: Optional[bool] = None


class AnalyticsLogRequest(BaseModel):
    action_type: ActionType
    card_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SuggestRequest(BaseModel):
    # Blank values are answered with MISSING_FIELDS rather than a 422
    title: Optional[str] = None
    content: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class SummarizeResponse(BaseModel):
    """Flat response of the summarize endpoint."""
    success: bool = True
    summary: str
    points: List[str]
    keywords: List[str]


class ErrorResponseDTO(BaseModel):
    """Error response DTO."""
    success: bool = False
    error: str
    code: Optional[str] = None
    path: Optional[str] = None
    request_id: Optional[str] = None
