from pydantic import BaseModel, Field
from typing import Optional, List


class DocumentSummary(BaseModel):
    content: str
    key_points: List[str] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
    sentiment: str = "neutral"  # positive, neutral, negative


class Document(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    file_url: str  # Local storage key or remote http(s) URL
    file_name: str
    file_type: str  # Declared MIME type (e.g. application/pdf)
    file_size: int = 0  # File size in bytes
    extracted_text: Optional[str] = None  # Cached text, filled lazily
    summary: Optional[DocumentSummary] = None
    tags: List[str] = Field(default_factory=list)
    workspace_id: str
    author_id: str
    view_count: int = 0
    download_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
