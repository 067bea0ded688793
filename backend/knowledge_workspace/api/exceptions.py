"""
Custom exceptions for API layer.
Separates business exceptions from HTTP exceptions.

Services raise these; the gateway turns them into JSON error bodies
with the matching status code and machine-readable ``code``.
"""
from typing import Optional

from fastapi import HTTPException, status


class WorkspaceError(Exception):
    """Base class for business errors surfaced to API clients."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.message
        if code:
            self.code = code
        super().__init__(self.message)


class InvalidIdError(WorkspaceError):
    """Raised when a path or body identifier is malformed."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_ID"
    message = "Invalid ID"


class MissingFieldsError(WorkspaceError):
    """Raised when required request fields are blank."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "MISSING_FIELDS"
    message = "Required fields are missing"


class InvalidFileUrlError(WorkspaceError):
    """Raised when a linked document does not point at an http(s) URL."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_URL"
    message = "file_url must be an http:// or https:// URL"


class EmptyFileError(WorkspaceError):
    """Raised when an uploaded or fetched file has no bytes at all."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "FILE_EMPTY"
    message = "File is empty"


class NoReadableContentError(WorkspaceError):
    """Raised when a document has nothing that can be summarized."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "NO_CONTENT"
    message = "No readable content found in this file"


class FileTooLargeError(WorkspaceError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    code = "FILE_TOO_LARGE"
    message = "File is too large"


class InteractionStateError(WorkspaceError):
    """Raised on like/bookmark transitions that are not allowed (already present / absent)."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INTERACTION"
    message = "Invalid interaction"


class AuthenticationError(WorkspaceError):
    """Raised when a request carries no usable credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "Authentication required"


class PermissionDeniedError(WorkspaceError):
    """Raised when the caller may not touch the requested resource."""
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "Forbidden"


class NotFoundError(WorkspaceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Resource not found"


class DocumentNotFoundError(NotFoundError):
    code = "DOCUMENT_NOT_FOUND"
    message = "Document not found"


class CardNotFoundError(NotFoundError):
    code = "CARD_NOT_FOUND"
    message = "Card not found"


class WorkspaceNotFoundError(NotFoundError):
    code = "WORKSPACE_NOT_FOUND"
    message = "Workspace not found"


class NotificationNotFoundError(NotFoundError):
    code = "NOTIFICATION_NOT_FOUND"
    message = "Notification not found"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"
    message = "User not found"


class InteractionNotFoundError(NotFoundError):
    code = "INTERACTION_NOT_FOUND"
    message = "Interaction not found"


class NoteNotFoundError(NotFoundError):
    code = "NOTE_NOT_FOUND"
    message = "Note not found"


class ConflictError(WorkspaceError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "Resource already exists"


class AIServiceUnavailableError(WorkspaceError):
    """Raised only when AI is mandatory and no provider is configured."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "AI_NOT_CONFIGURED"
    message = "AI service is not configured"


class DuplicateInteractionError(Exception):
    """Raised by datastore adapters when a (user, card, type) row already exists."""
    pass


def handle_business_exception(e: Exception) -> HTTPException:
    """
    Convert business exceptions to HTTP exceptions.
    This keeps business logic clean of HTTP concerns.
    """
    if isinstance(e, WorkspaceError):
        return HTTPException(
            status_code=e.status_code,
            detail={"error": e.message, "code": e.code}
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": str(e), "code": "INTERNAL_ERROR"}
    )
