"""
Validation utilities - Pure validation functions.
"""
import uuid
from typing import Optional

from ..api.exceptions import InvalidIdError, MissingFieldsError


def validate_id(value: str, label: str = "ID") -> str:
    """
    Validate a resource identifier (UUID string).
    
    Raises:
        InvalidIdError: If the value is not a UUID
    """
    try:
        uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise InvalidIdError(f"Invalid {label}: {value}")
    return str(value)


def require_fields(message: Optional[str] = None, **fields: Optional[str]) -> None:
    """
    Check that every named field is present and not blank.
    
    Raises:
        MissingFieldsError: Listing the missing field names
    """
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        raise MissingFieldsError(message or f"Missing required fields: {', '.join(missing)}")


def is_blank(text: Optional[str], min_length: int = 1) -> bool:
    """True when ``text`` trimmed is shorter than ``min_length``."""
    return text is None or len(text.strip()) < min_length


def new_id() -> str:
    """Generate a new resource identifier."""
    return str(uuid.uuid4())
