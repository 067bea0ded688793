"""
Utility functions - Pure functions with no dependencies.
These can be used across all layers.
"""
from .pagination import paginate
from .tag_extractor import extract_keywords, normalize_tags, suggest_category, suggest_tags
from .validators import is_blank, new_id, require_fields, validate_id

__all__ = [
    "paginate",
    "extract_keywords",
    "normalize_tags",
    "suggest_category",
    "suggest_tags",
    "is_blank",
    "new_id",
    "require_fields",
    "validate_id",
]
