"""
Pagination helpers shared by list endpoints.
"""
import math
from typing import Dict, List, Sequence, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def paginate(items: Sequence[T], page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Tuple[List[T], Dict[str, int]]:
    """
    Slice a list for the requested page.
    
    Args:
        items: Full, already ordered result list
        page: 1-based page number (values below 1 are treated as 1)
        limit: Page size, clamped to [1, MAX_PAGE_SIZE]
        
    Returns:
        (page items, pagination metadata)
    """
    page = max(1, page)
    limit = min(max(1, limit), MAX_PAGE_SIZE)
    start = (page - 1) * limit
    total = len(items)
    return list(items[start:start + limit]), {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }
