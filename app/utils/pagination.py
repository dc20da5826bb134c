# app/utils/pagination.py
"""Page/limit arithmetic shared by every interaction listing."""

import math
from typing import Dict


def normalize(page: int, limit: int) -> tuple[int, int]:
    """Floor page and limit at 1 so offsets are never negative and limit never zero."""
    return max(int(page or 1), 1), max(int(limit or 1), 1)


def offset(page: int, limit: int) -> int:
    page, limit = normalize(page, limit)
    return (page - 1) * limit


def paginate(page: int, limit: int, total: int) -> Dict[str, int]:
    """Build the pagination envelope for a listing of `total` rows."""
    page, limit = normalize(page, limit)
    total = max(int(total), 0)
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit),
    }
