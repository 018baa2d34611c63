"""Offset pagination helpers shared by the list endpoints"""

import math

from sqlalchemy.orm import Query


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show `total` rows, `limit` at a time"""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def paginate(query: Query, page: int, limit: int) -> tuple[list, int]:
    """Run a filtered query for one page. Returns (rows, total_count)"""
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return rows, total


def page_envelope(data: list, total: int, page: int, limit: int) -> dict:
    return {
        "data": data,
        "total": total,
        "page": page,
        "totalPages": total_pages(total, limit),
    }
