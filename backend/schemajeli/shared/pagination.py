"""
Pagination helpers for SchemaJeli list endpoints
"""
import math
from typing import Any, Dict, List, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def paginate(db: Session, stmt: Select, page: int, limit: int) -> Tuple[List, int]:
    """
    Apply pagination to a SQLAlchemy select statement

    Args:
        db: SQLAlchemy session
        stmt: Select statement (already filtered and ordered)
        page: Page number (1-indexed)
        limit: Number of items per page

    Returns:
        Tuple of (items, total_count)
    """
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    items = db.scalars(stmt.offset((page - 1) * limit).limit(limit)).all()

    return list(items), total


def total_pages(total: int, limit: int) -> int:
    """totalPages = ceil(total / limit)"""
    return math.ceil(total / limit) if limit > 0 else 0


def create_paginated_response(
    items: List[Any],
    total: int,
    page: int,
    limit: int,
) -> Dict[str, Any]:
    """
    Create the list envelope

    Args:
        items: Serialized items for the current page
        total: Total number of matching rows
        page: Current page number
        limit: Page size

    Returns:
        {"status": "success", "data": [...], "pagination": {...}}
    """
    return {
        "status": "success",
        "data": items,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": total_pages(total, limit),
        },
    }


def success_response(data: Any) -> Dict[str, Any]:
    """Single-item envelope"""
    return {"status": "success", "data": data}
