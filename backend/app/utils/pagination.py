"""
Pagination Utility Module

Standard list parameters (page/limit/search/status/sort) shared by every
resource, plus helpers that apply them to a SQLAlchemy select.
"""
from typing import Any, Dict, List, Optional, Tuple
from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.core.exceptions import ValidationError

MAX_PAGE_SIZE = 100


class ListParams(BaseModel):
    """Standard list parameters"""
    page: int = 1
    limit: int = 10
    search: Optional[str] = None
    status: str = "all"
    sort_by: str = "created_date"
    sort_order: str = "DESC"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def descending(self) -> bool:
        return self.sort_order == "DESC"


def list_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
    search: Optional[str] = Query(None, max_length=250),
    status: str = Query("all", pattern="^(active|inactive|all)$"),
    sort_by: str = Query("created_date"),
    sort_order: str = Query("DESC"),
) -> ListParams:
    """FastAPI dependency building ListParams from the query string"""
    order = sort_order.upper()
    if order not in ("ASC", "DESC"):
        raise ValidationError("sort_order must be ASC or DESC", field="sort_order")
    return ListParams(
        page=page,
        limit=limit,
        search=search.strip() if search else None,
        status=status,
        sort_by=sort_by,
        sort_order=order,
    )


def paging_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
    search: Optional[str] = Query(None, max_length=250),
    sort_by: str = Query("created_date"),
    sort_order: str = Query("DESC"),
) -> ListParams:
    """
    list_params without the active/inactive `status` switch, for resources
    that only list active rows and use `status` as a column filter
    """
    return list_params(page=page, limit=limit, search=search, status="all", sort_by=sort_by, sort_order=sort_order)


def build_pagination(total: int, page: int, limit: int) -> Dict[str, Any]:
    """
    Pagination block of the response envelope.

    Args:
        total: Total count of all matching rows
        page: Current page number
        limit: Items per page
    """
    total_pages = (total + limit - 1) // limit if total > 0 else 0
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_previous": page > 1,
    }


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    limit: int = 10,
    count_query: Optional[Select] = None
) -> Tuple[List[Any], Dict[str, Any]]:
    """
    Apply limit/offset pagination to a SQLAlchemy query.

    Returns:
        (items, pagination) where pagination is the envelope block
    """
    page = max(1, page)
    limit = max(1, min(MAX_PAGE_SIZE, limit))

    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    items = list(result.scalars().all())

    return items, build_pagination(total, page, limit)
