"""
Page-based pagination parameters and response metadata.
"""

import math
from typing import Annotated, Any, Sequence, TypeVar

from fastapi import Query
from pydantic import BaseModel

import models.schemas as schemas

ModelT = TypeVar("ModelT", bound=BaseModel)

Page = Annotated[int, Query(ge=1, description="1-based page number")]
PageLimit = Annotated[
    int, Query(ge=1, le=100, description="Maximum number of records per page")
]
TopLimit = Annotated[
    int, Query(ge=1, le=50, description="Maximum number of records to return")
]


def page_offset(page: int, limit: int) -> int:
    """
    Translate a 1-based page into a row offset.

    Args:
        page: Page number (1-based)
        limit: Records per page

    Returns:
        Number of rows to skip
    """
    return (page - 1) * limit


def build_pagination(total: int, page: int, limit: int) -> schemas.Pagination:
    """Build the ``pagination`` block returned by list endpoints."""
    return schemas.Pagination(
        total=total,
        page=page,
        limit=limit,
        pages=math.ceil(total / limit) if limit else 0,
    )


def paginated_response(
    items: Sequence[Any],
    item_schema: type[ModelT],
    total: int,
    page: int,
    limit: int,
    message: str = "",
) -> "schemas.PaginatedResponse[ModelT]":
    """
    Wrap a page of ORM rows in the paginated success envelope.

    Args:
        items: Rows of the current page
        item_schema: Pydantic schema each row is validated into
        total: Total matching rows across all pages
        page: Current page (1-based)
        limit: Records per page
        message: Optional human-readable message

    Returns:
        PaginatedResponse with ``data`` and ``pagination``
    """
    return schemas.PaginatedResponse[item_schema](  # type: ignore[valid-type]
        message=message,
        data=[item_schema.model_validate(item) for item in items],
        pagination=build_pagination(total, page, limit),
    )
