"""
Pagination and sorting utilities
"""
from sqlalchemy.orm import Query
from typing import Tuple, List, Any, Dict, Optional
from app.core.config import settings


def paginate(
    query: Query,
    page: int = 1,
    limit: Optional[int] = None
) -> Tuple[List[Any], int]:
    """
    Paginate SQLAlchemy query

    Args:
        query: SQLAlchemy query object
        page: Page number (1-indexed)
        limit: Items per page (defaults to DEFAULT_PAGE_SIZE)

    Returns:
        Tuple of (items, total_count)
    """
    page, limit = get_pagination_params(page, limit)

    # Get total count
    total = query.order_by(None).count()

    # Calculate offset
    offset = (page - 1) * limit

    # Get items
    items = query.limit(limit).offset(offset).all()

    return items, total


def get_pagination_params(
    page: int = 1,
    limit: Optional[int] = None
) -> Tuple[int, int]:
    """
    Validate and return pagination parameters

    Args:
        page: Page number
        limit: Items per page

    Returns:
        Tuple of (validated_page, validated_limit)
    """
    if limit is None:
        limit = settings.DEFAULT_PAGE_SIZE

    # Validate and limit
    page = max(1, page)
    limit = min(max(1, limit), settings.MAX_PAGE_SIZE)

    return page, limit


def apply_sort(
    query: Query,
    sort: Optional[str],
    allowed: Dict[str, Any],
    default: str
) -> Query:
    """
    Order ``query`` by a "field" / "-field" expression

    ``allowed`` maps public field names to columns. camelCase names are
    accepted as well ("-publishedAt" == "-published_at"). Unknown fields
    fall back to ``default``.
    """
    expression = (sort or default).strip()
    descending = expression.startswith("-")
    field = _snake_case(expression.lstrip("-+"))

    column = allowed.get(field)
    if column is None:
        if expression == default:
            raise ValueError(f"Default sort field '{default}' is not allowed")
        return apply_sort(query, default, allowed, default)

    return query.order_by(column.desc() if descending else column.asc())


def _snake_case(name: str) -> str:
    return "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in name).lstrip("_")
