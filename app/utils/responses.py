"""
Utility functions for API responses
"""
from typing import Any, Optional, List, Dict
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from app.schemas.common import PaginationMeta


def error_response(
    error: str,
    detail: Any = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """
    Create error response

    Args:
        error: Error message
        detail: Optional error details
        status_code: HTTP status code
        headers: Extra response headers (e.g. WWW-Authenticate)

    Returns:
        JSONResponse object
    """
    response = {
        "ok": False,
        "error": error
    }

    if detail:
        response["detail"] = detail

    return JSONResponse(content=jsonable_encoder(response), status_code=status_code, headers=headers)


def paginated_response(
    data: List[Any],
    page: int,
    limit: int,
    total: int,
    **extra: Any
) -> Dict:
    """
    Create paginated response

    Args:
        data: List of items
        page: Current page number
        limit: Items per page
        total: Total number of items
        extra: Additional top-level keys (e.g. the parent genre)

    Returns:
        Dict with data and pagination meta
    """
    total_pages = (total + limit - 1) // limit  # Ceiling division

    meta = PaginationMeta(
        current_page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1
    )

    response = {
        "ok": True,
        "data": data,
        "meta": meta.model_dump()
    }
    response.update(extra)
    return response
