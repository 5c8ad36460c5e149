"""
Response envelope helpers shared by all routers.

Every body is ``{"success": ..., "data"?, "message"?, "pagination"?}``.
"""

from typing import Any, Optional


def success(data: Any = None, message: Optional[str] = None, pagination: Optional[dict] = None) -> dict:
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    return body


def error(message: str) -> dict:
    return {"success": False, "message": message}


def paginate(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit
    }


def page_skip(page: int, limit: int) -> int:
    return (page - 1) * limit
