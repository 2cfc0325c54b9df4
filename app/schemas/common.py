from typing import Optional, List, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper — used by all list endpoints
class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# Error body returned by the booking payment handlers
class ErrorResponse(BaseModel):
    error: str


class MessageResponse(BaseModel):
    message: str


def paginate(data: list, total: int, page: int, limit: int) -> dict:
    """Build the PaginatedResponse payload; total_pages is ceil(total / limit)."""
    return dict(
        data=data,
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )
