"""Response envelopes shared by every endpoint."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(page=page, limit=limit, total=total, totalPages=total_pages)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: T


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: List[T]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorBody(BaseModel):
    message: str
    code: str
    errors: Optional[List[FieldError]] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody


def paginated(items: list, page: int, limit: int, total: int) -> dict:
    return {
        "success": True,
        "data": items,
        "pagination": PaginationMeta.build(page, limit, total),
    }


def ok(data, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body
