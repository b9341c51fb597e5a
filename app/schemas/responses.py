from typing import Any, Generic, TypeVar

from app.schemas.base import BaseSchema

T = TypeVar("T")


class PaginationMetaSchema(BaseSchema):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class ApiResponse(BaseSchema, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


class PaginatedApiResponse(ApiResponse[list[T]], Generic[T]):
    pagination: PaginationMetaSchema


class ErrorResponse(BaseSchema):
    success: bool = False
    message: str
    errors: list[Any] | None = None
