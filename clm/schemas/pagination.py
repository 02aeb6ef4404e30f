import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))


class ApiResponse(BaseModel, Generic[T]):
    """Uniform success envelope."""

    success: bool = True
    data: T | None = None
    message: str | None = None
    count: int | None = None


class PaginatedResponse(ApiResponse[list[T]], Generic[T]):
    """Generic paginated response schema."""

    pagination: Pagination


class SearchResponse(ApiResponse[list[T]], Generic[T]):
    query: str


class FilterResponse(ApiResponse[list[T]], Generic[T]):
    filters: dict[str, Any]


class WindowedResponse(ApiResponse[list[T]], Generic[T]):
    days: int
