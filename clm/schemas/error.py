"""Standardized error response schema."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error body for every non-2xx response."""

    success: bool = False
    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: Any | None = Field(None, description="Extra context, omitted when empty")


class RouteNotFoundResponse(ErrorResponse):
    model_config = ConfigDict(populate_by_name=True)

    available_routes: list[str] = Field(alias="availableRoutes")
