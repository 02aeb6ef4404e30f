"""Global exception handlers that map exceptions to the uniform error envelope."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clm.api.route_index import describe_routes
from clm.core.config import settings
from clm.errors import (
    INTERNAL_ERROR,
    ROUTE_NOT_FOUND,
    VALIDATION_ERROR,
    DomainValidationError,
    DuplicateResourceError,
    NotFoundError,
)
from clm.schemas.error import ErrorResponse, RouteNotFoundResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def domain_validation_error_handler(
    _request: Request, exc: DomainValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(error=str(exc), code=exc.code),
    )


def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed or missing input is a 400, not FastAPI's default 422."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    message = "; ".join(f"{d['field']}: {d['message']}" for d in details)
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(
            error=f"Invalid request: {message}", code=VALIDATION_ERROR, details=details
        ),
    )


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        ErrorResponse(error=str(exc), code=exc.code),
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        ErrorResponse(error=str(exc), code=exc.code),
    )


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unmatched routes (and methods) answer with the list of available routes."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _error_response(
            status.HTTP_404_NOT_FOUND,
            RouteNotFoundResponse(
                error="Route not found",
                code=ROUTE_NOT_FOUND,
                available_routes=list(describe_routes(request.app)),
            ),
        )
    return _error_response(
        exc.status_code,
        ErrorResponse(error=str(exc.detail), code=f"HTTP_{exc.status_code}"),
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(
            error="Internal server error",
            code=INTERNAL_ERROR,
            details=None if settings.is_production else str(exc),
        ),
    )


def register_exception_handlers(app):
    """Register exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainValidationError, domain_validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
