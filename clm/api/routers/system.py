from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from clm.api.deps import get_database
from clm.api.route_index import describe_routes
from clm.core.config import settings
from clm.db.base import Database
from clm.schemas.health import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
def health(database: Database = Depends(get_database)):
    """Service and database health."""
    db_health = database.health_check()
    return HealthResponse(
        status="healthy" if db_health["healthy"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
        database="connected" if db_health["healthy"] else "disconnected",
        version=settings.app_version,
        error=db_health.get("error"),
    )


@router.get("/api-docs")
def api_docs(request: Request):
    """API documentation."""
    return {
        "message": "CLM Automation API Documentation",
        "version": settings.app_version,
        "endpoints": describe_routes(request.app),
    }
