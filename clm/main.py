import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from clm.api.exception_handlers import register_exception_handlers
from clm.api.routers import system
from clm.api.router import api_router
from clm.core.config import settings
from clm.core.logging import configure_logging
from clm.db.base import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database(
        settings.sqlalchemy_url,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
    )
    app.state.database = database
    logger.info("CLM backend started (environment=%s)", settings.environment)
    try:
        yield
    finally:
        database.dispose()
        logger.info("CLM backend stopped")


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title="CLM Automation API",
        version=settings.app_version,
        lifespan=lifespan,
    )

    if settings.frontend_url:
        parsed = urlparse(settings.frontend_url)
        origin = f"{parsed.scheme}://{parsed.netloc}"
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[origin],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(system.router)
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
