import logging
import time

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine (and its connection pool) for one application instance.

    Created on startup, disposed on shutdown. Sessions are handed out per
    request through the API dependencies.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 20,
        pool_timeout: int = 5,
        pool_recycle: int = 30,
    ):
        engine_kwargs = {"pool_pre_ping": True}
        if url.startswith("sqlite"):
            # SQLite (tests) cannot share connections across threads by default
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=0,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )

        self.engine = create_engine(url, **engine_kwargs)
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )
        _install_query_timing(self.engine)
        logger.info("Database engine created for %s", self.engine.url.render_as_string())

    def session(self) -> Session:
        return self.session_factory()

    def health_check(self) -> dict:
        """Run a trivial query; never raises."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("Database health check failed: %s", exc)
            return {"healthy": False, "error": str(exc)}
        return {"healthy": True}

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def _install_query_timing(engine) -> None:
    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def _log_duration(conn, cursor, statement, parameters, context, executemany):
        started = conn.info["query_start_time"].pop()
        duration_ms = (time.perf_counter() - started) * 1000
        logger.debug("Executed query in %.1fms: %s", duration_ms, statement[:100])

    @event.listens_for(engine, "handle_error")
    def _discard_timer(context):
        # after_cursor_execute does not run for a failed statement
        conn = context.connection
        if conn is None or context.cursor is None:
            return
        started = conn.info.get("query_start_time")
        if started:
            started.pop()
