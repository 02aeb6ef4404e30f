import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the whole application."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    # Statement timings are logged by clm.db.base; silence SQLAlchemy's own echo.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
