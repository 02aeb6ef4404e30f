from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from clm.db.base import Database

ANONYMOUS_USER = "anonymous"


def get_database(request: Request) -> Database:
    """The Database opened by the application lifespan."""
    return request.app.state.database


def get_db(database: Database = Depends(get_database)):
    db: Session = database.session()
    try:
        yield db
    finally:
        db.close()


def get_user_id(x_user_id: str | None = Header(None)) -> str:
    """Caller identity recorded in the audit log, taken from the X-User-Id header."""
    return x_user_id or ANONYMOUS_USER
