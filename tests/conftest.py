import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_clm.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["ENVIRONMENT"] = "test"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import Session

from clm.db.base import Database
from clm.main import app


@pytest.fixture(scope="function")
def database():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_database = Database(test_db_url)

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_database.engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    try:
        yield test_database
    finally:
        # Dispose the engine to close all connections
        test_database.dispose()

        # Clean up - remove test database file and directory
        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def db_session(database: Database):
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client(database: Database, db_session: Session):
    """Create a test client with database dependency overrides."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from clm.api.deps import get_database, get_db

    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def contract_payload() -> dict:
    """Minimal valid body for POST /api/contracts."""
    return {
        "title": "Master Services Agreement",
        "counterparty_name": "Acme Corp",
        "owner_user_id": "u1",
    }


@pytest.fixture(scope="function")
def make_contract(db: Session):
    """Create contracts through the service layer, the same way the API does."""
    from clm.services.contract import create_contract

    def _make(**overrides):
        data = {
            "title": "Test Contract",
            "counterparty_name": "Test Counterparty",
            "owner_user_id": "owner-1",
        }
        data.update(overrides)
        return create_contract(db, data, user_id="tester")

    return _make
