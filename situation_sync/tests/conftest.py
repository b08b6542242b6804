"""Shared fixtures: in-memory SQLite, mocked upstreams, no retry delay."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "prod")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "situation-sync-test-logs"))

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from situation_sync.core.config import settings  # noqa: E402
from situation_sync.models import Base  # noqa: E402


def sqlite_engine():
    """In-memory engine shared across threads, with working SAVEPOINTs."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


@pytest.fixture
def db():
    engine = sqlite_engine()
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(settings, "HTTP_RETRY_DELAY_SECONDS", 0)


@pytest.fixture
def mock_client():
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def _build(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build


@pytest.fixture
def unreachable_client(mock_client):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return mock_client(refuse)
