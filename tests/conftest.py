import os
import uuid
from datetime import UTC, datetime, timedelta

# Route every module-level engine to an in-memory database before app imports.
os.environ["DATABASE_URL"] = "sqlite+pysqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JWT_ALGORITHM", "HS256")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.models  # noqa: F401,E402
from app.config import settings  # noqa: E402
from app.container import container  # noqa: E402
from app.db import Base, get_db  # noqa: E402
from app.services.device_identity import DeviceIdentityProvider, InMemoryIdentityStore  # noqa: E402


class RecordingDispatcher:
    """Collects telemetry payloads instead of queueing them."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.analytics_events: list[dict] = []
        self.app_logs: list[dict] = []

    def analytics(self, payload: dict) -> bool:
        if self.fail:
            raise RuntimeError("queue unavailable")
        self.analytics_events.append(payload)
        return True

    def app_log(self, payload: dict) -> bool:
        if self.fail:
            raise RuntimeError("queue unavailable")
        self.app_logs.append(payload)
        return True


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture()
def identity():
    return DeviceIdentityProvider(InMemoryIdentityStore("device-test-1"))


@pytest.fixture(autouse=True)
def _container_overrides(dispatcher, identity):
    with container.telemetry_dispatcher.override(dispatcher), container.device_identity.override(identity):
        yield


def make_token(user_id: str, roles: list[str] | None = None) -> str:
    payload = {
        "sub": user_id,
        "roles": roles or [],
        "exp": int((datetime.now(UTC) + timedelta(hours=1)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _auth_headers(user_id: str | None = None, roles: list[str] | None = None) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id or str(uuid.uuid4()), roles)}"}


@pytest.fixture()
def user_headers():
    return _auth_headers("user-1")


@pytest.fixture()
def admin_headers():
    return _auth_headers("admin-1", [settings.admin_role])


@pytest.fixture()
def client(db_session):
    from app.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def auth_headers():
    return _auth_headers
