"""Shared test fixtures and configuration."""
import os

# Configure the app before it is imported: in-memory database, no startup tasks
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STARTUP_TASKS_ENABLED"] = "false"
os.environ["EXPIRY_SWEEP_INTERVAL_SECONDS"] = "0"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("RATE_LIMIT_STORAGE_URI", None)
os.environ.pop("CRON_SECRET", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from globalpoll.main import app  # noqa: E402
from globalpoll.db.base import Base  # noqa: E402
from globalpoll.api.deps import get_db  # noqa: E402
from globalpoll.core import rate_limit  # noqa: E402
from globalpoll.core.cache import global_cache  # noqa: E402
from globalpoll.core.security import create_access_token  # noqa: E402
from globalpoll.services.poll import create_poll  # noqa: E402


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def fresh_vote_limiter(monkeypatch):
    """Give every test its own in-memory vote limiter."""
    limiter = rate_limit.InMemoryRateLimiter()
    monkeypatch.setattr(rate_limit, "vote_limiter", limiter)
    yield limiter


@pytest.fixture(autouse=True)
def clear_cache():
    """Cached poll views must not leak between tests."""
    global_cache.clear()
    yield
    global_cache.clear()


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a new database session for a test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with a test database."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    """Generate a valid admin JWT token."""
    return create_access_token({"is_admin": True})


@pytest.fixture
def admin_client(client, admin_token):
    """Create a test client with admin cookie already set."""
    client.cookies.set("admin_token", admin_token)
    return client


@pytest.fixture
def active_poll(db_session):
    """An active poll created through the service layer."""
    return create_poll(db_session, "Should cities ban cars downtown?", category="politics")


@pytest.fixture
def headers_for():
    """Build request headers that make a request come from a given IP."""
    def _headers(ip: str, user_agent: str = "pytest-browser") -> dict:
        return {"X-Forwarded-For": ip, "User-Agent": user_agent}
    return _headers
