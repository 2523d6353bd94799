'''
Pytest configuration for the FastAPI application.

This file sets up fixtures for:
1. Forcing the application into TEST_MODE before any code is imported.
2. Providing a fresh in-memory database (and session) for each service test.
3. Providing a FastAPI TestClient whose lifespan builds its own in-memory database.
4. Providing instances of all service classes, pre-injected with the test db session.
'''

import pytest
import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# --- Force test configuration BEFORE the app (and its settings) is imported ---
os.environ["TEST_MODE"] = "True"
os.environ["CREATE_SCHEMA_ON_STARTUP"] = "True"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

# --- FastAPI & Testing Imports ---
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine

# --- Constant Imports ----
from tests.constants import (
    TEST_OWNER_ID,
    TEST_OTHER_OWNER_ID,
    TEST_ACTIVITY_ID,
    TEST_OWNER_EMAIL,
    TEST_OTHER_OWNER_EMAIL,
    TEST_PASSWORD,
    TEST_OWNER_TIMEZONE,
    TEST_ACTIVITY_NAME,
    TEST_ACTIVITY_COLOR,
)
from tests.database import factories

# --- Application Imports ---
from shared_schedule_backend.main import app
from shared_schedule_backend.common.config import settings
from shared_schedule_backend.core.snapshots import SnapshotHub
from shared_schedule_backend.database.engine import _engine_options
from shared_schedule_backend.database import models as db_models
from shared_schedule_backend.services.user_service import UserService
from shared_schedule_backend.services.activity_service import ActivityService
from shared_schedule_backend.services.schedule_service import ScheduleService
from shared_schedule_backend.services.share_service import ShareService
from shared_schedule_backend.services.auth_service import LoginService
from shared_schedule_backend.services.geo_service import GeoService


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Override the default 'anyio_backend' fixture.
    1. Forces the backend to 'asyncio'.
    2. Promotes the scope to 'session'.
    """
    return "asyncio"


@pytest.fixture(scope="function")
def mock_geo_service() -> GeoService:
    """Provides a mock GeoService instance."""
    mock_service = MagicMock(spec=GeoService)
    mock_service.get_timezone = AsyncMock(return_value="Europe/London")
    return mock_service


# --- 1. API Client Fixture ---

@pytest.fixture(scope="function")
def client(mock_geo_service: GeoService) -> TestClient:
    """
    1. Checks TEST_MODE so nothing ever touches the production database.
    2. Runs the app's lifespan, which creates a fresh in-memory database
       (and its tables) for every test.
    3. Replaces the IP geolocation service with a mock.
    """
    assert settings.TEST_MODE is True, \
        "TEST_MODE was not set to True! Check your .env file or environment."

    app.dependency_overrides[GeoService] = lambda: mock_geo_service

    # The 'with' block runs startup (engine + schema) and shutdown (dispose).
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def signup_and_login(
    client: TestClient,
    email: str,
    password: str = TEST_PASSWORD,
    timezone: str | None = None,
    display_name: str | None = None
) -> dict[str, str]:
    """Creates an account through the API and returns its bearer auth header."""
    payload = {"email": email, "password": password}
    if timezone:
        payload["timezone"] = timezone
    if display_name:
        payload["display_name"] = display_name

    response = client.post("/auth/signup", json=payload)
    assert response.status_code == 201, response.json()

    response = client.post("/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.json()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture(scope="function")
def owner_headers(client: TestClient) -> dict[str, str]:
    return signup_and_login(client, TEST_OWNER_EMAIL, timezone=TEST_OWNER_TIMEZONE, display_name="Owner")


@pytest.fixture(scope="function")
def other_owner_headers(client: TestClient) -> dict[str, str]:
    return signup_and_login(client, TEST_OTHER_OWNER_EMAIL, timezone="UTC", display_name="Other")


@pytest.fixture(scope="function")
def api_activity(client: TestClient, owner_headers: dict[str, str]) -> dict:
    """An activity created by the owner through the API."""
    response = client.post(
        "/activities/",
        json={"name": TEST_ACTIVITY_NAME, "color": TEST_ACTIVITY_COLOR},
        headers=owner_headers
    )
    assert response.status_code == 201, response.json()
    return response.json()


# --- 2. Function-Scoped Database Fixtures (For Service Tests) ---

@pytest.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """A brand new in-memory SQLite database with all tables created."""
    url = "sqlite+aiosqlite:///:memory:"
    engine = create_async_engine(url, **_engine_options(url))
    async with engine.begin() as conn:
        await conn.run_sync(db_models.Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a single database session for service-level tests.
    The factories add their rows to this session.
    """
    session = AsyncSession(db_engine, expire_on_commit=False, autoflush=False)
    factories.test_db_session = session
    try:
        yield session
    finally:
        factories.test_db_session = None
        await session.rollback()
        await session.close()


# --- 3. SERVICE FIXTURES ---

@pytest.fixture(scope="function")
def snapshot_hub() -> SnapshotHub:
    """A hub private to the test, so subscriptions never leak between tests."""
    return SnapshotHub()

@pytest.fixture(scope="function")
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db=db_session)

@pytest.fixture(scope="function")
def activity_service(db_session: AsyncSession) -> ActivityService:
    return ActivityService(db=db_session)

@pytest.fixture(scope="function")
def schedule_service(
    db_session: AsyncSession,
    activity_service: ActivityService,
    snapshot_hub: SnapshotHub
) -> ScheduleService:
    return ScheduleService(db=db_session, activity_service=activity_service, hub=snapshot_hub)

@pytest.fixture(scope="function")
def share_service(user_service: UserService, schedule_service: ScheduleService) -> ShareService:
    return ShareService(user_service=user_service, schedule_service=schedule_service)

@pytest.fixture(scope="function")
def login_service(user_service: UserService, mock_geo_service: GeoService) -> LoginService:
    return LoginService(user_service=user_service, geo_service=mock_geo_service)


# --- 4. SEEDED ROWS ---

@pytest.fixture(scope="function")
async def test_owner_orm(db_session: AsyncSession) -> db_models.Users:
    owner = factories.UserFactory(
        id=TEST_OWNER_ID,
        email=TEST_OWNER_EMAIL,
        display_name="Owner",
        timezone=TEST_OWNER_TIMEZONE,
    )
    await db_session.flush()
    return owner

@pytest.fixture(scope="function")
async def test_other_owner_orm(db_session: AsyncSession) -> db_models.Users:
    other = factories.UserFactory(
        id=TEST_OTHER_OWNER_ID,
        email=TEST_OTHER_OWNER_EMAIL,
        display_name="Other",
        timezone="UTC",
    )
    await db_session.flush()
    return other

@pytest.fixture(scope="function")
async def test_activity_orm(db_session: AsyncSession, test_owner_orm: db_models.Users) -> db_models.Activities:
    activity = factories.ActivityFactory(
        id=TEST_ACTIVITY_ID,
        owner_id=test_owner_orm.id,
        name=TEST_ACTIVITY_NAME,
        color=TEST_ACTIVITY_COLOR,
    )
    await db_session.flush()
    return activity
