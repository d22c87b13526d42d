import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_CATALOG", "false")

import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from epharmacy.main import app
from epharmacy.infrastructure.database import Base, get_db, import_models
from epharmacy.domain.auth.repository import UserRepository
from epharmacy.domain.auth.models import User
from epharmacy.domain.catalog.service import CatalogService

TEST_DATABASE_URL = "sqlite+aiosqlite://"

import_models()


@pytest.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
async def seeded_db(db: AsyncSession) -> AsyncSession:
    """Database with the reference symptoms and medications loaded."""
    await CatalogService(db).seed_catalog()
    return db


@pytest.fixture(scope="function")
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Test client with database dependency override."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def test_user(db: AsyncSession) -> User:
    return await UserRepository(db).create({
        "username": "testuser",
        "email": "test@example.com",
        "password": "testpassword123",
        "full_name": "Test User",
    })


@pytest.fixture(scope="function")
async def other_user(db: AsyncSession) -> User:
    return await UserRepository(db).create({
        "username": "otheruser",
        "email": "other@example.com",
        "password": "otherpassword123",
        "full_name": "Other User",
    })


@pytest.fixture(scope="function")
async def admin_user(db: AsyncSession) -> User:
    return await UserRepository(db).create({
        "username": "admin",
        "email": "admin@example.com",
        "password": "adminpassword123",
        "full_name": "Admin User",
        "is_admin": True,
    })


async def login(client: AsyncClient, username: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


@pytest.fixture(scope="function")
async def user_headers(client: AsyncClient, test_user: User) -> dict:
    token = await login(client, "testuser", "testpassword123")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
async def other_headers(client: AsyncClient, other_user: User) -> dict:
    token = await login(client, "otheruser", "otherpassword123")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
async def admin_headers(client: AsyncClient, admin_user: User) -> dict:
    token = await login(client, "admin", "adminpassword123")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def sample_symptom_report() -> dict:
    return {
        "main_symptom": "Headache",
        "additional_symptoms": [],
        "duration": "1-3 days",
        "severity": 5,
        "details": "Started after a long day at the screen",
    }


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    for marker, description in (
        ("unit", "mark test as a unit test"),
        ("integration", "mark test as an integration test"),
        ("auth", "mark test as authentication related"),
        ("catalog", "mark test as catalog related"),
        ("prescriptions", "mark test as prescription related"),
        ("orders", "mark test as order related"),
        ("ai", "mark test as AI collaborator related"),
    ):
        config.addinivalue_line("markers", f"{marker}: {description}")
