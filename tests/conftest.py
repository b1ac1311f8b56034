"""
Shared fixtures for the ledger API tests.

Each test gets its own in-memory SQLite database, injected in place of the
application's session dependency, with the system categories already seeded.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_async_session
from app.crud.category import seed_system_categories
from app.main import app
from app.models import category, income_source, transaction, user  # noqa: F401


class LedgerApi:
    """Thin helper around the HTTP client for building test fixtures."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def register(self, username: str, email: str, password: str = "secret123") -> dict:
        response = await self.client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        # Keep requests explicit about which user is acting
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['token']}"}

    async def category_id(self, headers: dict, name: str) -> int:
        response = await self.client.get("/api/categories", headers=headers)
        assert response.status_code == 200, response.text
        for item in response.json():
            if item["categoryName"] == name:
                return item["id"]
        raise AssertionError(f"category {name!r} not found")

    async def create_category(self, headers: dict, name: str, category_type: str = "EXPENSE", parent_id=None) -> dict:
        payload = {"categoryName": name, "categoryType": category_type}
        if parent_id is not None:
            payload["parentCategoryId"] = parent_id
        response = await self.client.post("/api/categories", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    async def create_source(self, headers: dict, name: str = "Main Bank", initial_balance: float = 0.0, source_type: str = "BANK") -> dict:
        response = await self.client.post(
            "/api/income-sources",
            json={"sourceName": name, "sourceType": source_type, "initialBalance": initial_balance},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    async def create_transaction(
        self,
        headers: dict,
        category_id: int,
        source_id: int,
        amount: float,
        transaction_type: str = "EXPENSE",
        transaction_date: str = "2024-03-15",
        description: str = "",
    ) -> dict:
        response = await self.client.post(
            "/api/transactions",
            json={
                "transactionDate": transaction_date,
                "transactionType": transaction_type,
                "amount": amount,
                "description": description,
                "categoryId": category_id,
                "sourceId": source_id,
            },
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    async with factory() as session:
        await seed_system_categories(session)

    yield factory

    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def api(client):
    return LedgerApi(client)


@pytest.fixture
async def alice(api):
    return await api.register("alice", "alice@example.com")


@pytest.fixture
async def bob(api):
    return await api.register("bob", "bob@example.com")
