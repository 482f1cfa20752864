"""Shared fixtures: a fresh database per test, users, tokens and an API client."""
import itertools
from typing import AsyncGenerator, Awaitable, Callable, Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from issuetrack.api.app import create_app
from issuetrack.api.auth import get_password_hash
from issuetrack.models.base import Database, DatabaseConfig, open_database
from issuetrack.models.user import User
from issuetrack.repositories.user import UserRepository
from tests.config import TEST_DATABASE_URL, TEST_PASSWORD
from tests.helpers import API, auth_headers


# bcrypt is slow on purpose; hash the shared password once
_HASHED_PASSWORD = get_password_hash(TEST_PASSWORD)


# ============================================================================
# Database
# ============================================================================


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A store handle with a freshly created schema."""
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'issuetrack.db'}"
    db = open_database(DatabaseConfig(url=url))
    await db.drop_all()
    await db.create_all()

    yield db

    await db.drop_all()
    await db.close()


@pytest_asyncio.fixture
async def make_user(database) -> Callable[..., Awaitable[User]]:
    """Factory creating users directly through the repository."""
    sequence = itertools.count(1)

    async def _make_user(name: Optional[str] = None, is_active: bool = True) -> User:
        n = next(sequence)
        async with database.session() as session:
            return await UserRepository(session).create(
                email=f"user{n}@example.com",
                hashed_password=_HASHED_PASSWORD,
                name=name or f"User {n}",
                is_active=is_active,
            )

    return _make_user


# ============================================================================
# API
# ============================================================================


@pytest_asyncio.fixture
async def client(database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app that uses the test database."""
    app = create_app(database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def owner(make_user) -> User:
    return await make_user("Owner")


@pytest_asyncio.fixture
async def owner_headers(owner) -> dict:
    return auth_headers(owner)


@pytest_asyncio.fixture
async def workspace(client, owner_headers) -> dict:
    """A workspace owned by ``owner``."""
    response = await client.post(f"{API}/workspaces", json={"name": "Acme"}, headers=owner_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest_asyncio.fixture
async def team(client, owner_headers, workspace) -> dict:
    """Team ``ENG`` in ``workspace``."""
    response = await client.post(
        f"{API}/workspaces/{workspace['id']}/teams",
        json={"name": "Engineering", "identifier": "ENG"},
        headers=owner_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest_asyncio.fixture
async def states(client, owner_headers, workspace, team) -> dict:
    """The team's workflow states keyed by name."""
    response = await client.get(
        f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/states",
        headers=owner_headers,
    )
    assert response.status_code == 200, response.text
    return {state["name"]: state for state in response.json()["data"]}


@pytest_asyncio.fixture
async def issues_url(workspace, team) -> str:
    return f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/issues"


@pytest_asyncio.fixture
async def add_member(client, owner_headers, workspace) -> Callable[..., Awaitable[dict]]:
    """Add a user to ``workspace`` with the given role."""

    async def _add_member(user: User, role: str = "member") -> dict:
        response = await client.post(
            f"{API}/workspaces/{workspace['id']}/members",
            json={"userId": str(user.id), "role": role},
            headers=owner_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _add_member
