"""Pytest configuration and fixtures."""

import os
import time
from collections.abc import Generator
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-unit-tests")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("GITHUB_CLIENT_ID", "test-client-id")
os.environ.setdefault("GITHUB_CLIENT_SECRET", "test-client-secret")

TEST_JWT_SECRET = os.environ["JWT_SECRET"]
TEST_USER_ID = "550e8400-e29b-41d4-a716-446655440000"

PROFILE_DEFAULTS: dict[str, Any] = {
    "company": None,
    "website": None,
    "location": None,
    "bio": None,
    "status": None,
    "github_username": None,
    "skills": [],
    "social": {},
    "experience": [],
    "education": [],
}


def create_test_token(
    user_id: str = TEST_USER_ID,
    exp_offset: int = 3600,
    secret: str = TEST_JWT_SECRET,
    algorithm: str = "HS256",
) -> str:
    """Create a test token.

    Args:
        user_id: Identity embedded under ``user.id``.
        exp_offset: Seconds from now for expiration (negative for expired).
        secret: Signing secret.
        algorithm: Signing algorithm.

    Returns:
        str: Encoded token.
    """
    now = int(time.time())
    payload = {
        "user": {"id": user_id},
        "exp": now + exp_offset,
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


class FakeStore:
    """In-memory stand-in for DocumentStore.

    Rows are matched by equality on every filter key. Each call is
    recorded in ``calls`` as ``(method, args)``.
    """

    def __init__(self, defaults: dict[str, Any] | None = None) -> None:
        self.rows: list[dict[str, Any]] = []
        self.defaults = defaults or {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    @property
    def writes(self) -> list[tuple[str, tuple[Any, ...]]]:
        return [call for call in self.calls if call[0] not in ("find_one", "find_many")]

    def _match(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        return [row for row in self.rows if all(str(row.get(k)) == str(v) for k, v in filters.items())]

    def _new_row(self, doc: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        row = {"id": str(uuid4()), **deepcopy(self.defaults), **deepcopy(doc), "created_at": now, "updated_at": now}
        self.rows.append(row)
        return deepcopy(row)

    async def find_one(self, filters: dict[str, Any]) -> dict[str, Any] | None:
        self.calls.append(("find_one", (filters,)))
        found = self._match(filters)
        return deepcopy(found[0]) if found else None

    async def find_many(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        self.calls.append(("find_many", (filters,)))
        return deepcopy(self._match(filters or {}))

    async def create(self, doc: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create", (doc,)))
        return self._new_row(doc)

    async def create_if_absent(self, doc: dict[str, Any], on_conflict: str) -> dict[str, Any] | None:
        self.calls.append(("create_if_absent", (doc, on_conflict)))
        if self._match({on_conflict: doc[on_conflict]}):
            return None
        return self._new_row(doc)

    async def upsert(self, doc: dict[str, Any], on_conflict: str) -> dict[str, Any]:
        self.calls.append(("upsert", (doc, on_conflict)))
        found = self._match({on_conflict: doc[on_conflict]})
        if not found:
            return self._new_row(doc)
        found[0].update(deepcopy(doc))
        return deepcopy(found[0])

    async def update_one(self, filters: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any] | None:
        self.calls.append(("update_one", (filters, patch)))
        found = self._match(filters)
        if not found:
            return None
        found[0].update(deepcopy(patch))
        return deepcopy(found[0])

    async def delete_one(self, filters: dict[str, Any]) -> bool:
        self.calls.append(("delete_one", (filters,)))
        found = self._match(filters)
        self.rows = [row for row in self.rows if row not in found]
        return bool(found)


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    get_settings.cache_clear()


@pytest.fixture
def user_store() -> FakeStore:
    """Provide an empty in-memory users table."""
    return FakeStore()


@pytest.fixture
def profile_store() -> FakeStore:
    """Provide an empty in-memory profiles table."""
    return FakeStore(defaults=PROFILE_DEFAULTS)


@pytest.fixture
def client(user_store: FakeStore, profile_store: FakeStore) -> Generator[TestClient, None, None]:
    """Provide a test client whose stores are in memory.

    Args:
        user_store: In-memory users table.
        profile_store: In-memory profiles table.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.api.deps import get_profile_store, get_user_store
    from src.main import app

    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_profile_store] = lambda: profile_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Token header for TEST_USER_ID."""
    return {"x-auth-token": create_test_token()}


@pytest.fixture
def make_token() -> Any:
    """Provide the test token factory."""
    return create_test_token
