"""Unit tests for IdentityService."""

import hashlib
from typing import Any
from uuid import UUID

import bcrypt
import pytest

from src.api.middleware.auth import TokenService
from src.api.middleware.error_handler import DuplicateIdentityError, NotFoundError, ValidationError
from src.services.identity_service import IdentityService

TEST_SECRET = "test-jwt-secret-for-unit-tests"


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret=TEST_SECRET)


@pytest.fixture
def identity_service(user_store: Any, tokens: TokenService) -> IdentityService:
    """Create IdentityService over an in-memory users table."""
    return IdentityService(user_store, tokens, bcrypt_rounds=4)


class TestRegister:
    """Tests for register method."""

    @pytest.mark.asyncio
    async def test_returns_token_for_new_identity(
        self, identity_service: IdentityService, user_store: Any, tokens: TokenService
    ) -> None:
        """Test registration returns a token that resolves to the stored identity."""
        token = await identity_service.register("Ada", "ada@example.com", "secret1")

        payload = tokens.verify(token)
        assert payload.user.id == user_store.rows[0]["id"]

    @pytest.mark.asyncio
    async def test_performs_exactly_one_write(self, identity_service: IdentityService, user_store: Any) -> None:
        """Test a successful registration writes once."""
        await identity_service.register("Ada", "ada@example.com", "secret1")

        assert len(user_store.writes) == 1

    @pytest.mark.asyncio
    async def test_stores_hash_not_password(self, identity_service: IdentityService, user_store: Any) -> None:
        """Test the stored password is a bcrypt hash of the raw password."""
        await identity_service.register("Ada", "ada@example.com", "secret1")

        stored = user_store.rows[0]["password"]
        assert stored != "secret1"
        assert bcrypt.checkpw(b"secret1", stored.encode())

    @pytest.mark.asyncio
    async def test_avatar_derived_from_email(self, identity_service: IdentityService, user_store: Any) -> None:
        """Test the avatar is the gravatar of the normalized email."""
        await identity_service.register("Ada", " Ada@Example.com ", "secret1")

        digest = hashlib.md5(b"ada@example.com").hexdigest()
        assert digest in user_store.rows[0]["avatar"]
        assert user_store.rows[0]["email"] == "ada@example.com"

    @pytest.mark.asyncio
    async def test_duplicate_email_fails_without_write(
        self, identity_service: IdentityService, user_store: Any
    ) -> None:
        """Test a registered email is rejected before anything is written."""
        await identity_service.register("Ada", "ada@example.com", "secret1")
        user_store.calls.clear()

        with pytest.raises(DuplicateIdentityError):
            await identity_service.register("Other", "ada@example.com", "secret2")

        assert user_store.writes == []
        assert len(user_store.rows) == 1

    @pytest.mark.asyncio
    async def test_lost_race_is_duplicate(self, identity_service: IdentityService, user_store: Any) -> None:
        """Test a conditional insert that finds the email taken reports a duplicate."""
        original_find_one = user_store.find_one

        async def stale_find_one(filters: dict[str, Any]) -> None:
            # Another request registers the same email between check and insert
            await original_find_one(filters)
            user_store.rows.append({"id": "x", "email": "ada@example.com"})
            return None

        user_store.find_one = stale_find_one

        with pytest.raises(DuplicateIdentityError):
            await identity_service.register("Ada", "ada@example.com", "secret1")

        assert len(user_store.rows) == 1


class TestAuthenticate:
    """Tests for authenticate method."""

    @pytest.mark.asyncio
    async def test_returns_token_for_valid_credentials(
        self, identity_service: IdentityService, user_store: Any, tokens: TokenService
    ) -> None:
        """Test correct credentials produce a token for the identity."""
        await identity_service.register("Ada", "ada@example.com", "secret1")

        token = await identity_service.authenticate("ADA@example.com", "secret1")

        assert tokens.verify(token).user.id == user_store.rows[0]["id"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, identity_service: IdentityService) -> None:
        """Test a wrong password is rejected."""
        await identity_service.register("Ada", "ada@example.com", "secret1")

        with pytest.raises(ValidationError) as exc_info:
            await identity_service.authenticate("ada@example.com", "wrong-pass")

        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_unknown_email(self, identity_service: IdentityService) -> None:
        """Test an unknown email fails the same way as a wrong password."""
        with pytest.raises(ValidationError) as exc_info:
            await identity_service.authenticate("nobody@example.com", "secret1")

        assert exc_info.value.message == "Invalid credentials"


class TestGetIdentity:
    """Tests for get_identity method."""

    @pytest.mark.asyncio
    async def test_omits_password(self, identity_service: IdentityService, user_store: Any) -> None:
        """Test the public identity never carries the password hash."""
        await identity_service.register("Ada", "ada@example.com", "secret1")
        user_id = UUID(user_store.rows[0]["id"])

        identity = await identity_service.get_identity(user_id)

        assert identity["name"] == "Ada"
        assert "password" not in identity

    @pytest.mark.asyncio
    async def test_missing_identity(self, identity_service: IdentityService) -> None:
        """Test a deleted identity is reported as not found."""
        with pytest.raises(NotFoundError):
            await identity_service.get_identity(UUID("660e8400-e29b-41d4-a716-446655440000"))
