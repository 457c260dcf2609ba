"""Identity (account) business logic service."""

import asyncio
import logging
from typing import Any
from uuid import UUID

from src.api.middleware.auth import TokenService
from src.api.middleware.error_handler import DuplicateIdentityError, NotFoundError, ValidationError
from src.core.security import gravatar_url, hash_password, verify_password
from src.core.store import DocumentStore
from src.models.user import UserCreate

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = ("id", "name", "email", "avatar", "created_at")


class IdentityService:
    """Service for registering identities and issuing their tokens."""

    def __init__(self, users: DocumentStore, tokens: TokenService, bcrypt_rounds: int = 10) -> None:
        """Initialize identity service.

        Args:
            users: Store over the users table.
            tokens: Token issuer shared with the auth gate.
            bcrypt_rounds: bcrypt cost factor for new password hashes.
        """
        self.users = users
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, name: str, email: str, password: str) -> str:
        """Register a new identity and return its access token.

        The email is checked before anything is written; the insert itself
        is conditional on the email being free, so a concurrent registration
        of the same address also ends in DuplicateIdentityError.

        Args:
            name: Display name.
            email: Email address, unique across identities.
            password: Raw password, hashed before storage.

        Returns:
            str: Signed access token for the new identity.

        Raises:
            DuplicateIdentityError: If the email is already registered.
        """
        email = email.strip().lower()

        existing = await self.users.find_one({"email": email})
        if existing:
            raise DuplicateIdentityError()

        password_hash = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)
        new_user: UserCreate = {
            "name": name,
            "email": email,
            "avatar": gravatar_url(email),
            "password": password_hash,
        }
        user = await self.users.create_if_absent(dict(new_user), on_conflict="email")
        if user is None:
            raise DuplicateIdentityError()

        logger.info("User registered: %s", user["id"])
        return self.tokens.issue(str(user["id"]))

    async def authenticate(self, email: str, password: str) -> str:
        """Check credentials and return a fresh access token.

        Unknown emails and wrong passwords fail the same way.

        Raises:
            ValidationError: If the credentials do not match.
        """
        user = await self.users.find_one({"email": email.strip().lower()})
        if not user:
            raise ValidationError("Invalid credentials")

        matches = await asyncio.to_thread(verify_password, password, user.get("password") or "")
        if not matches:
            raise ValidationError("Invalid credentials")

        logger.info("User logged in: %s", user["id"])
        return self.tokens.issue(str(user["id"]))

    async def get_identity(self, user_id: UUID) -> dict[str, Any]:
        """Return the public fields of an identity.

        Raises:
            NotFoundError: If the identity no longer exists.
        """
        user = await self.users.find_one({"id": str(user_id)})
        if not user:
            raise NotFoundError("User not found")
        return {key: user.get(key) for key in PUBLIC_FIELDS}
