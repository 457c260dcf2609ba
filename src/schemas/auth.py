"""Authentication schemas for tokens, registration and user context."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserContext(BaseModel):
    """Authenticated user context extracted from a verified token.

    This model represents the authenticated user for the current request.
    It is populated by the auth gate and handed to protected routes.
    """

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID = Field(description="Identity of the authenticated user")


class TokenUser(BaseModel):
    """Identity reference embedded in a token."""

    id: str = Field(description="Identity ID")


class TokenPayload(BaseModel):
    """Claims carried by an access token.

    The identity reference lives under ``user.id``; ``exp`` and ``iat``
    are standard Unix-epoch claims.
    """

    model_config = ConfigDict(from_attributes=True)

    user: TokenUser = Field(description="Identity reference")
    exp: int = Field(description="Expiration timestamp (Unix epoch)")
    iat: int = Field(description="Issued at timestamp (Unix epoch)")

    def to_user_context(self) -> UserContext:
        """Convert token payload to UserContext.

        Returns:
            UserContext: User context derived from token claims.

        Raises:
            ValueError: If the embedded identity is not a UUID.
        """
        return UserContext(user_id=UUID(self.user.id))


class AuthenticatedResponse(BaseModel):
    """Response for the authenticated health endpoint."""

    authenticated: bool = Field(default=True, description="Authentication status")
    user_id: str = Field(description="Authenticated user ID")


# Registration and login


class RegisterRequest(BaseModel):
    """Request schema for registering a new identity."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Email address, unique per identity")
    password: str = Field(..., min_length=6, description="Password (at least 6 characters)")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Type a valid name")
        return value.strip()


class LoginRequest(BaseModel):
    """Request schema for logging in."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class TokenResponse(BaseModel):
    """Response carrying a freshly issued access token."""

    token: str = Field(description="Signed access token")


class IdentityResponse(BaseModel):
    """Public view of an identity. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Identity ID")
    name: str = Field(description="Display name")
    email: str = Field(description="Email address")
    avatar: str | None = Field(default=None, description="Avatar URL")
    created_at: datetime | None = Field(default=None, description="Registration timestamp")
