"""Token issuing and verification."""

import time
from enum import Enum
from typing import Any

import jwt

from src.schemas.auth import TokenPayload


class AuthErrorCode(str, Enum):
    """Authentication error codes."""

    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class AuthError(Exception):
    """Authentication error with specific error code.

    Raised when token validation fails for any reason.
    The code tells the caller which check failed.
    """

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        """Initialize authentication error.

        Args:
            message: Human-readable error description.
            code: Specific error code for programmatic handling.
        """
        self.message = message
        self.code = code
        super().__init__(message)


class TokenService:
    """Issues and verifies signed access tokens.

    The signing secret and lifetime are passed in explicitly so that
    nothing here reads process-wide configuration.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: int = 360000) -> None:
        """Initialize the token service.

        Args:
            secret: Shared signing secret.
            algorithm: JWT signing algorithm.
            expires_in: Token lifetime in seconds.
        """
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, user_id: str) -> str:
        """Issue a token embedding ``{"user": {"id": user_id}}``.

        Args:
            user_id: Identity the token is issued for.

        Returns:
            str: Encoded token.
        """
        now = int(time.time())
        payload = {
            "user": {"id": str(user_id)},
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        """Decode and validate a token.

        Validates the token signature, expiration, and structure.

        Args:
            token: The token string to decode.

        Returns:
            TokenPayload: Validated token payload.

        Raises:
            AuthError: If token is invalid, expired, or has wrong signature.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "require": ["exp", "iat", "user"],
                },
            )
            return TokenPayload.model_validate(payload)

        except jwt.ExpiredSignatureError as e:
            raise AuthError(
                "Token has expired",
                AuthErrorCode.TOKEN_EXPIRED,
            ) from e

        except jwt.InvalidSignatureError as e:
            raise AuthError(
                "Invalid token signature",
                AuthErrorCode.INVALID_SIGNATURE,
            ) from e

        except jwt.MissingRequiredClaimError as e:
            raise AuthError(
                f"Token missing required claim: {e}",
                AuthErrorCode.INVALID_TOKEN,
            ) from e

        except jwt.DecodeError as e:
            raise AuthError(
                f"Invalid token format: {e}",
                AuthErrorCode.INVALID_TOKEN,
            ) from e

        except Exception as e:
            # Bad claim shapes and any other decoding failure
            raise AuthError(
                f"Token validation failed: {e}",
                AuthErrorCode.INVALID_TOKEN,
            ) from e
