"""FastAPI dependency injection functions."""

import logging
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from starlette.routing import Match

from src.api.middleware.auth import AuthError, TokenService
from src.api.middleware.error_handler import (
    AuthenticationError,
    create_error_response,
    request_validation_handler,
)
from src.core.config import get_settings
from src.core.store import DocumentStore
from src.core.supabase import get_supabase_client
from src.schemas.auth import UserContext
from src.services.github_service import GitHubService
from src.services.identity_service import IdentityService
from src.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

# Profile reads embed the owner's name and avatar through the user_id foreign key
PROFILE_COLUMNS = "*, user:users(name, avatar)"


@lru_cache
def get_token_service() -> TokenService:
    """Build the token service from settings once per process."""
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=settings.jwt_expires_in,
    )


def get_user_store() -> DocumentStore:
    return DocumentStore(get_supabase_client(), "users")


def get_profile_store() -> DocumentStore:
    return DocumentStore(get_supabase_client(), "profiles", columns=PROFILE_COLUMNS)


def get_identity_service(
    users: Annotated[DocumentStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> IdentityService:
    return IdentityService(users, tokens, bcrypt_rounds=get_settings().bcrypt_rounds)


def get_profile_service(
    profiles: Annotated[DocumentStore, Depends(get_profile_store)],
    users: Annotated[DocumentStore, Depends(get_user_store)],
) -> ProfileService:
    return ProfileService(profiles, users)


def get_github_service() -> GitHubService:
    settings = get_settings()
    return GitHubService(
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
        base_url=settings.github_api_url,
        timeout=settings.github_timeout_seconds,
    )


def _read_token(request: Request) -> str | None:
    return request.headers.get(get_settings().auth_header_name)


async def get_current_user(
    request: Request,
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> UserContext:
    """Authenticate the request from its token header.

    Runs before any protected route body, so a rejected request never
    reaches a service or the store.

    Args:
        request: The incoming request.
        tokens: Token verifier.

    Returns:
        UserContext: The authenticated user's context.

    Raises:
        AuthenticationError: 401 if the token is missing, invalid, or expired.
    """
    token = _read_token(request)
    if not token:
        raise AuthenticationError("No token, authorization denied.")

    try:
        payload = tokens.verify(token)
        user = payload.to_user_context()
    except (AuthError, ValueError) as e:
        logger.info("Rejected token: %s", getattr(e, "code", "INVALID_TOKEN"))
        raise AuthenticationError("Token isn't valid.") from e

    request.state.user = user
    return user


def _depends_on_gate(dependant: Any) -> bool:
    return any(sub.call is get_current_user or _depends_on_gate(sub) for sub in dependant.dependencies)


def _route_requires_user(request: Request) -> bool:
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            dependant = getattr(route, "dependant", None)
            return dependant is not None and _depends_on_gate(dependant)
    return False


async def gated_validation_handler(request: Request, exc: RequestValidationError) -> Response:
    """Render request validation failures, letting the auth gate answer first.

    FastAPI decodes a JSON body before it resolves dependencies. On a
    protected route the token is checked here as well, so an anonymous
    caller gets 401 whatever the body looks like.
    """
    if _route_requires_user(request):
        try:
            await get_current_user(request, get_token_service())
        except AuthenticationError as e:
            return create_error_response(
                error_type=e.error_type,
                message=e.message,
                status_code=e.status_code,
                request_id=request.headers.get("X-Request-ID"),
            )
    return await request_validation_handler(request, exc)


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[UserContext, Depends(get_current_user)]
Identities = Annotated[IdentityService, Depends(get_identity_service)]
Profiles = Annotated[ProfileService, Depends(get_profile_service)]
GitHub = Annotated[GitHubService, Depends(get_github_service)]
