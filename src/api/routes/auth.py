"""Authentication API routes."""

from fastapi import APIRouter

from src.api.deps import CurrentUser, Identities
from src.schemas.auth import IdentityResponse, LoginRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get(
    "",
    response_model=IdentityResponse,
    summary="Get authenticated user",
    description="Returns the account behind the request's token, without the password.",
)
async def get_authenticated_user(user: CurrentUser, identities: Identities) -> IdentityResponse:
    """Get the authenticated user's account.

    Args:
        user: The authenticated user context.
        identities: Identity service.

    Returns:
        IdentityResponse: Public account fields.
    """
    identity = await identities.get_identity(user.user_id)
    return IdentityResponse(**identity)


@router.post(
    "",
    response_model=TokenResponse,
    summary="Log in",
    description="Exchange email and password for an access token.",
    responses={400: {"description": "Invalid credentials"}},
)
async def login(data: LoginRequest, identities: Identities) -> TokenResponse:
    """Log in with email and password.

    Args:
        data: Login credentials.
        identities: Identity service.

    Returns:
        TokenResponse: A fresh access token.
    """
    token = await identities.authenticate(email=data.email, password=data.password)
    return TokenResponse(token=token)
