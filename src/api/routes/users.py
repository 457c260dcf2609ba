"""User registration routes."""

from fastapi import APIRouter, status

from src.api.deps import Identities
from src.schemas.auth import RegisterRequest, TokenResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register user",
    description="Create a new account and return an access token for it.",
    responses={400: {"description": "Invalid input or email already registered"}},
)
async def register(data: RegisterRequest, identities: Identities) -> TokenResponse:
    """Register a new user.

    Args:
        data: Name, email and password.
        identities: Identity service.

    Returns:
        TokenResponse: Access token for the new account.
    """
    token = await identities.register(
        name=data.name,
        email=data.email,
        password=data.password,
    )
    return TokenResponse(token=token)
