"""Profile API routes."""

from typing import Any

from fastapi import APIRouter

from src.api.deps import CurrentUser, GitHub, Profiles
from src.schemas.common import MessageResponse
from src.schemas.profile import EducationCreate, ExperienceCreate, ProfileResponse, ProfileUpsert

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user's profile",
    description="Returns the authenticated user's profile. Does not create one.",
    responses={404: {"description": "The user has no profile yet"}},
)
async def get_my_profile(user: CurrentUser, profiles: Profiles) -> ProfileResponse:
    """Get the authenticated user's profile.

    Args:
        user: The authenticated user context.
        profiles: Profile service.

    Returns:
        ProfileResponse: The user's profile data.
    """
    profile = await profiles.get_own(user.user_id)
    return ProfileResponse(**profile)


@router.post(
    "",
    response_model=ProfileResponse,
    summary="Create or update current user's profile",
    description="Creates the profile on first call; later calls replace only the provided fields.",
)
async def upsert_my_profile(data: ProfileUpsert, user: CurrentUser, profiles: Profiles) -> ProfileResponse:
    """Create or update the authenticated user's profile.

    Args:
        data: Profile fields.
        user: The authenticated user context.
        profiles: Profile service.

    Returns:
        ProfileResponse: The stored profile.
    """
    profile = await profiles.upsert(user.user_id, data)
    return ProfileResponse(**profile)


@router.get(
    "",
    response_model=list[ProfileResponse],
    summary="List all profiles",
)
async def list_profiles(profiles: Profiles) -> list[ProfileResponse]:
    """Get every profile. Public."""
    return [ProfileResponse(**profile) for profile in await profiles.list_all()]


@router.get(
    "/user/{user_id}",
    response_model=ProfileResponse,
    summary="Get profile by user ID",
    responses={404: {"description": "Malformed user ID or no profile for it"}},
)
async def get_profile_by_user(user_id: str, profiles: Profiles) -> ProfileResponse:
    """Get any user's profile. Public."""
    profile = await profiles.get_by_owner(user_id)
    return ProfileResponse(**profile)


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Delete current user's profile and account",
)
async def delete_my_account(user: CurrentUser, profiles: Profiles) -> MessageResponse:
    """Delete the authenticated user's profile, then the account itself."""
    await profiles.delete_own(user.user_id)
    return MessageResponse(msg="User deleted")


@router.put(
    "/experience",
    response_model=ProfileResponse,
    summary="Add experience",
    description="Adds an experience entry at the top of the profile's experience list.",
    responses={404: {"description": "The user has no profile yet"}},
)
async def add_experience(data: ExperienceCreate, user: CurrentUser, profiles: Profiles) -> ProfileResponse:
    profile = await profiles.add_experience(user.user_id, data)
    return ProfileResponse(**profile)


@router.delete(
    "/experience/{exp_id}",
    response_model=ProfileResponse,
    summary="Delete experience",
    description="Removes an experience entry. Unknown IDs leave the profile unchanged.",
)
async def delete_experience(exp_id: str, user: CurrentUser, profiles: Profiles) -> ProfileResponse:
    profile = await profiles.remove_experience(user.user_id, exp_id)
    return ProfileResponse(**profile)


@router.put(
    "/education",
    response_model=ProfileResponse,
    summary="Add education",
    description="Adds an education entry at the top of the profile's education list.",
    responses={404: {"description": "The user has no profile yet"}},
)
async def add_education(data: EducationCreate, user: CurrentUser, profiles: Profiles) -> ProfileResponse:
    profile = await profiles.add_education(user.user_id, data)
    return ProfileResponse(**profile)


@router.delete(
    "/education/{edu_id}",
    response_model=ProfileResponse,
    summary="Delete education",
    description="Removes an education entry. Unknown IDs leave the profile unchanged.",
)
async def delete_education(edu_id: str, user: CurrentUser, profiles: Profiles) -> ProfileResponse:
    profile = await profiles.remove_education(user.user_id, edu_id)
    return ProfileResponse(**profile)


@router.get(
    "/github/{username}",
    summary="List a GitHub user's repositories",
    description="Proxies GitHub and returns its JSON unchanged.",
    responses={
        404: {"description": "No GitHub profile found"},
        502: {"description": "GitHub unreachable"},
    },
)
async def get_github_repositories(username: str, github: GitHub) -> list[dict[str, Any]]:
    """List the five most recently created repositories of a GitHub user. Public."""
    return await github.list_repositories(username)
