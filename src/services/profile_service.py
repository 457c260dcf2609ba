"""Profile business logic service."""

import logging
from typing import Any
from uuid import UUID, uuid4

from src.api.middleware.error_handler import MalformedKeyError, NotFoundError
from src.core.store import DocumentStore
from src.models.profile import ProfileFields, SocialLinks
from src.schemas.profile import SOCIAL_NETWORKS, EducationCreate, ExperienceCreate, ProfileUpsert

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("company", "website", "location", "bio", "status", "github_username")

NO_PROFILE_MESSAGE = "There is no profile for this user"


def parse_skills(skills: str) -> list[str]:
    """Split a comma-separated skills string into trimmed, non-empty items.

    >>> parse_skills("node, express , mongo")
    ['node', 'express', 'mongo']
    """
    return [skill.strip() for skill in skills.split(",") if skill.strip()]


def build_profile_fields(user_id: UUID, data: ProfileUpsert) -> ProfileFields:
    """Collect the columns to write from the fields actually provided.

    Empty and missing values are left out so they never overwrite
    what is already stored.
    """
    fields: ProfileFields = {"user_id": str(user_id)}

    for name in PROFILE_FIELDS:
        value = getattr(data, name)
        if value:
            fields[name] = value

    if data.skills:
        fields["skills"] = parse_skills(data.skills)

    social: SocialLinks = {}
    for network in SOCIAL_NETWORKS:
        value = getattr(data, network)
        if value:
            social[network] = value
    if social:
        fields["social"] = social

    return fields


class ProfileService:
    """Service for managing user profiles.

    Every mutation is scoped to the calling user's own profile row.
    """

    def __init__(self, profiles: DocumentStore, users: DocumentStore) -> None:
        """Initialize profile service.

        Args:
            profiles: Store over the profiles table.
            users: Store over the users table, used when deleting an account.
        """
        self.profiles = profiles
        self.users = users

    async def get_own(self, user_id: UUID) -> dict[str, Any]:
        """Get the caller's profile.

        Args:
            user_id: The authenticated user ID.

        Returns:
            dict: The profile data.

        Raises:
            NotFoundError: If the user has not created a profile yet.
        """
        profile = await self.profiles.find_one({"user_id": str(user_id)})
        if not profile:
            raise NotFoundError(NO_PROFILE_MESSAGE)
        return profile

    async def upsert(self, user_id: UUID, data: ProfileUpsert) -> dict[str, Any]:
        """Create the caller's profile or update the provided fields.

        Issued as one conditional write keyed by ``user_id``: a missing
        profile is created, an existing one only has the provided columns
        replaced.

        Args:
            user_id: The authenticated user ID.
            data: Profile fields from the request.

        Returns:
            dict: The profile as stored after the write.
        """
        fields = build_profile_fields(user_id, data)
        profile = await self.profiles.upsert(dict(fields), on_conflict="user_id")
        logger.info("Profile saved for user %s (%d fields)", user_id, len(fields) - 1)
        return profile

    async def list_all(self) -> list[dict[str, Any]]:
        """Get every profile with its owner summary."""
        return await self.profiles.find_many()

    async def get_by_owner(self, owner_id: str) -> dict[str, Any]:
        """Get any user's profile by their identity key.

        Args:
            owner_id: Identity key as received from the client.

        Returns:
            dict: The profile data.

        Raises:
            MalformedKeyError: If the key is not a valid identity ID.
            NotFoundError: If the identity has no profile.
        """
        try:
            owner = UUID(owner_id)
        except ValueError as e:
            raise MalformedKeyError("Invalid profile owner id") from e

        profile = await self.profiles.find_one({"user_id": str(owner)})
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    async def delete_own(self, user_id: UUID) -> None:
        """Delete the caller's profile and then their account.

        The two deletes are not atomic. Removing the profile first means a
        failure in between leaves an account without a profile, which is a
        state every account starts in anyway.
        """
        await self.profiles.delete_one({"user_id": str(user_id)})
        await self.users.delete_one({"id": str(user_id)})
        logger.info("Deleted profile and account for user %s", user_id)

    async def add_experience(self, user_id: UUID, entry: ExperienceCreate) -> dict[str, Any]:
        """Prepend an experience entry to the caller's profile."""
        return await self._add_entry(user_id, "experience", entry.model_dump(mode="json"))

    async def add_education(self, user_id: UUID, entry: EducationCreate) -> dict[str, Any]:
        """Prepend an education entry to the caller's profile."""
        return await self._add_entry(user_id, "education", entry.model_dump(mode="json"))

    async def remove_experience(self, user_id: UUID, entry_id: str) -> dict[str, Any]:
        """Remove an experience entry by ID. Unknown IDs leave the list as is."""
        return await self._remove_entry(user_id, "experience", entry_id)

    async def remove_education(self, user_id: UUID, entry_id: str) -> dict[str, Any]:
        """Remove an education entry by ID. Unknown IDs leave the list as is."""
        return await self._remove_entry(user_id, "education", entry_id)

    async def _add_entry(self, user_id: UUID, collection: str, entry: dict[str, Any]) -> dict[str, Any]:
        profile = await self.get_own(user_id)

        entry = {"id": str(uuid4()), **entry}
        entries = [entry, *(profile.get(collection) or [])]

        updated = await self._save_collection(user_id, collection, entries)
        logger.info("Added %s entry %s for user %s", collection, entry["id"], user_id)
        return updated

    async def _remove_entry(self, user_id: UUID, collection: str, entry_id: str) -> dict[str, Any]:
        profile = await self.get_own(user_id)

        current = profile.get(collection) or []
        entries = [item for item in current if item.get("id") != entry_id]
        if len(entries) == len(current):
            logger.info("No %s entry %s for user %s, nothing removed", collection, entry_id, user_id)

        return await self._save_collection(user_id, collection, entries)

    async def _save_collection(
        self, user_id: UUID, collection: str, entries: list[dict[str, Any]]
    ) -> dict[str, Any]:
        updated = await self.profiles.update_one({"user_id": str(user_id)}, {collection: entries})
        if not updated:
            # Profile vanished between the read and the write
            raise NotFoundError(NO_PROFILE_MESSAGE)
        return updated
