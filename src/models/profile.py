"""Profile model type definitions for database operations."""

from typing import TypedDict


class SocialLinks(TypedDict, total=False):
    """Social network links stored in the ``social`` jsonb column."""

    youtube: str
    facebook: str
    twitter: str
    instagram: str
    linkedin: str


class ProfileFields(TypedDict, total=False):
    """Writable profile columns. Only provided keys are sent to the store.

    ``social`` is written as a whole: links not sent in the same request
    are cleared.
    """

    user_id: str
    company: str
    website: str
    location: str
    bio: str
    status: str
    github_username: str
    skills: list[str]
    social: SocialLinks
