"""Profile Pydantic schemas for API request/response models."""

from datetime import date, datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

SOCIAL_NETWORKS = ("youtube", "facebook", "twitter", "instagram", "linkedin")


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class ProfileUpsert(BaseModel):
    """Schema for creating or updating the caller's profile.

    ``status`` and ``skills`` are required; every other field is optional
    and only written when provided. ``skills`` is a comma-separated string.
    Social links are flat fields collected into ``social`` by the service.
    """

    model_config = ConfigDict(populate_by_name=True)

    company: str | None = Field(default=None, max_length=255)
    website: str | None = Field(default=None, max_length=2048)
    location: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None)
    status: str = Field(..., description="Professional status, e.g. 'Developer'")
    github_username: str | None = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("github_username", "githubusername"),
    )
    skills: str = Field(..., description="Comma-separated list of skills")
    youtube: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None

    @field_validator("status", "skills")
    @classmethod
    def required_not_blank(cls, value: str) -> str:
        return _require_text(value)


class ExperienceCreate(BaseModel):
    """Schema for adding an experience entry."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name")
    location: str | None = None
    from_date: date = Field(..., validation_alias=AliasChoices("from_date", "from"))
    to_date: date | None = Field(default=None, validation_alias=AliasChoices("to_date", "to"))
    current: bool = False
    description: str | None = None

    @field_validator("title", "company")
    @classmethod
    def required_not_blank(cls, value: str) -> str:
        return _require_text(value)


class EducationCreate(BaseModel):
    """Schema for adding an education entry."""

    model_config = ConfigDict(populate_by_name=True)

    school: str = Field(..., description="School name")
    degree: str = Field(..., description="Degree obtained")
    field_of_study: str = Field(
        ...,
        validation_alias=AliasChoices("field_of_study", "fieldofstudy"),
    )
    from_date: date = Field(..., validation_alias=AliasChoices("from_date", "from"))
    to_date: date | None = Field(default=None, validation_alias=AliasChoices("to_date", "to"))
    current: bool = False
    description: str | None = None

    @field_validator("school", "degree", "field_of_study")
    @classmethod
    def required_not_blank(cls, value: str) -> str:
        return _require_text(value)


class ExperienceResponse(BaseModel):
    """Stored experience entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: str
    location: str | None = None
    from_date: date
    to_date: date | None = None
    current: bool = False
    description: str | None = None


class EducationResponse(BaseModel):
    """Stored education entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    school: str
    degree: str
    field_of_study: str
    from_date: date
    to_date: date | None = None
    current: bool = False
    description: str | None = None


class SocialLinksResponse(BaseModel):
    """Social links; absent networks are omitted."""

    youtube: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None


class OwnerSummaryResponse(BaseModel):
    """Name and avatar of the identity owning a profile."""

    name: str
    avatar: str | None = None


class ProfileResponse(BaseModel):
    """Schema for profile API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Profile unique identifier")
    user_id: UUID = Field(description="Owning identity ID")
    user: OwnerSummaryResponse | None = Field(default=None, description="Owner name and avatar")
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str | None = None
    github_username: str | None = None
    skills: list[str] = Field(default_factory=list)
    social: SocialLinksResponse = Field(default_factory=SocialLinksResponse)
    experience: list[ExperienceResponse] = Field(default_factory=list, description="Newest first")
    education: list[EducationResponse] = Field(default_factory=list, description="Newest first")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("skills", "experience", "education", mode="before")
    @classmethod
    def null_as_empty(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("social", mode="before")
    @classmethod
    def null_social(cls, value: object) -> object:
        return {} if value is None else value
