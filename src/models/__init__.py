"""Database model type definitions."""

from src.models.profile import ProfileFields, SocialLinks
from src.models.user import UserCreate

__all__ = [
    "ProfileFields",
    "SocialLinks",
    "UserCreate",
]
