"""User (identity) model type definitions for database operations."""

from typing import TypedDict


class UserCreate(TypedDict):
    """Data required to create a new user.

    ``password`` holds the bcrypt hash and must never leave the service layer.
    """

    name: str
    email: str
    password: str
    avatar: str
