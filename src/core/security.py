"""Password hashing and avatar helpers."""

import hashlib
from urllib.parse import urlencode

import bcrypt

GRAVATAR_URL = "https://www.gravatar.com/avatar"

# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with a fresh random salt.

    Passwords longer than 72 bytes are cut to their first 72 bytes.

    Args:
        password: Raw password.
        rounds: bcrypt cost factor.

    Returns:
        str: The bcrypt hash, salt included.
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a raw password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def gravatar_url(email: str, size: int = 200, rating: str = "pg", default: str = "mm") -> str:
    """Build the Gravatar URL for an email address.

    The same email always yields the same URL.
    """
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    query = urlencode({"s": size, "r": rating, "d": default})
    return f"{GRAVATAR_URL}/{digest}?{query}"
