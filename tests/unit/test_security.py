"""Unit tests for password hashing and avatar helpers."""

import hashlib

from src.core.security import gravatar_url, hash_password, verify_password


class TestPasswords:
    """Tests for hash_password and verify_password."""

    def test_hash_verifies(self) -> None:
        password_hash = hash_password("secret1", rounds=4)

        assert password_hash != "secret1"
        assert verify_password("secret1", password_hash) is True

    def test_wrong_password(self) -> None:
        assert verify_password("other", hash_password("secret1", rounds=4)) is False

    def test_salted(self) -> None:
        """Test the same password hashes differently each time."""
        assert hash_password("secret1", rounds=4) != hash_password("secret1", rounds=4)

    def test_non_bcrypt_hash(self) -> None:
        """Test a stored value that is not a bcrypt hash never matches."""
        assert verify_password("secret1", "plain-text") is False


class TestGravatarUrl:
    """Tests for gravatar_url."""

    def test_deterministic(self) -> None:
        assert gravatar_url("ada@example.com") == gravatar_url("ada@example.com")

    def test_normalizes_email(self) -> None:
        digest = hashlib.md5(b"ada@example.com").hexdigest()

        url = gravatar_url("  ADA@Example.com ")

        assert url == f"https://www.gravatar.com/avatar/{digest}?s=200&r=pg&d=mm"


class TestLongPasswords:
    """Passwords past bcrypt's 72-byte input limit."""

    def test_long_ascii_password(self) -> None:
        password = "x" * 80

        password_hash = hash_password(password, rounds=4)

        assert verify_password(password, password_hash) is True

    def test_multibyte_password_over_72_bytes(self) -> None:
        """Test 40 two-byte characters (80 bytes) hash and verify."""
        password = "é" * 40

        password_hash = hash_password(password, rounds=4)

        assert verify_password(password, password_hash) is True
        assert verify_password("é" * 39, password_hash) is False
