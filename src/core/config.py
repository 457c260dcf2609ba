"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Required settings will raise validation errors if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="devconnector-api", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=5555, description="Server port")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # Supabase
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(..., description="Supabase secret key for backend operations")

    # Tokens
    jwt_secret: str = Field(..., description="Secret used to sign and verify access tokens")
    jwt_algorithm: str = Field(default="HS256", description="Token signing algorithm")
    jwt_expires_in: int = Field(default=360000, description="Token lifetime in seconds (100 hours)")
    auth_header_name: str = Field(default="x-auth-token", description="Request header carrying the token")

    # Passwords
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, description="bcrypt cost factor")

    # GitHub
    github_client_id: str = Field(default="", description="GitHub OAuth app client ID")
    github_client_secret: str = Field(default="", description="GitHub OAuth app client secret")
    github_api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    github_timeout_seconds: float = Field(default=10.0, description="Timeout for GitHub API calls")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
