"""
Application settings configuration for the EODSA results engine.

Centralized settings loaded from environment variables.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment Variables:
        EODSA_JWT_SECRET_KEY: Secret key for signing actor bearer tokens (required)
        EODSA_JWT_TOKEN_EXPIRY_HOURS: Token lifetime in hours (default: 12)
        EODSA_CORS_ORIGINS: Comma-separated list of allowed browser origins
        EODSA_AUTO_CREATE_SCHEMA: Create tables once at startup (default: False).
            Production deployments run Alembic migrations instead.
    """

    jwt_secret_key: str = Field(
        default="",
        validation_alias="EODSA_JWT_SECRET_KEY",
        description="Secret key for signing actor tokens. Must be at least 32 bytes."
    )

    jwt_token_expiry_hours: int = Field(
        default=12,
        validation_alias="EODSA_JWT_TOKEN_EXPIRY_HOURS",
        ge=1,
        le=720,
    )

    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        validation_alias="EODSA_CORS_ORIGINS",
        description="Comma-separated list of origins allowed by CORS"
    )

    auto_create_schema: bool = Field(
        default=False,
        validation_alias="EODSA_AUTO_CREATE_SCHEMA",
        description="Create database tables once at process boot"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate that JWT secret key is sufficiently long."""
        if v and len(v) < 32:
            raise ValueError("EODSA_JWT_SECRET_KEY must be at least 32 characters")
        return v

    @property
    def jwt_configured(self) -> bool:
        """Check if token signing is properly configured."""
        return bool(self.jwt_secret_key)

    @property
    def cors_origins_list(self) -> List[str]:
        """Get the configured CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings instance.

    Returns:
        AppSettings: Configured application settings from environment
    """
    return AppSettings()
