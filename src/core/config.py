"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = Field(default="Child Profiles API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/children",
        description="Database connection URL with an async driver",
    )

    # JWT Authentication
    jwt_secret: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for signing bearer tokens",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expires_in: str = Field(
        default="1h",
        description="Token lifetime, e.g. '1h', '30m', '7d' or seconds",
    )

    # Login policy: password-protected profiles or identity-only login
    auth_policy: Literal["password", "identity"] = Field(default="password")

    # Cloudinary
    cloudinary_cloud_name: str = Field(default="")
    cloudinary_api_key: str = Field(default="")
    cloudinary_api_secret: str = Field(default="")

    # Uploads
    upload_folder: str = Field(default="children_profiles")
    upload_quality: str = Field(default="auto:good")
    max_upload_files: int = Field(default=5)
    max_upload_bytes: int = Field(default=5 * 1024 * 1024)

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers usually supply a plain ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def requires_password(self) -> bool:
        """Whether profiles carry a password under the active login policy."""
        return self.auth_policy == "password"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
