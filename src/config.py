"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    mongo_uri: str = Field(default="mongodb://localhost:27017")
    mongo_db_name: str = Field(default="fastcart")

    # JWT
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    # Tokens never expire unless this is set
    jwt_expiration_minutes: int | None = Field(default=None, gt=0)

    # Cloudinary
    cloudinary_cloud_name: str | None = Field(default=None)
    cloudinary_api_key: str | None = Field(default=None)
    cloudinary_api_secret: str | None = Field(default=None)
    cloudinary_folder: str = Field(default="fastcart")
    max_upload_bytes: int = Field(default=5 * 1024 * 1024, gt=0)

    # API
    category_create_requires_auth: bool = Field(default=False)
    cors_origins: list[str] = Field(default=["*"])
    port: int = Field(default=4000)
    log_level: str = Field(default="INFO")
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if self.jwt_secret == "change-me-in-production":  # noqa: S105
                raise ValueError("JWT_SECRET must be changed in production")
            if "localhost" in self.mongo_uri:
                raise ValueError("MONGO_URI should not use localhost in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
