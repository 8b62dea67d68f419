"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic import Field, PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Temple Stuart"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = Field(default="INFO")

    # Database
    postgres_host: str = Field(default="localhost")
    postgres_port: int = Field(default=5432)
    postgres_user: str = Field(default="temple_stuart")
    postgres_password: str = Field(default="temple_stuart")
    postgres_db: str = Field(default="temple_stuart")
    database_url: str | None = Field(default=None, validate_default=True)
    database_echo: bool = Field(default=False)

    @field_validator("database_url", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: str | None, values) -> str:
        """Build database URL from components if not provided."""
        if isinstance(v, str):
            return v

        data = values.data if hasattr(values, 'data') else {}
        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=data.get("postgres_user", "temple_stuart"),
            password=data.get("postgres_password", "temple_stuart"),
            host=data.get("postgres_host", "localhost"),
            port=data.get("postgres_port", 5432),
            path=data.get("postgres_db", "temple_stuart"),
        ).unicode_string()

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_reload: bool = Field(default=True)

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"]
    )

    # Caller identity
    auth_cookie_name: str = Field(default="userEmail", description="Cookie carrying the caller's email")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
