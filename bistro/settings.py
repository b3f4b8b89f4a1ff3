"""Application settings configuration."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ACCESS_TOKEN_SECRET = "change-me-in-production-use-secrets-token-urlsafe"  # pragma: allowlist secret


class Settings(BaseSettings):
    """Application settings with token signing, MongoDB and logging configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Debugging Configuration
    debug: bool = False
    environment: str = "development"  # development, production
    log_level: str = "INFO"
    log_to_file: bool = False
    log_filename: str = "logs/debug.log"

    # Application Configuration
    app_name: str = "Bistro Boss API"
    app_version: str = "1.0.0"
    app_host: str = "0.0.0.0"  # Uvicorn bind address
    app_port: int = Field(default=5000, validation_alias=AliasChoices("app_port", "port"))

    # Token Configuration
    access_token_secret: str = DEFAULT_ACCESS_TOKEN_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # MongoDB Configuration
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "bistroBossRes"
    mongodb_server_api_version: str | None = "1"  # Stable API; empty disables it

    # Emails promoted to admin at startup so a fresh deployment has an admin
    admin_emails: list[str] = []

    # CORS Configuration
    enable_cors: bool = True
    cors_origins: list[str] = ["*"]

    @property
    def uses_default_secret(self) -> bool:
        return self.access_token_secret == DEFAULT_ACCESS_TOKEN_SECRET


app_settings = Settings()
