"""Centralized application configuration via environment variables."""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    API keys use SecretStr to prevent accidental logging.
    Database URL is assembled from individual components to match
    the official PostgreSQL Docker image environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- App ---
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "DEBUG"
    app_url: str = "http://localhost:3000"

    # --- CORS ---
    cors_allowed_origins: list[str] = []
    cors_allow_credentials: bool = False
    cors_allowed_methods: list[str] = ["GET", "POST", "PUT", "DELETE"]
    cors_allowed_headers: list[str] = ["Content-Type", "Authorization"]

    # --- Content ---
    content_dir: Path = Path("content")

    # --- PostgreSQL ---
    postgres_user: str = "study_tracker"
    postgres_password: SecretStr = SecretStr("secret")
    postgres_db: str = "study_tracker"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Assemble database URL from components.

        Uses psycopg v3 driver which supports both sync (create_engine)
        and async (create_async_engine) modes natively.
        """
        password = self.postgres_password.get_secret_value()
        return (
            f"postgresql+psycopg://{self.postgres_user}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # --- Redis (ARQ cron worker) ---
    redis_url: str = "redis://localhost:6379/0"

    # --- Gemini ---
    gemini_api_key: SecretStr | None = None
    gemini_default_model: str = "gemini-2.5-flash"
    gemini_pro_model: str = "gemini-2.5-pro"

    # --- Email (Brevo) ---
    brevo_api_key: SecretStr | None = None
    brevo_api_url: str = "https://api.brevo.com/v3/smtp/email"
    email_sender_name: str = "FAANG Prep Platform"
    email_sender_email: str = "noreply@faangprep.com"
    notification_email: str | None = None
    notification_name: str = "FAANG Student"

    # --- Cron ---
    # Bearer token for /cron/* routes; unset means the routes are open.
    cron_secret: SecretStr | None = None
    streak_reminder_hour: int = 18
    weekly_progress_weekday: int = 6  # Monday == 0
    weekly_progress_hour: int = 9

    # --- Convenience properties ---
    @property
    def is_dev(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton.

    Usage::

        from study_tracker.config import get_settings
        settings = get_settings()

    Or for dependency injection in FastAPI::

        @app.get("/")
        def root(settings: Settings = Depends(get_settings)):
            ...
    """
    return Settings()


settings = get_settings()
