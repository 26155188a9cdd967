"""Application configuration from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Liftlog API"
    debug: bool = False
    environment: str = "development"

    # API
    api_v1_prefix: str = "/api/v1"

    # Database (local SQLite file, single agent)
    database_path: str = "liftlog.db"

    # Backups (and the safety copy taken before a restore) are written here
    backup_dir: str = "backups"

    # Logging
    log_level: str = "INFO"

    # Seed exercise definitions into an empty database on startup
    seed_on_startup: bool = True

    # CORS: comma-separated list of allowed origins outside development
    cors_origins: str = ""

    def _build_db_url(self, scheme: str) -> str:
        if self.database_path == ":memory:":
            return f"{scheme}:///:memory:"
        return f"{scheme}:///{Path(self.database_path).expanduser()}"

    @property
    def database_file(self) -> Path | None:
        """Path of the SQLite file, or None for an in-memory database."""
        if self.database_path == ":memory:":
            return None
        return Path(self.database_path).expanduser()

    @property
    def database_url(self) -> str:
        """Synchronous URL for Alembic and tooling."""
        return self._build_db_url(scheme="sqlite")

    @property
    def async_database_url(self) -> str:
        """Async URL for the app (aiosqlite driver)."""
        return self._build_db_url(scheme="sqlite+aiosqlite")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
