"""Environment-backed configuration for the Django settings module."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Env(BaseSettings):
    """Settings loaded from environment variables (and an optional .env file)."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret_key: str = Field(
        default="django-insecure-local-development-key",
        validation_alias="DJANGO_SECRET_KEY",
    )
    debug: bool = Field(default=False, validation_alias="DJANGO_DEBUG")
    allowed_hosts: str = Field(default="*", validation_alias="DJANGO_ALLOWED_HOSTS")

    # Database
    db_engine: str = Field(
        default="django.db.backends.sqlite3", validation_alias="DB_ENGINE"
    )
    db_name: str = Field(
        default=str(_PROJECT_ROOT / "db.sqlite3"), validation_alias="DB_NAME"
    )
    db_user: str = Field(default="", validation_alias="DB_USER")
    db_password: str = Field(default="", validation_alias="DB_PASSWORD")
    db_host: str = Field(default="", validation_alias="DB_HOST")
    db_port: str = Field(default="", validation_alias="DB_PORT")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Quoting / catalog maintenance
    rent_periods: str = Field(default="24,36,48,60", validation_alias="RENT_PERIODS")
    default_rent_period: int = Field(default=60, validation_alias="DEFAULT_RENT_PERIOD")
    import_skipped_preview: int = Field(
        default=10, validation_alias="IMPORT_SKIPPED_PREVIEW"
    )

    @property
    def hosts(self) -> list[str]:
        """Parse DJANGO_ALLOWED_HOSTS from a comma-separated string."""
        return [h.strip() for h in self.allowed_hosts.split(",") if h.strip()]

    @property
    def periods(self) -> list[int]:
        """Parse RENT_PERIODS (months) from a comma-separated string."""
        return sorted(int(p) for p in self.rent_periods.split(",") if p.strip())


@lru_cache
def get_env() -> Env:
    """Get cached environment settings."""
    return Env()
