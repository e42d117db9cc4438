"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - similarity_threshold stays inside the recommended [0.85, 0.95] band
    - database_url always names an async driver

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: a local file store works out-of-the-box
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_SIMILARITY_THRESHOLD = 0.85
MAX_SIMILARITY_THRESHOLD = 0.95


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Store
    database_url: str = "sqlite+aiosqlite:///./debatekb.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_sqlite_url(cls, v: str) -> str:
        """Plain sqlite:// URLs need the aiosqlite driver for the async engine."""
        if isinstance(v, str) and v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    run_migrations_on_startup: bool = True

    # Import / export
    similarity_threshold: float = 0.90
    snapshot_format_version: str = "1.0"

    @field_validator("similarity_threshold")
    @classmethod
    def check_threshold(cls, v: float) -> float:
        if not MIN_SIMILARITY_THRESHOLD <= v <= MAX_SIMILARITY_THRESHOLD:
            raise ValueError(
                f"similarity_threshold must be within "
                f"[{MIN_SIMILARITY_THRESHOLD}, {MAX_SIMILARITY_THRESHOLD}]",
            )
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
