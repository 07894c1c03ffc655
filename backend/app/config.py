"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - items_count is fixed at startup; page size is a domain constant, not a setting

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box with `uvicorn app.main:app`
    - Client timeouts live here too: the list client and the server share one config surface
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from app.core.domain_types import DEFAULT_ITEMS_COUNT


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Collection
    items_count: int = Field(DEFAULT_ITEMS_COUNT, ge=0)

    # API
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000"]

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """'api/' and '/api/' both become '/api'."""
        v = v.strip("/")
        return f"/{v}" if v else ""

    # Client
    api_url: str = "http://localhost:5000/api"
    save_timeout_seconds: float = 10.0
    reset_timeout_seconds: float = 5.0

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
