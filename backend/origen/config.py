"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All credentials come from environment variables (placeholders only in defaults)
    - get_settings() is cached (lru_cache) — single instance per process
    - Debounce and display windows are configurable, defaults match the UI contract (800ms / 3s)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Fixed accounts described by plain fields, assembled by fixed_accounts():
      env vars stay flat (ORIGEN_ADMIN_PASSWORD style) instead of JSON blobs
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://origen:origen@db:5432/origen"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Cross-instance sync
    sync_enabled: bool = True
    sync_transport: Literal["memory", "postgres", "none"] = "memory"
    sync_channel_name: str = "origen_app_sync"
    sync_echo_to_sender: bool = False

    # Settings persistence
    settings_debounce_ms: int = 800
    settings_saved_display_ms: int = 3000

    # Per-instance persisted state (session user, theme)
    local_state_path: str = ".origen_state.json"

    # Fixed accounts guaranteed at startup
    admin_username: str = "Punto"
    admin_password: str = "change-me-admin"
    admin_full_name: str = "Punto de Información"
    moderator_username: str = "Info"
    moderator_password: str = "change-me-info"
    moderator_full_name: str = "Info (Acceso Limitado)"

    # Accounts
    password_hash_rounds: int = 12

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def fixed_accounts(self) -> list[dict]:
        """Accounts the bootstrap must converge to, in creation order."""
        return [
            {
                "username": self.admin_username,
                "password": self.admin_password,
                "role": "admin",
                "full_name": self.admin_full_name,
            },
            {
                "username": self.moderator_username,
                "password": self.moderator_password,
                "role": "moderator",
                "full_name": self.moderator_full_name,
            },
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()
