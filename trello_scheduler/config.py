"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env at the project root (parent of trello_scheduler/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./scheduler.db"
    store_backend: str = "sql"  # "sql" or "memory"
    # Trello: TRELLO_API_KEY is the application key; the user token comes with each scheduled action
    trello_api_key: str = ""
    trello_base_url: str = "https://api.trello.com/1"
    trello_timeout_seconds: float = 20.0
    retention_days: int = 7
    sweep_interval_seconds: int = 60
    store_prune_interval_minutes: int = 60
    cors_origins: str = "*"
    log_level: str = "INFO"

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("trello_api_key", "trello_base_url", mode="after")
    @classmethod
    def strip_trello(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("store_backend", mode="after")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in ("sql", "memory"):
            raise ValueError(f"STORE_BACKEND must be 'sql' or 'memory', got {v!r}")
        return v

    @property
    def retention_seconds(self) -> int:
        return self.retention_days * 24 * 60 * 60

    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]


settings = Settings()
