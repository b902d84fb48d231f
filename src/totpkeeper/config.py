"""Runtime configuration loaded from environment variables and an optional .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORE_PATH = Path.home() / ".totpkeeper" / "accounts.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TOTPKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Code generation
    time_step: int = Field(default=30, ge=1)
    digits: int = Field(default=6, ge=1, le=10)

    # Refresh loop
    tick_interval: float = Field(default=0.1, gt=0)

    # Storage
    store_path: Path = DEFAULT_STORE_PATH

    # Logging
    log_level: str = "WARNING"


settings = Settings()
