"""Parser settings loaded from environment variables via pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="THREADTREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = "https://reddit.com"
    # Deeper replies are dropped. None removes the cutoff, but trees nested
    # past ~250 levels cannot be serialized or compared
    max_depth: int | None = 200
    keep_more_stubs: bool = True
    # None or "" logs to stderr only
    log_dir: str | None = "./data/logs"
