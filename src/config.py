from __future__ import annotations

from functools import cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    paysera_base_url: str = "https://developers.paysera.com"
    http_timeout_seconds: float = 60.0
    http_retry_attempts: int = 3
    http_retry_backoff_seconds: float = 1.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
