from __future__ import annotations

from functools import cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: str | None = None
    request_timeout_seconds: float = 10.0
    retry_attempts: int = 0
    retry_backoff_seconds: float = 1.0

    reference_asset_id: str = "bitcoin"
    fiat_codes: tuple[str, ...] = ("usd", "eur", "uzs", "rub", "gbp", "try", "kzt")
    default_target_code: str = "usd"
    search_limit: int = 12

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
