# config.py – Chargement des paramètres via pydantic-settings

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # — API Key —
    RIOT_API_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("RIOT_API_KEY", "API_KEY"),
    )

    # — Riot API Configuration —
    DEFAULT_REGION: str = "euw1"

    # — Redis —
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL: Optional[int] = None  # None = pas d'expiration, flush explicite

    # — Logging —
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
