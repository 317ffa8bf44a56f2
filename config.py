"""
Application settings, read from environment variables and an optional .env file.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    data_dir: str = "./data"
    animals_collection: str = "animals"

    # Auth
    auth_secret: str = "change-me"

    # API
    cors_origins: List[str] = ["*"]
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
