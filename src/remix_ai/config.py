"""This module contains the application configuration variables."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL: str = "gemini-2.5-flash-image-preview"
DOWNLOAD_FILENAME: str = "remix-ai-generated.png"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Static credential for the generation service
    api_key: Optional[str] = Field(default=None, validation_alias="API_KEY")
    model: str = Field(default=DEFAULT_MODEL, validation_alias="REMIX_MODEL")

    host: str = Field(default="0.0.0.0", validation_alias="REMIX_HOST")
    port: int = Field(default=8000, validation_alias="REMIX_PORT")
    cors_allow_origins: List[str] = Field(
        default=["*"], validation_alias="REMIX_CORS_ORIGINS"
    )
    log_level: str = Field(default="INFO", validation_alias="REMIX_LOG_LEVEL")


@lru_cache
def get_settings() -> Settings:
    """Read the settings once; they are never refreshed."""
    return Settings()
