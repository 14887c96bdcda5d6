"""
Application configuration using Pydantic Settings.

Supports environment variables and .env files for configuration.
"""

from functools import lru_cache
import json
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    env: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Remote destination API
    destination_api_url: str = "http://localhost:3001/api"
    destination_api_token: str | None = None
    destination_api_timeout: float = 30.0

    # Image field constraints (the message advertises 5MB, the limit is 500000 bytes)
    max_image_size_bytes: int = 500_000
    accepted_image_types: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
    ]

    # Rating field constraints
    rating_min: int = 1
    rating_max: int = 5
    rating_enforce_max: bool = False
    rating_default: int = 0

    # File upload limits
    max_upload_size_mb: int = 50

    # Form sessions
    max_sessions: int = Field(default=1000, ge=1)
    notification_history: int = Field(default=50, ge=1)

    @field_validator("cors_origins", "accepted_image_types", mode="before")
    @classmethod
    def parse_string_list(cls, v):
        if isinstance(v, str):
            value = v.strip()
            if value.startswith("["):
                try:
                    parsed = json.loads(value)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("destination_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
