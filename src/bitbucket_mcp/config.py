"""Configuration management for the Bitbucket MCP server."""

import os
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.bitbucket.org/2.0"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env" if os.getenv("ENVIRONMENT") != "test" else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = "bitbucket-mcp-server"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Bitbucket credentials (username + app password)
    bitbucket_username: Optional[str] = Field(default=None)
    bitbucket_app_password: Optional[str] = Field(default=None)

    # Bitbucket API
    bitbucket_api_url: str = Field(default=DEFAULT_API_URL)
    request_timeout: float = Field(default=30.0, gt=0)

    @field_validator("bitbucket_username", "bitbucket_app_password", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("bitbucket_api_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        return str(v).rstrip("/")

    def has_credentials(self) -> bool:
        """Whether both the username and the app password are configured."""
        return bool(self.bitbucket_username and self.bitbucket_app_password)

    def get_log_level(self) -> str:
        return "DEBUG" if self.debug else "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
