from __future__ import annotations

from functools import lru_cache
from typing import Any

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logger.bind(module="config")


class ClientConfig(BaseSettings):
    """Connection settings for a single Mastodon server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    server: str = Field(default="", alias="MASTODON_SERVER")
    client_id: str | None = Field(default=None, alias="MASTODON_CLIENT_ID")
    client_secret: str | None = Field(default=None, alias="MASTODON_CLIENT_SECRET")
    access_token: str | None = Field(default=None, alias="MASTODON_ACCESS_TOKEN")
    user_agent: str = Field(default="mastoclient", alias="MASTODON_USER_AGENT")
    timeout_seconds: float | None = Field(default=None, alias="MASTODON_TIMEOUT_SECONDS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    def export_safe(self) -> dict[str, Any]:
        """Return non-sensitive settings for debugging/logging."""
        return {
            "server": self.server,
            "client_id": self.client_id,
            "has_access_token": bool(self.access_token),
            "user_agent": self.user_agent,
            "timeout_seconds": self.timeout_seconds,
        }


@lru_cache
def get_config() -> ClientConfig:
    """Load and cache client configuration from the environment."""
    config = ClientConfig()
    log.info("Client config initialised: {}", config.export_safe())
    return config
