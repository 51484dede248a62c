from __future__ import annotations

from functools import lru_cache
from typing import ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .shard import constants as C


class Settings(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(env_nested_delimiter="__")

    krea_api_key: str | None = Field(default=None, description="API key for the Krea API")
    krea_api_base_url: str = Field(default=C.DEFAULT_BASE_URL, description="Base URL for the Krea API")
    krea_http_timeout: float = Field(default=C.DEFAULT_HTTP_TIMEOUT_S, gt=0, description="Per-request HTTP timeout in seconds")

    log_level: str = Field(default="INFO", description="Log level for the server (loguru level name)")

    @property
    def has_api_key(self) -> bool:
        """Determine if the Krea API can be used based on available credentials."""
        return bool(self.krea_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
