"""
Client configuration models and helpers.

Centralizes settings management so the component client, the token stores and
the command line helpers share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class ComponentSettings(BaseSettings):
    """Identity of the third-party platform application."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    appid: str = Field(..., validation_alias="WECHAT_COMPONENT_APPID")
    appsecret: str = Field(..., validation_alias="WECHAT_COMPONENT_APPSECRET")
    verify_ticket: str = Field(
        ...,
        validation_alias="WECHAT_COMPONENT_VERIFY_TICKET",
        description="Rotating ticket pushed to the callback URL every ten minutes.",
    )


class HttpSettings(BaseSettings):
    """Defaults applied to every outgoing HTTP request."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    timeout_seconds: float = Field(10.0, validation_alias="WECHAT_HTTP_TIMEOUT")
    api_base_url: str = Field(
        "https://api.weixin.qq.com/cgi-bin/", validation_alias="WECHAT_API_BASE_URL"
    )

    @field_validator("api_base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        """Endpoint paths are appended directly to the base URL."""
        return value if value.endswith("/") else f"{value}/"

    def as_request_options(self) -> Dict[str, Any]:
        return {"timeout": self.timeout_seconds}


class TokenStoreSettings(BaseSettings):
    """Where the component access token is cached between calls."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    backend: Literal["memory", "file", "sqlite"] = Field(
        "memory", validation_alias="WECHAT_TOKEN_STORE"
    )
    path: str = Field(
        "data/component_access_token",
        validation_alias="WECHAT_TOKEN_STORE_PATH",
        description="File path for the file store, database path for sqlite.",
    )
    encryption_secret: Optional[str] = Field(
        None,
        validation_alias="WECHAT_TOKEN_SECRET",
        description="Optional secret used to encrypt tokens at rest.",
    )


class AppSettings(BaseSettings):
    """Root settings object for the component client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    component: ComponentSettings = Field(default_factory=ComponentSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    token_store: TokenStoreSettings = Field(default_factory=TokenStoreSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "ComponentSettings",
    "HttpSettings",
    "TokenStoreSettings",
    "get_settings",
]
