"""
Domain models for access tokens and the component identity.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

_WIRE_VALUE_KEYS = (
    "value",
    "component_access_token",
    "authorizer_access_token",
    "access_token",
)


class ComponentIdentity(BaseModel):
    """Long-lived credentials of the third-party platform application."""

    model_config = ConfigDict(frozen=True)

    component_appid: str
    component_appsecret: str
    component_verify_ticket: str


class AccessToken(BaseModel):
    """A short-lived bearer credential shared by every call of one client."""

    value: str = Field(..., description="Token string sent in the query string.")
    expires_in: int = Field(..., description="Validity window reported by WeChat.")

    @classmethod
    def coerce(cls, obj: Any) -> Optional["AccessToken"]:
        """
        Normalize whatever a token store handed back.

        Accepts ``None``, an ``AccessToken`` or a mapping in either the stored
        shape (``value``) or one of the upstream wire shapes.
        """
        if obj is None or isinstance(obj, cls):
            return obj
        if isinstance(obj, BaseModel):
            obj = obj.model_dump()
        if not isinstance(obj, dict):
            raise TypeError(f"Cannot build an access token from {type(obj)!r}")
        if obj.get("value"):
            return cls.model_validate(obj)
        for key in _WIRE_VALUE_KEYS[1:]:
            if obj.get(key):
                return cls(value=obj[key], expires_in=int(obj.get("expires_in") or 0))
        return None

    @classmethod
    def from_component_payload(cls, payload: dict) -> "AccessToken":
        return cls(
            value=payload["component_access_token"],
            expires_in=int(payload["expires_in"]),
        )


class AuthorizerToken(AccessToken):
    """Authorizer access token; WeChat may rotate the refresh token with it."""

    refresh_token: Optional[str] = None

    @classmethod
    def from_authorizer_payload(cls, payload: dict) -> "AuthorizerToken":
        return cls(
            value=payload["authorizer_access_token"],
            expires_in=int(payload["expires_in"]),
            refresh_token=payload.get("authorizer_refresh_token"),
        )


__all__ = ["AccessToken", "AuthorizerToken", "ComponentIdentity"]
