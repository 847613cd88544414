"""Exception hierarchy shared by the client, the token manager and the stores."""

from __future__ import annotations

from typing import Any, Dict, Optional

TOKEN_EXPIRED_CODE = 42001


class WeChatError(Exception):
    """Base class for every error raised by this package."""


class TransportError(WeChatError):
    """Raised when the HTTP exchange itself fails (connection, timeout, status)."""


class RemoteApiError(WeChatError):
    """Raised when the response envelope carries a non-zero ``errcode``."""

    def __init__(
        self,
        code: Optional[int],
        message: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.payload = payload
        super().__init__(f"WeChat API error {code}: {message}")


class CredentialExpiredError(RemoteApiError):
    """The access token used for the call is invalid or expired (42001)."""


class StoreAdapterError(WeChatError):
    """Raised by the bundled token stores when their backing storage fails."""


__all__ = [
    "CredentialExpiredError",
    "RemoteApiError",
    "StoreAdapterError",
    "TOKEN_EXPIRED_CODE",
    "TransportError",
    "WeChatError",
]
