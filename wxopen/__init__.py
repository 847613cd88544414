"""
Asynchronous client for the WeChat Open Platform third-party component APIs.
"""

__version__ = "0.1.0"

from .clients import (
    AuthorizerClient,
    CallbackTokenStore,
    ComponentClient,
    FileTokenStore,
    MemoryTokenStore,
    SQLiteTokenStore,
    TokenStore,
)
from .core.errors import (
    CredentialExpiredError,
    RemoteApiError,
    StoreAdapterError,
    TransportError,
    WeChatError,
)
from .models.token import AccessToken, AuthorizerToken, ComponentIdentity

__all__ = [
    "AccessToken",
    "AuthorizerClient",
    "AuthorizerToken",
    "CallbackTokenStore",
    "ComponentClient",
    "ComponentIdentity",
    "CredentialExpiredError",
    "FileTokenStore",
    "MemoryTokenStore",
    "RemoteApiError",
    "SQLiteTokenStore",
    "StoreAdapterError",
    "TokenStore",
    "TransportError",
    "WeChatError",
]
