"""Expose constructed client wrappers."""

from .authorizer import AuthorizerClient
from .component import ComponentClient
from .token_store import (
    CallbackTokenStore,
    FileTokenStore,
    MemoryTokenStore,
    SQLiteTokenStore,
    TokenStore,
)

__all__ = [
    "AuthorizerClient",
    "CallbackTokenStore",
    "ComponentClient",
    "FileTokenStore",
    "MemoryTokenStore",
    "SQLiteTokenStore",
    "TokenStore",
]
