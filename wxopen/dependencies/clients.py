"""
Factory functions to provide shared clients and token stores.
"""

from functools import lru_cache
from typing import Optional, Type

from wxopen.clients import (
    ComponentClient,
    FileTokenStore,
    MemoryTokenStore,
    SQLiteTokenStore,
    TokenStore,
)
from wxopen.core.config import AppSettings
from wxopen.models.token import AccessToken, AuthorizerToken
from wxopen.services import TokenCipher

from .config import get_app_settings


def build_token_store(
    settings: AppSettings,
    *,
    name: str = "component_access_token",
    model: Type[AccessToken] = AccessToken,
    suffix: Optional[str] = None,
) -> TokenStore:
    """Create the token store selected by ``WECHAT_TOKEN_STORE``.

    ``name`` keys the row in the sqlite backend; ``suffix`` is appended to the
    file backend's path so every token gets its own file.
    """
    store_settings = settings.token_store
    cipher = None
    if store_settings.encryption_secret:
        cipher = TokenCipher(secret=store_settings.encryption_secret)
    if store_settings.backend == "file":
        path = store_settings.path
        if suffix:
            path = f"{path}.{suffix}"
        return FileTokenStore(path, cipher=cipher, model=model)
    if store_settings.backend == "sqlite":
        return SQLiteTokenStore(
            store_settings.path, name=name, cipher=cipher, model=model
        )
    return MemoryTokenStore(environment=settings.environment)


def build_authorizer_token_store(
    settings: AppSettings, authorizer_appid: str
) -> TokenStore:
    """Store for one authorizer's token, keeping its rotated refresh token."""
    return build_token_store(
        settings,
        name=f"authorizer_access_token:{authorizer_appid}",
        model=AuthorizerToken,
        suffix=authorizer_appid,
    )


@lru_cache()
def get_token_store() -> TokenStore:
    """Provide the shared component token store."""
    return build_token_store(get_app_settings())


@lru_cache()
def get_component_client() -> ComponentClient:
    """Create a singleton component client."""
    return ComponentClient.from_settings(
        get_app_settings(), token_store=get_token_store()
    )


__all__ = [
    "build_authorizer_token_store",
    "build_token_store",
    "get_component_client",
    "get_token_store",
]
