"""Expose dependency helpers for scripts and embedding applications."""

from .clients import (
    build_authorizer_token_store,
    build_token_store,
    get_component_client,
    get_token_store,
)
from .config import get_app_settings

__all__ = [
    "build_authorizer_token_store",
    "build_token_store",
    "get_app_settings",
    "get_component_client",
    "get_token_store",
]
