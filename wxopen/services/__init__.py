"""Service layer exports."""

from .token_cipher import TokenCipher
from .token_manager import TokenFetcher, TokenManager

__all__ = [
    "TokenCipher",
    "TokenFetcher",
    "TokenManager",
]
