"""
Access token lifecycle: fetch-or-reuse, persist through a store, retry once.

The manager never tracks expiry timestamps. A cached token is trusted until
WeChat answers ``42001``; at that point a fresh token is forced and the call is
replayed exactly once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from wxopen.core.errors import CredentialExpiredError
from wxopen.models.token import AccessToken

if TYPE_CHECKING:
    from wxopen.clients.token_store import TokenStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

TokenFetcher = Callable[[], Awaitable[AccessToken]]


class TokenManager:
    """Resolve tokens for authenticated calls and recover from expiry."""

    max_retries = 1

    def __init__(
        self, *, fetch: TokenFetcher, store: TokenStore, name: str = "access token"
    ) -> None:
        self._fetch = fetch
        self._store = store
        self._name = name
        self._acquire_lock = asyncio.Lock()

    @property
    def store(self) -> TokenStore:
        return self._store

    async def acquire_token(self) -> AccessToken:
        """Fetch a new token from WeChat and overwrite the stored one."""
        logger.info("Requesting new %s", self._name)
        token = await self._fetch()
        await self._store.save(token)
        logger.info("Stored new %s (expires in %ss)", self._name, token.expires_in)
        return token

    async def resolve_token(self) -> AccessToken:
        """Return the stored token, acquiring one only when the store is empty."""
        token = await self._store.load()
        if token is not None:
            return token

        # Concurrent resolvers share one acquisition; re-check once the lock is ours.
        async with self._acquire_lock:
            token = await self._store.load()
            if token is not None:
                return token
            return await self.acquire_token()

    async def call_authenticated(
        self, endpoint_fn: Callable[..., Awaitable[T]], *args, **kwargs
    ) -> T:
        """
        Invoke ``endpoint_fn(token, *args, **kwargs)`` with a resolved token.

        ``endpoint_fn`` performs one HTTP call and raises on an error envelope.
        A ``CredentialExpiredError`` on the first attempt forces a new token
        and a single replay; the replay's outcome is returned or raised as-is.
        """
        token = await self.resolve_token()
        retries = 0
        while True:
            try:
                return await endpoint_fn(token, *args, **kwargs)
            except CredentialExpiredError as exc:
                if retries >= self.max_retries:
                    raise
                retries += 1
                logger.warning(
                    "%s rejected by WeChat (errcode=%s), refreshing and retrying once",
                    self._name,
                    exc.code,
                )
                token = await self.acquire_token()


__all__ = ["TokenFetcher", "TokenManager"]
