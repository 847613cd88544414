"""
Calls made on behalf of an authorized official account.

The authorizer access token is minted by the component client from the
authorizer refresh token and follows the same cache-then-retry-once contract
as the component token.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from wxopen.clients.component import ComponentClient
from wxopen.clients.token_store import MemoryTokenStore, TokenStore
from wxopen.models.token import AccessToken, AuthorizerToken
from wxopen.services.token_manager import TokenManager
from wxopen.utils.http import post_json

logger = logging.getLogger(__name__)


class AuthorizerClient:
    """Agent for one authorizer account, driven by a ``ComponentClient``."""

    def __init__(
        self,
        component: ComponentClient,
        authorizer_appid: str,
        refresh_token: str,
        *,
        token_store: Optional[TokenStore] = None,
    ) -> None:
        self.component = component
        self.authorizer_appid = authorizer_appid
        self.refresh_token = refresh_token
        self.token_manager = TokenManager(
            fetch=self._fetch_authorizer_token,
            store=token_store or MemoryTokenStore(environment=component.environment),
            name=f"authorizer access token for {authorizer_appid}",
        )

    def _adopt_refresh_token(self, token: Optional[AccessToken]) -> None:
        """Take over a newer refresh token saved by another agent or process."""
        stored = getattr(token, "refresh_token", None)
        if stored and stored != self.refresh_token:
            logger.info("Authorizer %s refresh token rotated", self.authorizer_appid)
            self.refresh_token = stored

    async def _fetch_authorizer_token(self) -> AuthorizerToken:
        # Deferred: wxopen.endpoints imports the client modules.
        from wxopen.endpoints.component import get_authorizer_access_token

        self._adopt_refresh_token(await self.token_manager.store.load())
        payload = await get_authorizer_access_token(
            self.component, self.authorizer_appid, self.refresh_token
        )
        token = AuthorizerToken.from_authorizer_payload(payload)
        if not token.refresh_token:
            token = token.model_copy(update={"refresh_token": self.refresh_token})
        self._adopt_refresh_token(token)
        return token

    async def get_latest_token(self) -> AccessToken:
        token = await self.token_manager.resolve_token()
        self._adopt_refresh_token(token)
        return token

    async def call(
        self,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Call ``cgi-bin/<path>`` with the authorizer token.

        ``data`` is sent as a JSON POST body; without it the call is a GET.
        """

        async def _send(token: AccessToken) -> Dict[str, Any]:
            opts: Dict[str, Any] = post_json(data) if data is not None else {}
            self._adopt_refresh_token(token)
            opts["params"] = {**(params or {}), "access_token": token.value}
            url = f"{self.component.prefix}{path}"
            return await self.component.request_json(url, opts)

        return await self.token_manager.call_authenticated(_send)


__all__ = ["AuthorizerClient"]
