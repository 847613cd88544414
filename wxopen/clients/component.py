"""
WeChat Open Platform component client.

Builds on the component identity (appid, appsecret and the verify ticket
pushed by WeChat) to obtain the component access token, keeps it in a token
store and attaches it to every component API call.

Single-process usage only needs the identity::

    client = ComponentClient("component_appid", "component_appsecret", "ticket")

When several processes or hosts share the component, keep the token in a
shared location by passing hooks or a store::

    client = ComponentClient(
        "component_appid",
        "component_appsecret",
        "ticket",
        load_token=read_token_from_redis,
        save_token=write_token_to_redis,
    )
"""

from __future__ import annotations

import logging
import os
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import httpx

from wxopen.clients.token_store import (
    CallbackTokenStore,
    LoadHook,
    MemoryTokenStore,
    SaveHook,
    TokenStore,
)
from wxopen.core.config import AppSettings
from wxopen.core.errors import TransportError
from wxopen.models.token import AccessToken, ComponentIdentity
from wxopen.services.token_manager import TokenManager
from wxopen.utils.http import merge_request_options, parse_envelope, post_json

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ComponentClient:
    """Authenticated access to the ``cgi-bin/component`` APIs."""

    API_PREFIX = "https://api.weixin.qq.com/cgi-bin/"
    AUTH_PAGE_URL = "https://mp.weixin.qq.com/cgi-bin/componentloginpage"

    def __init__(
        self,
        component_appid: str,
        component_appsecret: str,
        component_verify_ticket: str,
        load_token: Optional[LoadHook] = None,
        save_token: Optional[SaveHook] = None,
        *,
        token_store: Optional[TokenStore] = None,
        http_options: Optional[Dict[str, Any]] = None,
        environment: Optional[str] = None,
        api_prefix: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.identity = ComponentIdentity(
            component_appid=component_appid,
            component_appsecret=component_appsecret,
            component_verify_ticket=component_verify_ticket,
        )
        self.prefix = api_prefix or self.API_PREFIX
        self.defaults: Dict[str, Any] = dict(http_options or {})
        self._transport = transport
        self.environment = environment or os.environ.get("APP_ENV", "development")

        if token_store is None:
            if (load_token is None) != (save_token is None):
                raise ValueError(
                    "load_token and save_token must be provided together."
                )
            if load_token is not None and save_token is not None:
                token_store = CallbackTokenStore(load_token, save_token)
            else:
                token_store = MemoryTokenStore(environment=self.environment)
        self.token_manager = TokenManager(
            fetch=self._fetch_component_token,
            store=token_store,
            name="component access token",
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        token_store: Optional[TokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ComponentClient":
        """Build a client from ``AppSettings``."""
        return cls(
            settings.component.appid,
            settings.component.appsecret,
            settings.component.verify_ticket,
            token_store=token_store,
            http_options=settings.http.as_request_options(),
            environment=settings.environment,
            api_prefix=settings.http.api_base_url,
            transport=transport,
        )

    @property
    def component_appid(self) -> str:
        return self.identity.component_appid

    def set_opts(self, opts: Dict[str, Any]) -> None:
        """Replace the default request options, e.g. ``{"timeout": 15.0}``."""
        self.defaults = dict(opts)

    async def request(
        self, url: str, opts: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """Send one HTTP request with the defaults merged under ``opts``."""
        options = merge_request_options(self.defaults, opts)
        method = options.pop("method", "GET")
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.request(method, url, **options)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            # Tokens travel in the query string; never log or raise the full URL.
            endpoint = str(exc.request.url).split("?", 1)[0]
            status = exc.response.status_code
            logger.error("WeChat answered HTTP %s for %s", status, endpoint)
            raise TransportError(
                f"WeChat answered HTTP {status} for {endpoint}"
            ) from exc
        except httpx.HTTPError as exc:
            endpoint = url.split("?", 1)[0]
            reason = type(exc).__name__
            logger.error("Request to %s failed: %s", endpoint, reason)
            raise TransportError(f"Request to {endpoint} failed: {reason}") from exc
        return response

    async def request_json(
        self, url: str, opts: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send a request and return the success envelope."""
        response = await self.request(url, opts)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        return parse_envelope(payload)

    async def _fetch_component_token(self) -> AccessToken:
        url = f"{self.prefix}component/api_component_token"
        payload = await self.request_json(
            url,
            post_json(
                {
                    "component_appid": self.identity.component_appid,
                    "component_appsecret": self.identity.component_appsecret,
                    "component_verify_ticket": self.identity.component_verify_ticket,
                }
            ),
        )
        return AccessToken.from_component_payload(payload)

    async def get_component_token(self) -> AccessToken:
        """Fetch a new component access token and save it through the store."""
        return await self.token_manager.acquire_token()

    async def get_latest_token(self) -> AccessToken:
        """Return the stored token, fetching one when none has been saved yet."""
        return await self.token_manager.resolve_token()

    async def call_authenticated(
        self, endpoint_fn: Callable[..., Awaitable[T]], *args, **kwargs
    ) -> T:
        return await self.token_manager.call_authenticated(endpoint_fn, *args, **kwargs)

    async def post_component(
        self, operation: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """POST ``data`` to ``component/<operation>`` with token and expiry retry."""

        async def _send(token: AccessToken) -> Dict[str, Any]:
            url = (
                f"{self.prefix}component/{operation}"
                f"?component_access_token={token.value}"
            )
            return await self.request_json(url, post_json(data))

        return await self.call_authenticated(_send)

    def generate_auth_url(self, pre_auth_code: str, redirect_uri: str) -> str:
        """Authorization page URL that the authorizer's admin is redirected to."""
        return (
            f"{self.AUTH_PAGE_URL}?component_appid={self.identity.component_appid}"
            f"&pre_auth_code={pre_auth_code}&redirect_uri={redirect_uri}"
        )

    build_auth_url = generate_auth_url


__all__ = ["ComponentClient"]
