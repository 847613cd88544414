"""WeChat callback server addresses."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from wxopen.clients.authorizer import AuthorizerClient


async def get_ip(agent: AuthorizerClient) -> Dict[str, Any]:
    """Result: ``{"ip_list": ["127.0.0.1", "127.0.0.1"]}``."""
    return await agent.call("getcallbackip")


__all__ = ["get_ip"]
