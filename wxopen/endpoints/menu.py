"""Custom menu APIs of an authorized official account."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from wxopen.clients.authorizer import AuthorizerClient


async def create_menu(agent: AuthorizerClient, menu: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create the custom menu.

    ``menu`` is the full structure, e.g.
    ``{"button": [{"type": "click", "name": "今日歌曲", "key": "V1001_TODAY_MUSIC"}]}``.
    """
    return await agent.call("menu/create", menu)


async def get_menu(agent: AuthorizerClient) -> Dict[str, Any]:
    return await agent.call("menu/get")


async def remove_menu(agent: AuthorizerClient) -> Dict[str, Any]:
    return await agent.call("menu/delete")


__all__ = ["create_menu", "get_menu", "remove_menu"]
