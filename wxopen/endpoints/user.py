"""Follower information APIs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from wxopen.clients.authorizer import AuthorizerClient


async def get_user(
    agent: AuthorizerClient, openid: str, lang: str = "zh_CN"
) -> Dict[str, Any]:
    """Profile of one follower: nickname, sex, city, subscribe time and so on."""
    return await agent.call("user/info", params={"openid": openid, "lang": lang})


async def get_followers(
    agent: AuthorizerClient, next_openid: Optional[str] = None
) -> Dict[str, Any]:
    """
    One page (up to 10000 openids) of the follower list.

    Pass the previous page's ``next_openid`` to continue.
    """
    params = {"next_openid": next_openid} if next_openid else None
    return await agent.call("user/get", params=params)


__all__ = ["get_followers", "get_user"]
