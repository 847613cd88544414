"""Customer service messages sent to followers within the 48 hour window."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

if TYPE_CHECKING:
    from wxopen.clients.authorizer import AuthorizerClient


async def send_text(agent: AuthorizerClient, openid: str, text: str) -> Dict[str, Any]:
    return await agent.call(
        "message/custom/send",
        {"touser": openid, "msgtype": "text", "text": {"content": text}},
    )


async def send_news(
    agent: AuthorizerClient, openid: str, articles: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """
    Send a news message.

    Each article holds ``title``, ``description``, ``url`` and ``picurl``.
    """
    return await agent.call(
        "message/custom/send",
        {"touser": openid, "msgtype": "news", "news": {"articles": articles}},
    )


__all__ = ["send_news", "send_text"]
