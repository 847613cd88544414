try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json
from pathlib import Path

import pytest

from wxopen.clients import AuthorizerClient, ComponentClient, SQLiteTokenStore
from wxopen.core.errors import RemoteApiError
from wxopen.endpoints import ip, menu, message, user
from wxopen.models.token import AuthorizerToken

AUTHORIZER_TOKEN_PATH = "/cgi-bin/component/api_authorizer_token"

pytestmark = pytest.mark.anyio("asyncio")


def _agent(fake_wechat) -> AuthorizerClient:
    fake_wechat.queue(
        AUTHORIZER_TOKEN_PATH,
        {
            "authorizer_access_token": "auth-token-1",
            "expires_in": 7200,
            "authorizer_refresh_token": "refresh-2",
        },
        {
            "authorizer_access_token": "auth-token-2",
            "expires_in": 7200,
            "authorizer_refresh_token": "refresh-2",
        },
    )
    component = ComponentClient(
        "wx-component", "component-secret", "ticket", transport=fake_wechat.transport
    )
    return AuthorizerClient(component, "wx-authorizer", "refresh-1")


async def test_authorizer_token_is_minted_once_and_refresh_token_rotated(
    fake_wechat,
) -> None:
    agent = _agent(fake_wechat)

    await menu.get_menu(agent)
    await ip.get_ip(agent)

    (token_request,) = fake_wechat.calls(AUTHORIZER_TOKEN_PATH)
    assert json.loads(token_request.content) == {
        "component_appid": "wx-component",
        "authorizer_appid": "wx-authorizer",
        "authorizer_refresh_token": "refresh-1",
    }
    assert agent.refresh_token == "refresh-2"
    for path in ("/cgi-bin/menu/get", "/cgi-bin/getcallbackip"):
        (request,) = fake_wechat.calls(path)
        assert request.method == "GET"
        assert request.url.params["access_token"] == "auth-token-1"


async def test_create_menu_posts_menu_structure(fake_wechat) -> None:
    agent = _agent(fake_wechat)
    button = {"button": [{"type": "click", "name": "今日歌曲", "key": "V1001"}]}

    await menu.create_menu(agent, button)
    await menu.remove_menu(agent)

    (request,) = fake_wechat.calls("/cgi-bin/menu/create")
    assert request.method == "POST"
    assert json.loads(request.content) == button
    assert "今日歌曲" in request.content.decode("utf-8")
    assert len(fake_wechat.calls("/cgi-bin/menu/delete")) == 1


async def test_user_endpoints_pass_query_parameters(fake_wechat) -> None:
    fake_wechat.queue("/cgi-bin/user/info", {"openid": "o-1", "nickname": "Band"})
    agent = _agent(fake_wechat)

    profile = await user.get_user(agent, "o-1")
    await user.get_followers(agent)
    await user.get_followers(agent, next_openid="o-2")

    assert profile["nickname"] == "Band"
    (info_request,) = fake_wechat.calls("/cgi-bin/user/info")
    assert info_request.url.params["openid"] == "o-1"
    assert info_request.url.params["lang"] == "zh_CN"
    first_page, second_page = fake_wechat.calls("/cgi-bin/user/get")
    assert "next_openid" not in first_page.url.params
    assert second_page.url.params["next_openid"] == "o-2"


async def test_custom_messages_build_expected_payloads(fake_wechat) -> None:
    agent = _agent(fake_wechat)
    articles = [{"title": "Happy Day", "url": "https://example.com/a"}]

    await message.send_text(agent, "o-1", "你好")
    await message.send_news(agent, "o-1", articles)

    text_request, news_request = fake_wechat.calls("/cgi-bin/message/custom/send")
    assert json.loads(text_request.content) == {
        "touser": "o-1",
        "msgtype": "text",
        "text": {"content": "你好"},
    }
    assert json.loads(news_request.content)["news"] == {"articles": articles}


async def test_expired_authorizer_token_is_refreshed_once(fake_wechat) -> None:
    fake_wechat.queue(
        "/cgi-bin/menu/get",
        {"errcode": 42001, "errmsg": "access_token expired"},
        {"menu": {"button": []}},
    )
    agent = _agent(fake_wechat)

    result = await menu.get_menu(agent)

    assert result == {"menu": {"button": []}}
    used = [r.url.params["access_token"] for r in fake_wechat.calls("/cgi-bin/menu/get")]
    assert used == ["auth-token-1", "auth-token-2"]
    assert len(fake_wechat.calls(AUTHORIZER_TOKEN_PATH)) == 2


async def test_authorizer_api_errors_surface(fake_wechat) -> None:
    fake_wechat.queue(
        "/cgi-bin/message/custom/send",
        {"errcode": 45015, "errmsg": "response out of time limit"},
    )
    agent = _agent(fake_wechat)

    with pytest.raises(RemoteApiError) as excinfo:
        await message.send_text(agent, "o-1", "late reply")

    assert excinfo.value.code == 45015


def _shared_store(db_path: Path) -> SQLiteTokenStore:
    return SQLiteTokenStore(
        str(db_path), name="authorizer_access_token:wx-authorizer", model=AuthorizerToken
    )


async def test_rotated_refresh_token_is_picked_up_from_shared_store(
    fake_wechat, tmp_path: Path
) -> None:
    fake_wechat.queue(
        AUTHORIZER_TOKEN_PATH,
        {
            "authorizer_access_token": "auth-token-1",
            "expires_in": 7200,
            "authorizer_refresh_token": "refresh-NEW",
        },
        {
            "authorizer_access_token": "auth-token-2",
            "expires_in": 7200,
            "authorizer_refresh_token": "refresh-NEWER",
        },
    )
    component = ComponentClient(
        "wx-component", "component-secret", "ticket", transport=fake_wechat.transport
    )
    db_path = tmp_path / "tokens.db"
    first = AuthorizerClient(
        component, "wx-authorizer", "refresh-OLD", token_store=_shared_store(db_path)
    )
    await first.get_latest_token()

    restarted = AuthorizerClient(
        component, "wx-authorizer", "refresh-OLD", token_store=_shared_store(db_path)
    )
    token = await restarted.get_latest_token()

    assert token.value == "auth-token-1"
    assert restarted.refresh_token == "refresh-NEW"

    await restarted.token_manager.acquire_token()

    sent = [
        json.loads(request.content)["authorizer_refresh_token"]
        for request in fake_wechat.calls(AUTHORIZER_TOKEN_PATH)
    ]
    assert sent == ["refresh-OLD", "refresh-NEW"]
    stored = await _shared_store(db_path).load()
    assert stored.refresh_token == "refresh-NEWER"


async def test_refetch_reads_refresh_token_saved_by_another_agent(
    fake_wechat, tmp_path: Path
) -> None:
    fake_wechat.queue(
        AUTHORIZER_TOKEN_PATH,
        {"authorizer_access_token": "auth-token-9", "expires_in": 7200},
    )
    component = ComponentClient(
        "wx-component", "component-secret", "ticket", transport=fake_wechat.transport
    )
    store = _shared_store(tmp_path / "tokens.db")
    await store.save(
        AuthorizerToken(value="stale", expires_in=7200, refresh_token="refresh-OTHER")
    )
    agent = AuthorizerClient(
        component, "wx-authorizer", "refresh-OLD", token_store=store
    )

    token = await agent.token_manager.acquire_token()

    (request,) = fake_wechat.calls(AUTHORIZER_TOKEN_PATH)
    assert json.loads(request.content)["authorizer_refresh_token"] == "refresh-OTHER"
    assert token.refresh_token == "refresh-OTHER"
    assert (await store.load()).refresh_token == "refresh-OTHER"
