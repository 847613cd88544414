"""
Component authorization APIs.

Every call carries the component access token and is retried once by the
client when WeChat reports the token as expired.
"""

from __future__ import annotations

from typing import Any, Dict

from wxopen.clients.component import ComponentClient


async def get_pre_auth_code(client: ComponentClient) -> Dict[str, Any]:
    """
    Obtain a pre-authorization code for the authorization page.

    Result::

        {"pre_auth_code": "Cx_Dk6qiBE0Dmx4EmlT3oRfArPvwSQ-oa3NL_fwHM7VI08r52wazoZX2Rhpz1dEw",
         "expires_in": 600}
    """
    return await client.post_component(
        "api_create_preauthcode",
        {"component_appid": client.component_appid},
    )


async def get_authorizer_refresh_token(
    client: ComponentClient, auth_code: str
) -> Dict[str, Any]:
    """
    Exchange the authorization code from the redirect for authorizer tokens.

    ``authorization_info.authorizer_refresh_token`` must be kept by the caller;
    it is the only way to obtain new authorizer access tokens later.
    """
    return await client.post_component(
        "api_query_auth",
        {
            "component_appid": client.component_appid,
            "authorization_code": auth_code,
        },
    )


async def get_authorizer_access_token(
    client: ComponentClient, authorizer_appid: str, authorizer_refresh_token: str
) -> Dict[str, Any]:
    """Refresh the access token of an authorizer with its refresh token."""
    return await client.post_component(
        "api_authorizer_token",
        {
            "component_appid": client.component_appid,
            "authorizer_appid": authorizer_appid,
            "authorizer_refresh_token": authorizer_refresh_token,
        },
    )


async def get_authorizer_info(
    client: ComponentClient, authorizer_appid: str
) -> Dict[str, Any]:
    """
    Account details of an authorizer: nickname, avatar, service and verify
    type, user name, QR code URL and the granted permission sets.
    """
    return await client.post_component(
        "api_get_authorizer_info",
        {
            "component_appid": client.component_appid,
            "authorizer_appid": authorizer_appid,
        },
    )


async def get_authorizer_option(
    client: ComponentClient, authorizer_appid: str, option_name: str
) -> Dict[str, Any]:
    """Read an authorizer option such as ``location_report`` or ``voice_recognize``."""
    return await client.post_component(
        "api_get_authorizer_option",
        {
            "component_appid": client.component_appid,
            "authorizer_appid": authorizer_appid,
            "option_name": option_name,
        },
    )


async def set_authorizer_option(
    client: ComponentClient,
    authorizer_appid: str,
    option_name: str,
    option_value: str,
) -> Dict[str, Any]:
    """Change an authorizer option; requires the matching permission set."""
    return await client.post_component(
        "api_set_authorizer_option",
        {
            "component_appid": client.component_appid,
            "authorizer_appid": authorizer_appid,
            "option_name": option_name,
            "option_value": option_value,
        },
    )


__all__ = [
    "get_authorizer_access_token",
    "get_authorizer_info",
    "get_authorizer_option",
    "get_authorizer_refresh_token",
    "get_pre_auth_code",
    "set_authorizer_option",
]
