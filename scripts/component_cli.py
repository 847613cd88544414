"""Command line helpers for operating the component client.

Three subcommands are available:

1. ``check`` loads ``AppSettings`` from the given ``.env`` file and reports
   missing or malformed configuration before the services start failing.
2. ``token`` prints the current component access token, fetching one when the
   configured token store is empty (or always, with ``--force``).
3. ``auth-url`` prints the authorization page URL for an authorizer's admin,
   requesting a pre-auth code when none is supplied.

Example usages::

    python -m scripts.component_cli check --env-file /opt/wxopen/.env

    python -m scripts.component_cli token --force

    python -m scripts.component_cli auth-url \
        --redirect-uri https://example.com/wechat/authorized
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Awaitable, Callable

import httpx
from pydantic import ValidationError

from wxopen.clients import ComponentClient
from wxopen.core.config import AppSettings, _load_env_file
from wxopen.core.errors import WeChatError
from wxopen.core.logging import configure_logging
from wxopen.dependencies import build_token_store
from wxopen.endpoints.component import get_pre_auth_code

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_API_ERROR = 4
EXIT_RUNTIME_ERROR = 5


def _load_settings(env_file: Path) -> AppSettings:
    """Ensure required settings can be loaded from the supplied env file."""
    _load_env_file(str(env_file))
    return AppSettings()  # type: ignore[call-arg]


def _build_client(
    settings: AppSettings, transport: httpx.AsyncBaseTransport | None = None
) -> ComponentClient:
    return ComponentClient.from_settings(
        settings,
        token_store=build_token_store(settings),
        transport=transport,
    )


async def _print_token(client: ComponentClient, force: bool) -> int:
    if force:
        token = await client.get_component_token()
    else:
        token = await client.get_latest_token()
    print(token.value)
    print(f"expires_in={token.expires_in}")
    return EXIT_OK


async def _print_auth_url(
    client: ComponentClient, redirect_uri: str, pre_auth_code: str | None
) -> int:
    if not pre_auth_code:
        result = await get_pre_auth_code(client)
        pre_auth_code = result["pre_auth_code"]
    print(client.generate_auth_url(pre_auth_code, redirect_uri))
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect configuration and tokens of the WeChat component."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env in the repo root).",
        )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate settings without contacting WeChat.",
    )
    add_common_arguments(check_parser)

    token_parser = subparsers.add_parser(
        "token",
        help="Print the component access token.",
    )
    add_common_arguments(token_parser)
    token_parser.add_argument(
        "--force",
        action="store_true",
        help="Request a new token even when one is stored.",
    )

    auth_parser = subparsers.add_parser(
        "auth-url",
        help="Print the authorization page URL.",
    )
    add_common_arguments(auth_parser)
    auth_parser.add_argument(
        "--redirect-uri",
        required=True,
        help="URL WeChat redirects to once the admin has authorized.",
    )
    auth_parser.add_argument(
        "--pre-auth-code",
        default=None,
        help="Existing pre-auth code; a new one is requested when omitted.",
    )

    return parser


def _ensure_env_file(env_file: Path) -> None:
    if not env_file.exists():
        raise FileNotFoundError(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool."
        )


def main(
    argv: list[str] | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path = args.env_file

    try:
        _ensure_env_file(env_file)
        settings = _load_settings(env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    configure_logging(settings.log_level)

    command: str = args.command
    if command == "check":
        print("Settings OK.")
        return EXIT_OK

    client = _build_client(settings, transport)
    handlers: dict[str, Callable[[], Awaitable[int]]] = {
        "token": lambda: _print_token(client, args.force),
        "auth-url": lambda: _print_auth_url(
            client, args.redirect_uri, args.pre_auth_code
        ),
    }
    try:
        return asyncio.run(handlers[command]())
    except WeChatError as exc:
        print(f"WeChat request failed: {exc}", file=sys.stderr)
        return EXIT_API_ERROR


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
