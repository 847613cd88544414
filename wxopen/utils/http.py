"""HTTP utilities for building JSON requests and reading WeChat envelopes."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping

from wxopen.core.errors import (
    TOKEN_EXPIRED_CODE,
    CredentialExpiredError,
    RemoteApiError,
)


def post_json(data: Any) -> Dict[str, Any]:
    """Request options for a JSON POST; WeChat rejects \\u-escaped text."""
    return {
        "method": "POST",
        "content": json.dumps(data, ensure_ascii=False).encode("utf-8"),
        "headers": {"Content-Type": "application/json"},
    }


def merge_request_options(
    defaults: Mapping[str, Any] | None,
    overrides: Mapping[str, Any] | None,
) -> Dict[str, Any]:
    """
    Combine client-wide defaults with per-call options.

    Per-call values win, except ``headers`` which are merged key by key.
    """
    options: Dict[str, Any] = dict(defaults or {})
    if options.get("headers") is not None:
        options["headers"] = dict(options["headers"])
    for key, value in (overrides or {}).items():
        if key != "headers":
            options[key] = value
        elif value:
            headers = options.get("headers") or {}
            headers.update(value)
            options["headers"] = headers
    return options


def parse_envelope(payload: Any) -> Dict[str, Any]:
    """Return the payload when ``errcode`` is absent or zero, raise otherwise."""
    if not isinstance(payload, dict):
        raise RemoteApiError(
            None, "Malformed response envelope; expected a JSON object."
        )

    raw_code = payload.get("errcode", 0)
    try:
        errcode = int(raw_code or 0)
    except (TypeError, ValueError):
        raise RemoteApiError(
            None, f"Malformed errcode in response envelope: {raw_code!r}", payload
        ) from None

    if errcode == 0:
        return payload

    errmsg = str(payload.get("errmsg", "Unknown error"))
    if errcode == TOKEN_EXPIRED_CODE:
        raise CredentialExpiredError(errcode, errmsg, payload)
    raise RemoteApiError(errcode, errmsg, payload)


__all__ = ["merge_request_options", "parse_envelope", "post_json"]
