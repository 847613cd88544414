"""
Token store adapters.

A store is anything with ``async load()`` and ``async save(token)``. The token
manager treats it as the single source of truth for "is there a cached token"
and never inspects expiry itself.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, Type, runtime_checkable

from pydantic import ValidationError

from wxopen.core.errors import StoreAdapterError
from wxopen.models.token import AccessToken
from wxopen.services.token_cipher import TokenCipher

logger = logging.getLogger(__name__)

LoadHook = Callable[[], Any]
SaveHook = Callable[[AccessToken], Any]


@runtime_checkable
class TokenStore(Protocol):
    async def load(self) -> Optional[AccessToken]:
        ...

    async def save(self, token: AccessToken) -> None:
        ...


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _ensure_directory(path: Path) -> None:
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)


class MemoryTokenStore:
    """Single-slot in-process store. Unsafe for clustered or multi-host use."""

    def __init__(self, *, environment: str = "development") -> None:
        self._environment = environment
        self._token: Optional[AccessToken] = None

    async def load(self) -> Optional[AccessToken]:
        return self._token

    async def save(self, token: AccessToken) -> None:
        self._token = token
        if self._environment.lower() == "production":
            logger.warning(
                "Access token is kept in process memory; configure a shared "
                "token store when running several processes or hosts."
            )


class CallbackTokenStore:
    """Adapt caller-supplied ``load_token`` / ``save_token`` hooks.

    Hooks may be plain functions or coroutine functions. Whatever they raise
    is propagated untouched.
    """

    def __init__(
        self,
        load_token: LoadHook,
        save_token: SaveHook,
        *,
        model: Type[AccessToken] = AccessToken,
    ) -> None:
        self._load_token = load_token
        self._save_token = save_token
        self._model = model

    async def load(self) -> Optional[AccessToken]:
        raw = await _maybe_await(self._load_token())
        return self._model.coerce(raw)

    async def save(self, token: AccessToken) -> None:
        await _maybe_await(self._save_token(token))


class FileTokenStore:
    """Persist the token as JSON (optionally encrypted) in a local file."""

    def __init__(
        self,
        path: str | Path,
        *,
        cipher: TokenCipher | None = None,
        model: Type[AccessToken] = AccessToken,
    ) -> None:
        self._path = Path(path)
        self._cipher = cipher
        self._model = model

    async def load(self) -> Optional[AccessToken]:
        return await asyncio.to_thread(self._read)

    async def save(self, token: AccessToken) -> None:
        await asyncio.to_thread(self._write, token)

    def _read(self) -> Optional[AccessToken]:
        if not self._path.exists():
            return None
        try:
            raw = self._path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreAdapterError(f"Failed to read token file {self._path}") from exc
        if not raw:
            return None
        if self._cipher is not None:
            return self._cipher.open(raw, self._model)
        try:
            return self._model.model_validate_json(raw)
        except ValidationError as exc:
            raise StoreAdapterError(
                f"Token file {self._path} does not hold a valid token."
            ) from exc

    def _write(self, token: AccessToken) -> None:
        data = self._cipher.seal(token) if self._cipher else token.model_dump_json()
        tmp_path: Optional[Path] = None
        try:
            _ensure_directory(self._path)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, dir=str(self._path.parent), encoding="utf-8"
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(data)
            if os.name != "nt":
                os.chmod(tmp_path, 0o600)
            tmp_path.replace(self._path)
        except OSError as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StoreAdapterError(f"Failed to write token file {self._path}") from exc


class SQLiteTokenStore:
    """Keep tokens in a SQLite table keyed by name, shared by local processes."""

    def __init__(
        self,
        db_path: str,
        *,
        name: str = "component_access_token",
        cipher: TokenCipher | None = None,
        model: Type[AccessToken] = AccessToken,
    ) -> None:
        self._db_path = Path(db_path)
        self._name = name
        self._cipher = cipher
        self._model = model
        _ensure_directory(self._db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS access_tokens (
                        name TEXT PRIMARY KEY,
                        data TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise StoreAdapterError(
                f"Failed to prepare token table in {self._db_path}"
            ) from exc

    async def load(self) -> Optional[AccessToken]:
        return await asyncio.to_thread(self._select)

    async def save(self, token: AccessToken) -> None:
        await asyncio.to_thread(self._upsert, token)

    def _select(self) -> Optional[AccessToken]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT data FROM access_tokens WHERE name = ?",
                    (self._name,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreAdapterError(f"Failed to load token {self._name!r}") from exc
        if not row:
            return None
        if self._cipher is not None:
            return self._cipher.open(row["data"], self._model)
        try:
            return self._model.model_validate(json.loads(row["data"]))
        except (ValueError, ValidationError) as exc:
            raise StoreAdapterError(
                f"Stored token {self._name!r} is not a valid token record."
            ) from exc

    def _upsert(self, token: AccessToken) -> None:
        data = self._cipher.seal(token) if self._cipher else token.model_dump_json()
        updated_at = datetime.now(timezone.utc).isoformat()
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO access_tokens (name, data, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(name) DO UPDATE SET
                        data = excluded.data,
                        updated_at = excluded.updated_at
                    """,
                    (self._name, data, updated_at),
                )
        except sqlite3.Error as exc:
            raise StoreAdapterError(f"Failed to save token {self._name!r}") from exc


__all__ = [
    "CallbackTokenStore",
    "FileTokenStore",
    "MemoryTokenStore",
    "SQLiteTokenStore",
    "TokenStore",
]
