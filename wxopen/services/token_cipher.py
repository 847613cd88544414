"""Symmetric encryption for access tokens persisted outside the process."""

from __future__ import annotations

import base64
import hashlib
from typing import Type, TypeVar

from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError

from wxopen.core.errors import StoreAdapterError
from wxopen.models.token import AccessToken

TokenT = TypeVar("TokenT", bound=AccessToken)


class TokenCipher:
    """Seal and open serialized tokens using a Fernet key derived from a secret."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def seal(self, token: AccessToken) -> str:
        """Return the encrypted JSON form of ``token``."""
        sealed = self._fernet.encrypt(token.model_dump_json().encode("utf-8"))
        return sealed.decode("utf-8")

    def open(self, ciphertext: str, model: Type[TokenT] = AccessToken) -> TokenT:
        """Decrypt ``ciphertext`` back into ``model``."""
        try:
            plaintext = self._fernet.decrypt(ciphertext.encode("utf-8"))
        except InvalidToken as exc:
            raise StoreAdapterError(
                "Failed to decrypt stored token; wrong secret or corrupted payload."
            ) from exc
        try:
            return model.model_validate_json(plaintext)
        except ValidationError as exc:
            raise StoreAdapterError(
                "Decrypted payload is not a valid stored token."
            ) from exc


__all__ = ["TokenCipher"]
