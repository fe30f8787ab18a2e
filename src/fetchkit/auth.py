"""
Bearer token resolution from key-value storage.

The token is looked up once, when the client is built. Lookup failures
(backend missing, backend raising, unknown key) never propagate: they are
reported through TokenLookup and the facade falls back to an empty token.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from .core.errors import ConfigurationError
from .core.logging import get_logger
from .core.merge import merge
from .storage import KeyValueStorage, StorageType

logger = get_logger(__name__)

DEFAULT_TOKEN_STORAGE: dict[str, Any] = {
    "storage_key": "accessToken",
    "storage_type": StorageType.LOCAL.value,
}


class TokenStorage(BaseModel):
    """Where the bearer token lives: backend scope plus key."""

    model_config = ConfigDict(frozen=True)

    storage_key: str = "accessToken"
    storage_type: StorageType = StorageType.LOCAL


@dataclass(frozen=True)
class TokenLookup:
    token: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def resolve_token_storage(overrides: TokenStorage | Mapping[str, Any] | None) -> TokenStorage:
    """Merge caller overrides onto the default token storage descriptor."""
    if isinstance(overrides, TokenStorage):
        overrides = overrides.model_dump(mode="json")
    try:
        return TokenStorage.model_validate(merge(DEFAULT_TOKEN_STORAGE, overrides))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid token storage: {e}") from e


def lookup_token(
    token_storage: TokenStorage,
    storages: Mapping[StorageType, KeyValueStorage] | None,
) -> TokenLookup:
    """
    Read the token from the backend selected by token_storage.

    Returns:
        TokenLookup with the stored value (None when the key is absent), or
        with the error that prevented reading it.
    """
    try:
        if not storages:
            raise LookupError("No token storage backends configured")
        backend = storages.get(token_storage.storage_type)
        if backend is None:
            raise LookupError(
                f"Storage backend not available: {token_storage.storage_type.value}"
            )
        return TokenLookup(token=backend.get_item(token_storage.storage_key))
    except Exception as e:
        return TokenLookup(error=e)


def get_authorization_token(
    token_storage: TokenStorage,
    storages: Mapping[StorageType, KeyValueStorage] | None,
) -> str:
    """Return the stored token, or an empty string if it cannot be read."""
    result = lookup_token(token_storage, storages)
    if not result.ok:
        logger.debug(
            "token_lookup_failed",
            storage_type=token_storage.storage_type.value,
            storage_key=token_storage.storage_key,
            error=str(result.error),
        )
        return ""
    return result.token or ""


def set_authorization(token: str) -> str:
    return f"Bearer {token}"
