"""
fetchkit: a configured httpx client facade with deep-merged request defaults.
"""

from .auth import TokenLookup, TokenStorage, get_authorization_token, lookup_token
from .client import REQUEST_TIMEOUT, CreatedClient, HttpClient, create_client
from .core.errors import ClientNotInitializedError, ConfigurationError, FetchKitError
from .core.merge import is_plain_mapping, merge
from .models import BaseResponse, ResponseError
from .storage import (
    FileStorage,
    KeyValueStorage,
    MemoryStorage,
    StorageType,
    default_storages,
)

__all__ = [
    "BaseResponse",
    "ClientNotInitializedError",
    "ConfigurationError",
    "CreatedClient",
    "FetchKitError",
    "FileStorage",
    "HttpClient",
    "KeyValueStorage",
    "MemoryStorage",
    "REQUEST_TIMEOUT",
    "ResponseError",
    "StorageType",
    "TokenLookup",
    "TokenStorage",
    "create_client",
    "default_storages",
    "get_authorization_token",
    "is_plain_mapping",
    "lookup_token",
    "merge",
]
