"""
HTTP client facade over httpx.

Builds one httpx.AsyncClient from a base URL, default headers, timeout and an
optional bearer token read from token storage, then exposes verb methods that
deep-merge per-call config onto the instance defaults before delegating.

Example:
    async with HttpClient(
        base_url="https://api.example.com",
        headers={"is-authorization": True},
        storages=default_storages("~/.fetchkit/storage.json"),
    ) as api:
        response = await api.get("/users", {"page": 2})

Responses and transport errors are returned/raised exactly as httpx produces
them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .auth import (
    TokenStorage,
    get_authorization_token,
    resolve_token_storage,
    set_authorization,
)
from .core.config import ClientSettings, get_settings
from .core.errors import ClientNotInitializedError, ConfigurationError
from .core.logging import correlation_id_var, get_logger
from .core.merge import has_property, merge
from .storage import KeyValueStorage, StorageType, default_storages

logger = get_logger(__name__)

REQUEST_TIMEOUT = 7.0

DEFAULT_HEADERS: dict[str, Any] = {"content-type": "application/json"}

# Passed through verbatim; nothing in this package acts on them.
FLAG_HEADERS = ("retry", "max-retries", "is-authorization")

# Per-call config keys accepted by httpx.AsyncClient.request
REQUEST_OPTIONS = frozenset(
    {
        "headers",
        "params",
        "cookies",
        "timeout",
        "follow_redirects",
        "extensions",
        "auth",
        "json",
        "content",
        "data",
        "files",
    }
)

BODY_OPTIONS = frozenset({"json", "content", "data", "files"})

# Sent with every request made while a correlation ID is set
CORRELATION_ID_HEADER = "X-Correlation-ID"


@dataclass
class CreatedClient:
    client: httpx.AsyncClient
    options: dict[str, Any]


def _header_value(headers: Mapping[str, Any], name: str) -> Any:
    name = name.lower()
    for key, value in headers.items():
        if str(key).lower() == name:
            return value
    return None


def _fold_headers(
    defaults: Mapping[str, Any] | None, overrides: Any
) -> Mapping[str, Any] | None:
    """Drop defaults that the overrides name, whatever the casing."""
    if not defaults or not isinstance(overrides, Mapping):
        return defaults
    names = {str(key).lower() for key in overrides}
    return {k: v for k, v in defaults.items() if str(k).lower() not in names}


def render_headers(headers: Mapping[str, Any] | None) -> httpx.Headers:
    """
    Convert merged header values to wire strings.

    Booleans become "true"/"false", other values are stringified and None
    entries are dropped. Names are case-insensitive; later entries win.
    """
    rendered = httpx.Headers()
    for key, value in (headers or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        rendered[str(key)] = str(value)
    return rendered


async def _raise_on_error_status(response: httpx.Response) -> None:
    response.raise_for_status()


def create_client(
    base_url: str,
    token_storage: TokenStorage,
    headers: Mapping[str, Any] | None = None,
    timeout: float | None = REQUEST_TIMEOUT,
    storages: Mapping[StorageType, KeyValueStorage] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    raise_for_status: bool = True,
) -> CreatedClient:
    """
    Resolve the default request options and build the transport client.

    Args:
        base_url: Base URL prepended to relative request URLs
        token_storage: Where to read the bearer token from
        headers: Caller default headers, merged over content-type: application/json
        timeout: Request timeout in seconds (None = REQUEST_TIMEOUT)
        storages: Token storage backends by scope
        transport: Optional httpx transport (tests, custom connection pools)
        raise_for_status: Raise httpx.HTTPStatusError for non-2xx responses

    Returns:
        CreatedClient with the httpx client and the resolved options
    """
    if timeout is None:
        timeout = REQUEST_TIMEOUT

    c_headers = merge(_fold_headers(DEFAULT_HEADERS, headers), headers)
    for flag in FLAG_HEADERS:
        if has_property(headers, flag):
            c_headers[flag] = headers[flag]

    if not _header_value(c_headers, "Authorization") and c_headers.get(
        "is-authorization"
    ):
        c_headers["Authorization"] = set_authorization(
            get_authorization_token(token_storage, storages)
        )

    options: dict[str, Any] = {
        "base_url": base_url,
        "timeout": timeout,
        "headers": c_headers,
    }
    client = httpx.AsyncClient(
        base_url=base_url or "",
        timeout=timeout,
        headers=render_headers(c_headers),
        transport=transport,
        event_hooks={"response": [_raise_on_error_status]} if raise_for_status else None,
    )
    logger.debug(
        "http_client_created",
        base_url=base_url,
        timeout=timeout,
        authorization="Authorization" in c_headers,
    )
    return CreatedClient(client=client, options=options)


class HttpClient:
    """
    Configured HTTP client with uniform verb methods.

    Construct one instance at the application's composition root and pass it
    to whatever needs it.
    """

    def __init__(
        self,
        base_url: str,
        headers: Mapping[str, Any] | None = None,
        timeout: float | None = None,
        token_storage: TokenStorage | Mapping[str, Any] | None = None,
        storages: Mapping[StorageType, KeyValueStorage] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        raise_for_status: bool = True,
    ):
        """
        Initialize the facade.

        Args:
            base_url: Base URL for every request
            headers: Default headers (may carry the retry, max-retries and
                is-authorization flag headers)
            timeout: Request timeout in seconds (default: REQUEST_TIMEOUT)
            token_storage: Overrides for storage_key / storage_type
            storages: Token storage backends by scope
            transport: Optional httpx transport
            raise_for_status: Raise httpx.HTTPStatusError for non-2xx responses
        """
        self.base_url = base_url
        self.token_storage = resolve_token_storage(token_storage)
        created = create_client(
            base_url,
            self.token_storage,
            headers=headers,
            timeout=timeout,
            storages=storages,
            transport=transport,
            raise_for_status=raise_for_status,
        )
        self.client: httpx.AsyncClient | None = created.client
        self.request_config: dict[str, Any] = created.options

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        *,
        headers: Mapping[str, Any] | None = None,
        storages: Mapping[StorageType, KeyValueStorage] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> HttpClient:
        """Build the facade from ClientSettings (FETCHKIT_* env vars by default)."""
        settings = settings or get_settings()
        if storages is None:
            storages = default_storages(settings.storage_path)
        return cls(
            base_url=settings.base_url,
            headers=headers,
            timeout=settings.timeout,
            token_storage={
                "storage_key": settings.token_storage_key,
                "storage_type": settings.token_storage_type.value,
            },
            storages=storages,
            transport=transport,
            raise_for_status=settings.raise_for_status,
        )

    @property
    def headers(self) -> dict[str, Any]:
        return self.request_config["headers"]

    @property
    def timeout(self) -> float:
        return self.request_config["timeout"]

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport client. Later requests raise ClientNotInitializedError."""
        if self.client is not None:
            client, self.client = self.client, None
            await client.aclose()

    def _client_valid(self) -> httpx.AsyncClient:
        if self.client is None:
            raise ClientNotInitializedError()
        return self.client

    def _merge_config(self, config: Mapping[str, Any] | None = None) -> dict[str, Any]:
        call_headers = config.get("headers") if isinstance(config, Mapping) else None
        merged = merge(
            {"headers": _fold_headers(self.request_config["headers"], call_headers)},
            config,
        )
        unknown = set(merged) - REQUEST_OPTIONS
        if unknown:
            raise ConfigurationError(
                f"Unsupported request config keys: {', '.join(sorted(map(str, unknown)))}"
            )
        return merged

    @staticmethod
    def _body(data: Any) -> dict[str, Any]:
        if data is None:
            return {}
        if isinstance(data, (str, bytes)):
            return {"content": data}
        return {"json": data}

    async def _request(
        self,
        method: str,
        url: str,
        config: Mapping[str, Any] | None,
        **request_kwargs: Any,
    ) -> httpx.Response:
        client = self._client_valid()
        options = self._merge_config(config)
        if BODY_OPTIONS & set(options):
            request_kwargs = {
                k: v for k, v in request_kwargs.items() if k not in BODY_OPTIONS
            }
        kwargs = {**request_kwargs, **options}
        kwargs["headers"] = render_headers(options.get("headers"))
        correlation_id = correlation_id_var.get()
        if correlation_id and CORRELATION_ID_HEADER not in kwargs["headers"]:
            kwargs["headers"][CORRELATION_ID_HEADER] = correlation_id
        logger.debug("http_request", method=method, url=url)
        return await client.request(method, url, **kwargs)

    async def fetch(
        self,
        url: str,
        method: str,
        params: Any = None,
        config: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request with an arbitrary method; params is sent as the body."""
        return await self._request(method.upper(), url, config, **self._body(params))

    async def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        return await self._request("GET", url, config, params=params)

    async def post(
        self, url: str, data: Any = None, config: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        return await self._request("POST", url, config, **self._body(data))

    async def put(
        self, url: str, data: Any = None, config: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        return await self._request("PUT", url, config, **self._body(data))

    async def patch(
        self, url: str, data: Any = None, config: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        return await self._request("PATCH", url, config, **self._body(data))

    async def delete(
        self, url: str, data: Any = None, config: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        return await self._request("DELETE", url, config, **self._body(data))

    async def head(
        self, url: str, config: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        return await self._request("HEAD", url, config)

    async def options(
        self, url: str, config: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        return await self._request("OPTIONS", url, config)
