"""Pytest configuration and fixtures."""

import httpx
import pytest
from fetchkit.storage import MemoryStorage, StorageType


@pytest.fixture
def storages():
    """Persistent and session stores, both in memory."""
    return {
        StorageType.LOCAL: MemoryStorage(),
        StorageType.SESSION: MemoryStorage(),
    }


@pytest.fixture
def recorded_requests():
    return []


@pytest.fixture
def echo_transport(recorded_requests):
    """MockTransport that records each request and answers 200 with JSON."""

    def handler(request: httpx.Request) -> httpx.Response:
        recorded_requests.append(request)
        return httpx.Response(200, json={"method": request.method, "path": request.url.path})

    return httpx.MockTransport(handler)
