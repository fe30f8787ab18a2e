"""Tests for bearer token resolution."""

import pytest
from fetchkit.auth import (
    TokenStorage,
    get_authorization_token,
    lookup_token,
    resolve_token_storage,
    set_authorization,
)
from fetchkit.core.errors import ConfigurationError
from fetchkit.storage import MemoryStorage, StorageType


class BrokenStorage:
    def get_item(self, key):
        raise OSError("storage unavailable")

    def set_item(self, key, value):
        raise OSError("storage unavailable")

    def remove_item(self, key):
        raise OSError("storage unavailable")


class TestResolveTokenStorage:
    def test_defaults(self):
        ts = resolve_token_storage(None)
        assert ts.storage_key == "accessToken"
        assert ts.storage_type is StorageType.LOCAL

    def test_partial_override_keeps_defaults(self):
        ts = resolve_token_storage({"storage_type": "session"})
        assert ts.storage_key == "accessToken"
        assert ts.storage_type is StorageType.SESSION

    def test_model_override(self):
        ts = resolve_token_storage(TokenStorage(storage_key="jwt"))
        assert ts.storage_key == "jwt"

    def test_invalid_type_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            resolve_token_storage({"storage_type": "indexedDB"})


class TestLookupToken:
    def test_found(self, storages):
        storages[StorageType.LOCAL].set_item("accessToken", "abc")
        result = lookup_token(TokenStorage(), storages)
        assert result.ok
        assert result.token == "abc"

    def test_session_scope(self, storages):
        storages[StorageType.SESSION].set_item("jwt", "sess")
        ts = TokenStorage(storage_key="jwt", storage_type=StorageType.SESSION)
        assert lookup_token(ts, storages).token == "sess"

    def test_missing_key_is_ok_with_no_token(self, storages):
        result = lookup_token(TokenStorage(), storages)
        assert result.ok
        assert result.token is None

    def test_no_backends(self):
        result = lookup_token(TokenStorage(), None)
        assert not result.ok
        assert isinstance(result.error, LookupError)

    def test_missing_backend_for_scope(self):
        result = lookup_token(
            TokenStorage(storage_type=StorageType.SESSION),
            {StorageType.LOCAL: MemoryStorage()},
        )
        assert not result.ok

    def test_backend_error_is_captured(self):
        result = lookup_token(TokenStorage(), {StorageType.LOCAL: BrokenStorage()})
        assert not result.ok
        assert isinstance(result.error, OSError)


class TestGetAuthorizationToken:
    def test_returns_token(self, storages):
        storages[StorageType.LOCAL].set_item("accessToken", "abc")
        assert get_authorization_token(TokenStorage(), storages) == "abc"

    def test_failures_yield_empty_string(self):
        assert get_authorization_token(TokenStorage(), None) == ""
        assert (
            get_authorization_token(TokenStorage(), {StorageType.LOCAL: BrokenStorage()})
            == ""
        )

    def test_missing_key_yields_empty_string(self, storages):
        assert get_authorization_token(TokenStorage(), storages) == ""


def test_set_authorization():
    assert set_authorization("abc") == "Bearer abc"
    assert set_authorization("") == "Bearer "
