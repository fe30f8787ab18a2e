"""Custom exceptions with proper error handling."""


class FetchKitError(Exception):
    """Base exception for all fetchkit errors."""

    pass


class ConfigurationError(FetchKitError):
    """Configuration error."""

    pass


class ClientNotInitializedError(ConfigurationError):
    """Request issued on a facade whose transport client is missing."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "HTTP client has no initialized transport; construct it before issuing requests"
        )
