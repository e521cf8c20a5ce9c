"""Custom exceptions for the identity provider boundary."""


class ProviderError(Exception):
    """Base exception for identity provider errors."""

    pass


class InvalidSessionError(ProviderError):
    """Raised when a provider session is malformed or its signature does not match."""

    pass


class GraphAPIError(ProviderError):
    """Raised when a Graph API call fails (transport, HTTP status or error payload)."""

    def __init__(self, message: str, error_type: str = "graph_api_error", status_code: int | None = None):
        super().__init__(message)
        self.error_type = error_type
        self.status_code = status_code
