"""Custom exception hierarchy for idresolve."""

from typing import Any


class IdresolveError(Exception):
    """Base exception for all idresolve errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(IdresolveError):
    """Invalid or missing configuration."""

    pass


class RetrievalError(IdresolveError):
    """Failed to retrieve data from the identity service."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Whether the request may succeed if attempted again."""
        return False


class TransientNetworkError(RetrievalError):
    """Transport failure or unexpected response status; safe to retry."""

    @property
    def retryable(self) -> bool:
        return True


class CredentialError(RetrievalError):
    """The API key was rejected. Retrying with the same key is pointless."""

    pass


class MalformedResponseError(RetrievalError):
    """Response body could not be interpreted. Treated as no data."""

    pass


class CacheError(IdresolveError):
    """Cache or metadata channel operation failed."""

    pass
