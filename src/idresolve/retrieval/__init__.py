"""Retrieval layer for the remote identity service."""

from idresolve.retrieval.base import (
    BaseIdentityClient,
    ClientConfig,
    RetryConfig,
)
from idresolve.retrieval.bulk import BulkIdentityClient
from idresolve.retrieval.notable import NotableMemberClient

__all__ = [
    # Base
    "BaseIdentityClient",
    "ClientConfig",
    "RetryConfig",
    # Clients
    "BulkIdentityClient",
    "NotableMemberClient",
]
