"""Core types, models, and utilities."""

from .exceptions import (
    CacheError,
    ConfigurationError,
    CredentialError,
    IdresolveError,
    MalformedResponseError,
    RetrievalError,
    TransientNetworkError,
)
from .models import (
    CacheMetadata,
    IdentityRecord,
    LookupResult,
    ResolvedIdentity,
    VerifiedAddresses,
)
from .normalization import dedupe_addresses, normalize_address
from .types import IdentityKind, LookupStatus, ResolutionMode

__all__ = [
    # Types
    "IdentityKind",
    "LookupStatus",
    "ResolutionMode",
    # Models
    "CacheMetadata",
    "IdentityRecord",
    "LookupResult",
    "ResolvedIdentity",
    "VerifiedAddresses",
    # Normalization
    "dedupe_addresses",
    "normalize_address",
    # Exceptions
    "CacheError",
    "ConfigurationError",
    "CredentialError",
    "IdresolveError",
    "MalformedResponseError",
    "RetrievalError",
    "TransientNetworkError",
]
