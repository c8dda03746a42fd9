"""Identity cache and metadata side channel."""

from .keys import CacheKeys
from .metadata import (
    InMemoryMetadataChannel,
    MetadataChannel,
    RedisMetadataChannel,
    reset_metadata,
)
from .store import IdentityCache

__all__ = [
    "CacheKeys",
    "IdentityCache",
    "InMemoryMetadataChannel",
    "MetadataChannel",
    "RedisMetadataChannel",
    "reset_metadata",
]
