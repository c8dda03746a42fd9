"""Side channel publishing aggregate cache metadata to display surfaces."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Protocol, runtime_checkable

import redis.asyncio as aioredis

from idresolve.cache.keys import CacheKeys
from idresolve.core.exceptions import CacheError
from idresolve.core.models import CacheMetadata

logger = logging.getLogger(__name__)


@runtime_checkable
class MetadataChannel(Protocol):
    """Somewhere the resolver can publish ``{cache_size, last_update}``."""

    async def publish(self, metadata: CacheMetadata) -> None: ...

    async def read(self) -> CacheMetadata: ...

    async def close(self) -> None: ...


class InMemoryMetadataChannel:
    """Keeps the latest published metadata in process."""

    def __init__(self) -> None:
        self._latest = CacheMetadata()
        self.publish_count = 0

    async def publish(self, metadata: CacheMetadata) -> None:
        self._latest = metadata
        self.publish_count += 1

    async def read(self) -> CacheMetadata:
        return self._latest

    async def close(self) -> None:
        pass


class RedisMetadataChannel:
    """Publishes metadata as JSON values under ``idresolve:meta:*`` keys."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    @classmethod
    def from_url(cls, redis_url: str) -> RedisMetadataChannel:
        """Create a channel; the connection is opened on first use."""
        return cls(aioredis.from_url(redis_url, decode_responses=True))

    async def publish(self, metadata: CacheMetadata) -> None:
        keys = CacheKeys.metadata_fields()
        last_update = metadata.last_update.isoformat() if metadata.last_update else None
        try:
            await self._redis.mset(
                {
                    keys["cache_size"]: json.dumps(metadata.cache_size),
                    keys["last_update"]: json.dumps(last_update),
                }
            )
        except Exception as e:
            raise CacheError(f"Failed to publish cache metadata: {e}") from e

    async def read(self) -> CacheMetadata:
        keys = CacheKeys.metadata_fields()
        try:
            cache_size, last_update = await self._redis.mget(
                [keys["cache_size"], keys["last_update"]]
            )
        except Exception as e:
            raise CacheError(f"Failed to read cache metadata: {e}") from e

        cache_size = json.loads(cache_size) if cache_size else 0
        last_update = json.loads(last_update) if last_update else None
        return CacheMetadata(
            cache_size=int(cache_size or 0),
            last_update=datetime.fromisoformat(last_update) if last_update else None,
        )

    async def close(self) -> None:
        await self._redis.aclose()


async def reset_metadata(channel: MetadataChannel) -> None:
    """Publish an empty cache state (the display's "clear cache" action)."""
    await channel.publish(CacheMetadata(cache_size=0, last_update=None))
    logger.info("Cache metadata reset")
