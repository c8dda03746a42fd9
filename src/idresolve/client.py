"""Main library client for standalone usage."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from idresolve.cache.metadata import (
    InMemoryMetadataChannel,
    MetadataChannel,
    RedisMetadataChannel,
    reset_metadata,
)
from idresolve.cache.store import IdentityCache
from idresolve.config import IdresolveSettings
from idresolve.core.exceptions import ConfigurationError
from idresolve.core.models import CacheMetadata, ResolvedIdentity
from idresolve.enrichment.notable import NotableMemberService
from idresolve.resolution.resolver import AddressResolver
from idresolve.retrieval.base import ClientConfig, RetryConfig
from idresolve.retrieval.bulk import BulkIdentityClient
from idresolve.retrieval.notable import NotableMemberClient

logger = logging.getLogger(__name__)


class IdresolveClient:
    """
    Main client for the idresolve library.

    Wires the cache, retrieval clients, enrichment service and resolver
    from settings, and owns their lifetime.

    Usage:
        async with IdresolveClient() as client:
            identity = await client.resolve("0x1234...")
            if identity:
                print(identity.label, identity.profile_url)

    Settings are loaded from environment variables or can be passed explicitly.
    """

    def __init__(
        self,
        settings: IdresolveSettings | None = None,
        *,
        metadata: MetadataChannel | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Application settings. If not provided, loaded from environment.
            metadata: Channel for cache metadata. Defaults to Redis when
                ``redis_url`` is set, otherwise an in-memory channel.
        """
        self._settings = settings or IdresolveSettings()
        self._metadata_override = metadata
        self._resolver: AddressResolver | None = None
        self._bulk_client: BulkIdentityClient | None = None
        self._notable_client: NotableMemberClient | None = None
        self._enrichment: NotableMemberService | None = None
        self._metadata: MetadataChannel | None = None

    async def __aenter__(self) -> IdresolveClient:
        """Initialize resources on context entry."""
        await self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Clean up resources on context exit."""
        await self.close()

    async def _initialize(self) -> None:
        """Initialize client resources."""
        settings = self._settings

        if not settings.api_key:
            logger.warning("No API key configured; identity lookups will fail")

        client_config = ClientConfig(
            api_key=settings.api_key,
            base_url=settings.api_url,
            timeout=settings.request_timeout,
            retry=RetryConfig(
                max_retries=settings.max_retries,
                base_delay=settings.retry_base_delay,
            ),
        )
        self._bulk_client = BulkIdentityClient(client_config)
        self._notable_client = NotableMemberClient(client_config)
        self._enrichment = NotableMemberService(
            self._notable_client,
            refresh_interval=settings.notable_refresh_interval,
        )
        self._metadata = self._metadata_override or self._build_metadata_channel()

        self._resolver = AddressResolver(
            self._bulk_client,
            IdentityCache(
                settings.cache_duration,
                negative_ttl=settings.negative_cache_ttl,
            ),
            enrichment=self._enrichment,
            metadata=self._metadata,
            debounce_window=settings.debounce_window,
            poll_delay=settings.poll_delay,
            mode=settings.resolution_mode,
        )
        logger.info(f"Resolver initialized ({settings.resolution_mode} mode)")

    def _build_metadata_channel(self) -> MetadataChannel:
        if self._settings.redis_url:
            logger.info("Publishing cache metadata to Redis")
            return RedisMetadataChannel.from_url(str(self._settings.redis_url))
        return InMemoryMetadataChannel()

    async def close(self) -> None:
        """Wait for outstanding batches, then close all resources."""
        if self._resolver:
            await self._resolver.drain()
            self._resolver = None

        if self._enrichment and self._enrichment.refresh_in_flight:
            await self._enrichment.wait_for_refresh()
        self._enrichment = None

        for client in (self._bulk_client, self._notable_client):
            if client:
                await client.close()
        self._bulk_client = None
        self._notable_client = None

        if self._metadata and self._metadata is not self._metadata_override:
            await self._metadata.close()
        self._metadata = None

    def _ensure_initialized(self) -> AddressResolver:
        """Ensure client is initialized."""
        if self._resolver is None:
            raise ConfigurationError(
                "Client not initialized. Use 'async with IdresolveClient() as client:'"
            )
        return self._resolver

    @property
    def resolver(self) -> AddressResolver:
        return self._ensure_initialized()

    @property
    def enrichment(self) -> NotableMemberService:
        self._ensure_initialized()
        assert self._enrichment is not None
        return self._enrichment

    async def resolve(self, address: str) -> ResolvedIdentity | None:
        """
        Resolve an address to an identity.

        Args:
            address: Address as found on the page (any case)

        Returns:
            The resolved identity, or None if none is known
        """
        return await self._ensure_initialized().resolve(address)

    async def resolve_many(
        self,
        addresses: Iterable[str],
    ) -> dict[str, ResolvedIdentity | None]:
        """Resolve several addresses, keyed by normalized address."""
        return await self._ensure_initialized().resolve_many(addresses)

    async def metadata(self) -> CacheMetadata:
        """Latest published cache metadata."""
        self._ensure_initialized()
        assert self._metadata is not None
        return await self._metadata.read()

    async def clear_cache(self) -> None:
        """Drop every cached identity and publish an empty cache state."""
        resolver = self._ensure_initialized()
        resolver.cache.clear()
        assert self._metadata is not None
        await reset_metadata(self._metadata)


async def resolve_address(
    address: str,
    settings: IdresolveSettings | None = None,
) -> ResolvedIdentity | None:
    """
    Convenience function to resolve a single address.

    Creates a temporary client, resolves, and closes.
    For multiple resolutions, use IdresolveClient directly.
    """
    async with IdresolveClient(settings) as client:
        return await client.resolve(address)
