"""Batch-coalescing address resolver backed by the identity cache."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from idresolve.cache.metadata import MetadataChannel
from idresolve.cache.store import IdentityCache
from idresolve.core.models import CacheMetadata, ResolvedIdentity
from idresolve.core.normalization import dedupe_addresses, normalize_address
from idresolve.core.types import LookupStatus, ResolutionMode
from idresolve.enrichment.notable import NotableMemberService
from idresolve.resolution.batch import PendingBatch
from idresolve.retrieval.bulk import BulkIdentityClient

logger = logging.getLogger(__name__)


class AddressResolver:
    """
    Resolves addresses to identities, coalescing concurrent requests.

    Flow for a single ``resolve`` call:
    1. Normalize the address and return a fresh cache entry if there is one
    2. Otherwise join the pending batch, arming the debounce timer if needed
    3. When the timer fires, the batch is snapshotted and cleared, and all
       its addresses are sent in one bulk lookup
    4. Found identities are annotated with the notable flag and cached
    5. The caller re-reads the cache, either when its batch completes
       (``completion`` mode) or after a fixed ``poll_delay`` (``poll`` mode)

    Callers never see exceptions; the worst case is ``None``.
    """

    def __init__(
        self,
        client: BulkIdentityClient,
        cache: IdentityCache,
        *,
        enrichment: NotableMemberService | None = None,
        metadata: MetadataChannel | None = None,
        debounce_window: float = 0.1,
        poll_delay: float = 0.15,
        mode: ResolutionMode = ResolutionMode.COMPLETION,
    ) -> None:
        """
        Args:
            client: Bulk lookup client
            cache: Cache owned by this resolver
            enrichment: Notable member service used to annotate identities
            metadata: Channel receiving cache size and last update after each batch
            debounce_window: Seconds the batch stays open after its first address
            poll_delay: Seconds a caller waits before re-reading the cache in poll mode
            mode: How callers wait for their batch
        """
        self._client = client
        self._cache = cache
        self._enrichment = enrichment
        self._metadata = metadata
        self._debounce_window = debounce_window
        self._poll_delay = poll_delay
        self._mode = ResolutionMode(mode)

        self._pending = PendingBatch()
        self._tasks: set[asyncio.Task[None]] = set()
        self._batch_count = 0

    @property
    def cache(self) -> IdentityCache:
        return self._cache

    @property
    def mode(self) -> ResolutionMode:
        return self._mode

    @property
    def pending(self) -> PendingBatch:
        return self._pending

    @property
    def batch_count(self) -> int:
        """Number of batches sent to the lookup client."""
        return self._batch_count

    async def resolve(self, address: str) -> ResolvedIdentity | None:
        """Resolve one address to an identity, or None if none is known."""
        address = normalize_address(address)

        cached = self._cache.get_fresh(address)
        if cached is not None:
            logger.debug(f"Cache hit for {address}")
            return cached

        if self._cache.is_known_missing(address):
            logger.debug(f"Recently not found, skipping lookup: {address}")
            return None

        completion = self._enqueue(address)

        if self._mode == ResolutionMode.POLL:
            await asyncio.sleep(self._poll_delay)
        else:
            await asyncio.shield(completion)

        result = self._cache.get_fresh(address)
        if result is None:
            logger.debug(f"No identity found for {address}")
        return result

    async def resolve_many(
        self,
        addresses: Iterable[str],
    ) -> dict[str, ResolvedIdentity | None]:
        """Resolve several addresses concurrently, keyed by normalized address."""
        unique = dedupe_addresses(addresses)
        results = await asyncio.gather(*(self.resolve(address) for address in unique))
        return dict(zip(unique, results))

    def _enqueue(self, address: str) -> asyncio.Future[None]:
        """Add an address to the open batch and return the batch's completion."""
        loop = asyncio.get_running_loop()
        batch = self._pending

        if batch.add(address):
            logger.debug(f"Added to pending batch: {address}")

        if batch.completion is None:
            batch.completion = loop.create_future()

        if not batch.armed:
            batch.timer = loop.call_later(self._debounce_window, self._fire)

        return batch.completion

    def _fire(self) -> None:
        """Debounce timer callback: hand the snapshot to a background task."""
        addresses, completion = self._pending.take()
        if not addresses:
            if completion is not None and not completion.done():
                completion.set_result(None)
            return

        task = asyncio.get_running_loop().create_task(
            self._process_batch(addresses, completion)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _process_batch(
        self,
        addresses: list[str],
        completion: asyncio.Future[None] | None,
    ) -> None:
        self._batch_count += 1
        logger.debug(f"Processing batch of {len(addresses)}: {addresses}")

        try:
            resolved = await self._populate(addresses)
            logger.info(f"Batch resolved {resolved}/{len(addresses)} addresses")
        except Exception as e:
            logger.exception(f"Batch resolution failed: {e}")
        finally:
            if completion is not None and not completion.done():
                completion.set_result(None)

        await self._publish_metadata()

    async def _populate(self, addresses: list[str]) -> int:
        """Look up a batch and write every found identity to the cache."""
        result = await self._client.lookup_result(addresses)
        # A failed lookup says nothing about whether the addresses exist
        answered = result.status in (LookupStatus.SUCCESS, LookupStatus.NOT_FOUND)
        now = self._cache.now()
        resolved = 0

        for address in addresses:
            record = result.records.get(address)
            if record is None:
                if answered:
                    self._cache.mark_missing(address)
                continue

            is_notable = None
            if self._enrichment is not None and record.fid is not None:
                is_notable = self._enrichment.is_notable(record.fid)

            identity = ResolvedIdentity.from_record(
                record,
                is_notable=is_notable,
                resolved_at=now,
            )
            self._cache.set(address, identity)
            resolved += 1

        return resolved

    async def _publish_metadata(self) -> None:
        if self._metadata is None:
            return
        try:
            await self._metadata.publish(
                CacheMetadata(
                    cache_size=len(self._cache),
                    last_update=self._cache.last_update,
                )
            )
        except Exception as e:
            logger.warning(f"Could not publish cache metadata: {e}")

    async def drain(self) -> None:
        """Wait until the open batch (if any) and every running batch have finished."""
        while self._pending.armed or self._tasks:
            if self._pending.completion is not None:
                await asyncio.shield(self._pending.completion)
            if self._tasks:
                await asyncio.gather(*list(self._tasks))
