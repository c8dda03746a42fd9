"""Notable member enrichment with a periodically refreshed snapshot."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from idresolve.core.exceptions import RetrievalError
from idresolve.retrieval.notable import NotableMemberClient

logger = logging.getLogger(__name__)


class NotableMemberService:
    """
    Answers "is this fid a notable member?" from an in-memory snapshot.

    Lookups never wait on the network. When the snapshot is older than
    ``refresh_interval`` a single background refresh is started and the
    current call is answered from the old snapshot. The snapshot is
    replaced wholesale on success and kept as-is on failure.

    The snapshot starts empty and stamped at the epoch, so the first query
    always triggers a refresh.
    """

    def __init__(
        self,
        client: NotableMemberClient,
        *,
        refresh_interval: float = 3600.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            client: Client used to fetch the notable id list
            refresh_interval: Maximum snapshot age in seconds
            clock: Source of the current time in seconds
        """
        self._client = client
        self._refresh_interval = refresh_interval
        self._clock = clock

        self._notable_ids: frozenset[int] = frozenset()
        self._last_refreshed: float = 0.0
        self._refresh_in_flight = False
        self._refresh_task: asyncio.Task[bool] | None = None

    @property
    def size(self) -> int:
        return len(self._notable_ids)

    @property
    def last_refreshed(self) -> float:
        """Clock time of the last successful refresh (0.0 if never)."""
        return self._last_refreshed

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_in_flight

    @property
    def refresh_task(self) -> asyncio.Task[bool] | None:
        """The most recently started background refresh, if any."""
        return self._refresh_task

    def is_stale(self) -> bool:
        return self._clock() - self._last_refreshed > self._refresh_interval

    def is_notable(self, fid: int) -> bool:
        """Check membership, starting a background refresh if the snapshot is stale."""
        if self.is_stale() and not self._refresh_in_flight:
            self._start_background_refresh()
        return fid in self._notable_ids

    def _start_background_refresh(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; skipping notable member refresh")
            return

        self._refresh_in_flight = True
        self._refresh_task = loop.create_task(self._do_refresh())

    async def refresh(self) -> bool:
        """
        Refresh the snapshot now, unless a refresh is already running.

        Returns:
            True if the snapshot was replaced
        """
        if not self._refresh_in_flight:
            self._start_background_refresh()
        return await self.wait_for_refresh()

    async def wait_for_refresh(self) -> bool:
        """Wait for the background refresh started last, if one is running."""
        if self._refresh_task is None:
            return False
        return await asyncio.shield(self._refresh_task)

    async def _do_refresh(self) -> bool:
        try:
            notable_ids = await self._client.fetch_notable_ids()
        except RetrievalError as e:
            logger.warning(f"Failed to refresh notable members: {e.message}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error refreshing notable members: {e}")
            return False
        finally:
            self._refresh_in_flight = False

        self._notable_ids = notable_ids
        self._last_refreshed = self._clock()
        logger.info(f"Notable member list refreshed: {len(notable_ids)} members")
        return True
