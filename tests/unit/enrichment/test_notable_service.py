"""Tests for the notable member enrichment service."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from idresolve.core.exceptions import CredentialError, TransientNetworkError
from idresolve.enrichment.notable import NotableMemberService
from idresolve.retrieval.notable import NotableMemberClient

HOUR = 3600.0


@pytest.fixture
def notable_client() -> AsyncMock:
    client = AsyncMock(spec=NotableMemberClient)
    client.fetch_notable_ids.return_value = frozenset({3, 5})
    return client


@pytest.fixture
def service(notable_client: AsyncMock, timer) -> NotableMemberService:
    return NotableMemberService(notable_client, refresh_interval=HOUR, clock=timer)


class TestInitialState:
    """Tests for a freshly constructed service."""

    def test_empty_and_stale(self, service: NotableMemberService):
        """A new snapshot is empty and old enough to need a refresh."""
        assert service.size == 0
        assert service.last_refreshed == 0.0
        assert service.is_stale() is True
        assert service.refresh_in_flight is False
        assert service.refresh_task is None

    def test_no_event_loop(self, service: NotableMemberService, notable_client: AsyncMock):
        """Outside an event loop the snapshot answers without refreshing."""
        assert service.is_notable(3) is False
        assert service.refresh_task is None
        assert service.refresh_in_flight is False
        notable_client.fetch_notable_ids.assert_not_called()


class TestReadThroughStale:
    """Tests for background refresh on query."""

    async def test_first_query_triggers_refresh(
        self, service: NotableMemberService, notable_client: AsyncMock
    ):
        """The triggering call answers from the pre-refresh snapshot."""
        assert service.is_notable(3) is False
        assert service.refresh_in_flight is True

        assert await service.wait_for_refresh() is True

        assert service.is_notable(3) is True
        assert service.is_notable(4) is False
        assert service.refresh_in_flight is False
        notable_client.fetch_notable_ids.assert_awaited_once()

    async def test_singleflight(self, service: NotableMemberService, notable_client: AsyncMock):
        """Queries while a refresh is running do not start another one."""
        for _ in range(5):
            service.is_notable(3)
        await service.wait_for_refresh()

        assert notable_client.fetch_notable_ids.await_count == 1

    async def test_at_most_one_refresh_within_interval(
        self, service: NotableMemberService, notable_client: AsyncMock, timer
    ):
        """Two queries less than refresh_interval apart trigger at most one refresh."""
        service.is_notable(3)
        await service.wait_for_refresh()

        timer.advance(HOUR - 1)
        service.is_notable(3)
        await asyncio.sleep(0)

        assert notable_client.fetch_notable_ids.await_count == 1

    async def test_refreshes_after_interval(
        self, service: NotableMemberService, notable_client: AsyncMock, timer
    ):
        service.is_notable(3)
        await service.wait_for_refresh()

        notable_client.fetch_notable_ids.return_value = frozenset({8})
        timer.advance(HOUR + 1)
        assert service.is_notable(3) is True
        await service.wait_for_refresh()

        assert service.is_notable(3) is False
        assert service.is_notable(8) is True
        assert notable_client.fetch_notable_ids.await_count == 2

    async def test_snapshot_replaced_wholesale(
        self, service: NotableMemberService, notable_client: AsyncMock, timer
    ):
        await service.refresh()
        notable_client.fetch_notable_ids.return_value = frozenset({13})
        timer.advance(HOUR + 1)
        await service.refresh()

        assert service.size == 1
        assert service.last_refreshed == timer()


class TestRefreshFailure:
    """Tests for failed refreshes."""

    @pytest.mark.parametrize(
        "error",
        [
            TransientNetworkError("boom", status_code=500),
            CredentialError("bad key", status_code=401),
            RuntimeError("unexpected"),
        ],
    )
    async def test_failure_keeps_snapshot(
        self, service: NotableMemberService, notable_client: AsyncMock, timer, error
    ):
        """A failed refresh keeps the old set and clears the guard."""
        await service.refresh()
        refreshed_at = service.last_refreshed

        notable_client.fetch_notable_ids.side_effect = error
        timer.advance(HOUR + 1)
        service.is_notable(3)
        assert await service.wait_for_refresh() is False

        assert service.refresh_in_flight is False
        assert service.last_refreshed == refreshed_at
        assert service.size == 2

    async def test_retries_on_next_query(
        self, service: NotableMemberService, notable_client: AsyncMock
    ):
        notable_client.fetch_notable_ids.side_effect = [
            TransientNetworkError("boom"),
            frozenset({3}),
        ]

        service.is_notable(3)
        await service.wait_for_refresh()
        service.is_notable(3)
        await service.wait_for_refresh()

        assert service.is_notable(3) is True
        assert notable_client.fetch_notable_ids.await_count == 2


class TestExplicitRefresh:
    """Tests for awaiting refresh directly."""

    async def test_refresh(self, service: NotableMemberService):
        assert await service.refresh() is True
        assert service.is_stale() is False
        assert service.size == 2

    async def test_refresh_joins_running_refresh(
        self, service: NotableMemberService, notable_client: AsyncMock
    ):
        service.is_notable(3)
        assert await service.refresh() is True
        assert notable_client.fetch_notable_ids.await_count == 1

    async def test_wait_without_refresh(self, service: NotableMemberService):
        assert await service.wait_for_refresh() is False
