"""Shared test fixtures for all tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from idresolve.config import IdresolveSettings
from idresolve.core.models import IdentityRecord, ResolvedIdentity, VerifiedAddresses
from idresolve.core.types import IdentityKind, ResolutionMode

# ============================================================================
# Test Data Constants
# ============================================================================


LINKED_1 = "0x" + "1" * 40
LINKED_2 = "0x" + "2" * 40
BASE_URL = "https://api.neynar.com"


# ============================================================================
# Clocks
# ============================================================================


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class FakeTimer:
    """Manually advanced clock returning seconds, like time.time."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


def make_user(
    username: str = "alice",
    fid: int | None = 3,
    eth_addresses: list[str] | None = None,
    sol_addresses: list[str] | None = None,
) -> dict[str, Any]:
    """Build a raw user payload as the identity service returns it."""
    return {
        "object": "user",
        "fid": fid,
        "username": username,
        "display_name": username.title(),
        "custody_address": "0x" + "f" * 40,
        "pfp_url": f"https://i.example.com/{username}.png",
        "follower_count": 120,
        "verified_addresses": {
            "eth_addresses": eth_addresses or [],
            "sol_addresses": sol_addresses or [],
        },
    }


@pytest.fixture
def sample_user() -> dict[str, Any]:
    return make_user()


@pytest.fixture
def sample_record() -> IdentityRecord:
    """A parsed identity record with two linked addresses."""
    return IdentityRecord(
        fid=3,
        username="alice",
        display_name="Alice",
        pfp_url="https://i.example.com/alice.png",
        verified_addresses=VerifiedAddresses(eth_addresses=[LINKED_1, LINKED_2]),
    )


@pytest.fixture
def sample_identity(clock: FakeClock) -> ResolvedIdentity:
    return ResolvedIdentity(
        name="alice",
        display_name="Alice",
        avatar_url="https://i.example.com/alice.png",
        kind=IdentityKind.FARCASTER,
        fid=3,
        resolved_at=clock(),
    )


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def mock_settings() -> IdresolveSettings:
    """Settings with short windows so tests run quickly."""
    return IdresolveSettings(
        api_url=BASE_URL,
        api_key="test-api-key",
        cache_duration_ms=3_600_000,
        debounce_window_ms=10,
        poll_delay_ms=50,
        resolution_mode=ResolutionMode.COMPLETION,
        max_retries=3,
        retry_base_delay_ms=0,
        notable_refresh_interval_ms=3_600_000,
        redis_url=None,
        log_level="DEBUG",
    )
