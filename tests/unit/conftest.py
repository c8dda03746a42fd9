"""Unit test fixtures with HTTP mocking."""

from __future__ import annotations

import pytest
import respx

from idresolve.retrieval.base import ClientConfig, RetryConfig

# ============================================================================
# HTTP Mocking Fixtures
# ============================================================================


@pytest.fixture
def respx_mock():
    """Provide a respx mock router for HTTP mocking.

    The mock is automatically started and stopped by respx.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


# ============================================================================
# Client Configuration Fixtures
# ============================================================================


@pytest.fixture
def client_config() -> ClientConfig:
    """Create a client config for testing."""
    return ClientConfig(
        api_key="test-api-key",
        base_url="https://api.neynar.com",
        timeout=5.0,
        retry=RetryConfig(max_retries=3, base_delay=0.5),
    )


class SleepRecorder:
    """Stands in for asyncio.sleep and records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()
