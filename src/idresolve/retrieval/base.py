"""Base identity service client with HTTP client management and retry."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, ClassVar

import httpx
from pydantic import BaseModel, Field

from idresolve.core.exceptions import (
    CredentialError,
    MalformedResponseError,
    RetrievalError,
    TransientNetworkError,
)

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class RetryConfig:
    """Configuration for retrying failed requests."""

    max_retries: int = 3
    base_delay: float = 1.0
    backoff_factor: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Wait before the attempt after ``attempt`` (0-based) failed."""
        return self.base_delay * self.backoff_factor**attempt


class ClientConfig(BaseModel):
    """Configuration for an identity service client."""

    api_key: str = ""
    base_url: str | None = None
    timeout: float = 30.0
    retry: RetryConfig = Field(default_factory=RetryConfig)


class BaseIdentityClient:
    """
    Base class for identity service clients.

    Provides:
    - HTTP client management with connection pooling
    - API key headers
    - Status code classification into retrieval errors
    - Exponential backoff retry for transient failures
    """

    BASE_URL: ClassVar[str] = "https://api.neynar.com"

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config or ClientConfig()
        self._client: httpx.AsyncClient | None = None
        self._sleep = sleep

        self._request_count: int = 0
        self._failure_count: int = 0

    @property
    def request_count(self) -> int:
        """Number of HTTP requests sent, including retries."""
        return self._request_count

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Get or create HTTP client with proper lifecycle."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url or self.BASE_URL,
                timeout=httpx.Timeout(self.config.timeout),
                headers=self._get_default_headers(),
                follow_redirects=True,
            )

        try:
            yield self._client
        except httpx.HTTPError as e:
            raise TransientNetworkError(message=f"HTTP error: {e}") from e

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": "idresolve/0.1",
            "accept": "application/json",
            "x-api-key": self.config.api_key,
        }

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request_json(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> Any | None:
        """
        Make a single request and decode its JSON body.

        Returns None for a 404. Raises CredentialError for 401/403,
        TransientNetworkError for transport failures and any other
        non-success status, MalformedResponseError for undecodable bodies.
        """
        self._request_count += 1

        async with self._get_client() as client:
            response = await client.request(method, url, **kwargs)

        if response.status_code in (401, 403):
            raise CredentialError(
                message=f"Identity service rejected the API key: {response.status_code}",
                status_code=response.status_code,
            )

        if response.status_code == 404:
            return None

        if not response.is_success:
            raise TransientNetworkError(
                message=f"Identity service error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                message=f"Undecodable response body: {e}",
                status_code=response.status_code,
            ) from e

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> tuple[Any | None, int]:
        """
        Make a request, retrying retryable failures with exponential backoff.

        Returns:
            Tuple of (decoded body or None, attempts made)

        Raises:
            RetrievalError: the last error once retries are exhausted, or
                immediately for non-retryable errors
        """
        retry = self.config.retry
        attempt = 0

        while True:
            try:
                return await self._request_json(method, url, **kwargs), attempt + 1
            except RetrievalError as e:
                self._failure_count += 1
                if not e.retryable or attempt + 1 >= retry.max_retries:
                    raise

                delay = retry.delay_for(attempt)
                logger.warning(
                    f"Request to {url} failed (attempt {attempt + 1}/"
                    f"{retry.max_retries}): {e.message}; retrying in {delay:.2f}s"
                )
                await self._sleep(delay)
                attempt += 1

    async def __aenter__(self) -> "BaseIdentityClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
