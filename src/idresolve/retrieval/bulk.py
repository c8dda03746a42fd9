"""Bulk address-to-identity lookup against the identity service."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any, ClassVar

from pydantic import ValidationError

from idresolve.core.exceptions import (
    CredentialError,
    MalformedResponseError,
    RetrievalError,
)
from idresolve.core.models import IdentityRecord, LookupResult
from idresolve.core.normalization import dedupe_addresses, normalize_address
from idresolve.core.types import LookupStatus
from idresolve.retrieval.base import BaseIdentityClient

logger = logging.getLogger(__name__)


class BulkIdentityClient(BaseIdentityClient):
    """
    Resolves many addresses to identity records with one request.

    API Documentation: https://docs.neynar.com/reference/fetch-bulk-users-by-eth-or-sol-address

    The response maps each queried address to a list of users; the first
    user is taken. That user is also bound to every address it has
    verified, so one record can be reachable under several keys.
    """

    BULK_PATH: ClassVar[str] = "/v2/farcaster/user/bulk-by-address"

    async def lookup(self, addresses: Iterable[str]) -> dict[str, IdentityRecord]:
        """
        Look up identities for a set of addresses.

        Never raises: credential failures, exhausted retries and malformed
        responses all come back as an empty mapping.

        Returns:
            Mapping of lowercased address to identity record
        """
        result = await self.lookup_result(addresses)
        return result.records

    async def lookup_result(self, addresses: Iterable[str]) -> LookupResult:
        """Look up identities and report how the lookup went."""
        start = time.monotonic()
        queried = dedupe_addresses(addresses)

        if not queried:
            return LookupResult(status=LookupStatus.NOT_FOUND)

        logger.debug(f"Fetching identities for {len(queried)} addresses: {queried}")

        try:
            data, attempts = await self._request_with_retry(
                "GET",
                self.BULK_PATH,
                params={"addresses": ",".join(queried)},
            )
        except CredentialError as e:
            logger.warning(f"Identity lookup unavailable for this API key: {e.message}")
            return LookupResult(
                status=LookupStatus.UNAUTHORIZED,
                error_message=e.message,
                attempts=1,
                duration_ms=(time.monotonic() - start) * 1000,
            )
        except MalformedResponseError as e:
            logger.warning(f"Treating malformed lookup response as no data: {e.message}")
            return LookupResult(
                status=LookupStatus.NOT_FOUND,
                error_message=e.message,
                attempts=1,
                duration_ms=(time.monotonic() - start) * 1000,
            )
        except RetrievalError as e:
            logger.error(f"Identity lookup failed for {len(queried)} addresses: {e.message}")
            return LookupResult(
                status=LookupStatus.ERROR,
                error_message=e.message,
                attempts=self.config.retry.max_retries if e.retryable else 1,
                duration_ms=(time.monotonic() - start) * 1000,
            )

        records = self._parse_response(data)
        duration_ms = (time.monotonic() - start) * 1000

        return LookupResult(
            status=LookupStatus.SUCCESS if records else LookupStatus.NOT_FOUND,
            records=records,
            attempts=attempts,
            duration_ms=duration_ms,
        )

    def _parse_response(self, data: Any) -> dict[str, IdentityRecord]:
        """Map every queried and linked address to its first identity."""
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Unexpected bulk lookup payload: {type(data).__name__}")
            return {}

        records: dict[str, IdentityRecord] = {}

        for address, users in data.items():
            if not isinstance(users, list) or not users:
                continue

            record = self._parse_user(users[0])
            if record is None:
                continue

            records[normalize_address(address)] = record
            logger.debug(f"Mapped {normalize_address(address)} to {record.username}")

            for linked in record.linked_addresses():
                records[normalize_address(linked)] = record

        return records

    @staticmethod
    def _parse_user(data: Any) -> IdentityRecord | None:
        if not isinstance(data, dict):
            return None
        try:
            return IdentityRecord.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Skipping malformed identity record: {e.error_count()} errors")
            return None
