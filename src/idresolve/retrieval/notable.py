"""Client for the notable member (power user) id list."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from idresolve.core.exceptions import MalformedResponseError
from idresolve.retrieval.base import BaseIdentityClient

logger = logging.getLogger(__name__)


class NotableMemberClient(BaseIdentityClient):
    """Fetches the full list of notable member fids in one request."""

    NOTABLE_PATH: ClassVar[str] = "/v2/farcaster/user/power_lite"

    def _get_default_headers(self) -> dict[str, str]:
        headers = super()._get_default_headers()
        headers["x-neynar-experimental"] = "true"
        return headers

    async def fetch_notable_ids(self) -> frozenset[int]:
        """
        Fetch the current notable member ids.

        A single attempt; the enrichment service decides when to try again.

        Raises:
            RetrievalError: on any failure, including a missing or
                malformed id list
        """
        data = await self._request_json("GET", self.NOTABLE_PATH)
        return self._parse_ids(data)

    @staticmethod
    def _parse_ids(data: Any) -> frozenset[int]:
        result = data.get("result") if isinstance(data, dict) else None
        fids = result.get("fids") if isinstance(result, dict) else None

        if not isinstance(fids, list):
            raise MalformedResponseError(message="Notable member response has no fid list")

        try:
            return frozenset(int(fid) for fid in fids)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(message=f"Invalid fid in notable list: {e}") from e
