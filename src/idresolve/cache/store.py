"""In-memory identity cache with time-to-live freshness."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta

from idresolve.core.models import ResolvedIdentity, utcnow

Clock = Callable[[], datetime]


class IdentityCache:
    """
    Mapping from normalized address to resolved identity.

    An entry is fresh while ``now - resolved_at < ttl``. Stale entries are
    not evicted; they count as misses until a later resolution overwrites
    them. Optional negative entries remember addresses that had no identity
    for a (usually much shorter) ``negative_ttl``.
    """

    def __init__(
        self,
        ttl: float,
        *,
        negative_ttl: float = 0.0,
        clock: Clock = utcnow,
    ) -> None:
        """
        Args:
            ttl: Freshness window for resolved identities, in seconds
            negative_ttl: Freshness window for not-found markers (0 disables)
            clock: Source of the current time (aware datetimes)
        """
        self._ttl = timedelta(seconds=ttl)
        self._negative_ttl = timedelta(seconds=negative_ttl)
        self._clock = clock
        self._entries: dict[str, ResolvedIdentity] = {}
        self._misses: dict[str, datetime] = {}
        self._last_update: datetime | None = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def last_update(self) -> datetime | None:
        """When the cache was last written to."""
        return self._last_update

    def now(self) -> datetime:
        return self._clock()

    def is_fresh(self, identity: ResolvedIdentity) -> bool:
        return self._clock() - identity.resolved_at < self._ttl

    def get(self, address: str) -> ResolvedIdentity | None:
        """Return the entry for an address, fresh or not."""
        return self._entries.get(address)

    def get_fresh(self, address: str) -> ResolvedIdentity | None:
        """Return the entry only if it is still fresh."""
        identity = self._entries.get(address)
        if identity is None or not self.is_fresh(identity):
            return None
        return identity

    def set(self, address: str, identity: ResolvedIdentity) -> None:
        """Write or overwrite the entry for an address."""
        self._entries[address] = identity
        self._misses.pop(address, None)
        self._last_update = self._clock()

    def mark_missing(self, address: str) -> None:
        """Remember that an address had no identity, if negative caching is on."""
        if not self._negative_ttl:
            return
        self._misses[address] = self._clock()

    def is_known_missing(self, address: str) -> bool:
        """Whether an address has a fresh not-found marker."""
        marked_at = self._misses.get(address)
        if marked_at is None:
            return False
        return self._clock() - marked_at < self._negative_ttl

    def clear(self) -> None:
        self._entries.clear()
        self._misses.clear()
        self._last_update = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, address: object) -> bool:
        return address in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
