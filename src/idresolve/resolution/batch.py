"""Pending batch of addresses waiting for the debounce timer."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field


@dataclass
class PendingBatch:
    """
    Addresses awaiting resolution plus the timer that will send them.

    At most one timer is armed at a time and each address appears once.
    Every caller that joins the batch shares its completion future.
    """

    addresses: dict[str, None] = field(default_factory=dict)
    timer: asyncio.TimerHandle | None = None
    completion: asyncio.Future[None] | None = None

    @property
    def armed(self) -> bool:
        return self.timer is not None

    def __len__(self) -> int:
        return len(self.addresses)

    def __contains__(self, address: object) -> bool:
        return address in self.addresses

    def add(self, address: str) -> bool:
        """Add an address; returns False if it was already pending."""
        if address in self.addresses:
            return False
        self.addresses[address] = None
        return True

    def take(self) -> tuple[list[str], asyncio.Future[None] | None]:
        """Snapshot the addresses and completion, then reset to empty and disarmed."""
        addresses = list(self.addresses)
        completion = self.completion

        self.addresses = {}
        self.timer = None
        self.completion = None

        return addresses, completion
