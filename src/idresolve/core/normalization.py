"""Address normalization utilities."""

from __future__ import annotations

from collections.abc import Iterable


def normalize_address(address: str) -> str:
    """
    Normalize an address for use as a cache key.

    Surrounding whitespace is dropped and the result is lowercased. The
    input is not validated; scanners may hand over anything address-shaped.

    Examples:
        >>> normalize_address("  0xABCdef  ")
        '0xabcdef'
    """
    return address.strip().lower()


def dedupe_addresses(addresses: Iterable[str]) -> list[str]:
    """Normalize and deduplicate addresses, keeping first-seen order."""
    seen: dict[str, None] = {}
    for address in addresses:
        normalized = normalize_address(address)
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)
