"""Cache key builders for consistent key formatting."""

from __future__ import annotations


class CacheKeys:
    """Cache key builders for the metadata side channel."""

    PREFIX = "idresolve"

    @classmethod
    def metadata(cls, field: str) -> str:
        """Key for one aggregate metadata field (e.g. ``cache_size``)."""
        return f"{cls.PREFIX}:meta:{field}"

    @classmethod
    def metadata_fields(cls) -> dict[str, str]:
        """All metadata keys, by field name."""
        return {
            "cache_size": cls.metadata("cache_size"),
            "last_update": cls.metadata("last_update"),
        }
