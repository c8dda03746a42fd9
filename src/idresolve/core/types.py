"""Core enums and type definitions."""

from enum import StrEnum


class IdentityKind(StrEnum):
    """Networks an identity can be resolved from."""

    # Identity network (the only one currently populated)
    FARCASTER = "farcaster"

    # Name service
    ENS = "ens"

    # Other network
    BASE = "base"


class LookupStatus(StrEnum):
    """Status of a bulk lookup attempt."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    ERROR = "error"


class ResolutionMode(StrEnum):
    """How a pending resolve call decides it is finished."""

    # Wait for the batch's completion signal
    COMPLETION = "completion"

    # Re-read the cache after a fixed delay, whatever the batch state
    POLL = "poll"
