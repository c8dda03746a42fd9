"""Domain models for raw identity records and resolved identities."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from .types import IdentityKind, LookupStatus

PROFILE_BASE_URL = "https://warpcast.com"


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class VerifiedAddresses(BaseModel):
    """Addresses an identity has proven ownership of, per chain family."""

    model_config = ConfigDict(extra="ignore")

    eth_addresses: list[str] = Field(default_factory=list, description="EVM addresses")
    sol_addresses: list[str] = Field(default_factory=list, description="Solana addresses")


class IdentityRecord(BaseModel):
    """A single user record as returned by the identity service."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    fid: int | None = Field(default=None, description="Numeric identity id")
    username: str = Field(..., description="Unique handle")
    display_name: str | None = Field(default=None, description="Free-form display name")
    pfp_url: str | None = Field(default=None, description="Avatar image URL")
    custody_address: str | None = Field(default=None, description="Custody address")
    verified_addresses: VerifiedAddresses = Field(
        default_factory=VerifiedAddresses, description="Linked addresses"
    )

    def linked_addresses(self) -> list[str]:
        """Every verified address bound to this identity, EVM first."""
        return [
            *self.verified_addresses.eth_addresses,
            *self.verified_addresses.sol_addresses,
        ]


class ResolvedIdentity(BaseModel):
    """A known identity bound to an address."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Primary name (username)")
    display_name: str | None = Field(default=None, description="Preferred presentation name")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    kind: IdentityKind = Field(default=IdentityKind.FARCASTER, description="Source network")
    fid: int | None = Field(default=None, description="Numeric id (identity network only)")
    is_notable: bool | None = Field(default=None, description="Notable member flag")
    resolved_at: datetime = Field(default_factory=utcnow, description="When it was written")

    @property
    def label(self) -> str:
        """Name to show in place of the address."""
        return self.display_name or self.name

    @property
    def profile_url(self) -> str | None:
        """Profile link on the identity network, if there is one."""
        if self.kind != IdentityKind.FARCASTER:
            return None
        return f"{PROFILE_BASE_URL}/{self.name}"

    @classmethod
    def from_record(
        cls,
        record: IdentityRecord,
        *,
        is_notable: bool | None = None,
        resolved_at: datetime | None = None,
    ) -> ResolvedIdentity:
        """Build a resolved identity from a raw identity-network record."""
        return cls(
            name=record.username,
            display_name=record.display_name or None,
            avatar_url=record.pfp_url or None,
            kind=IdentityKind.FARCASTER,
            fid=record.fid,
            is_notable=is_notable,
            resolved_at=resolved_at or utcnow(),
        )


class LookupResult(BaseModel):
    """Outcome of one bulk lookup, including every retry."""

    status: LookupStatus
    records: dict[str, IdentityRecord] = Field(default_factory=dict)
    error_message: str | None = None
    attempts: int = 0
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == LookupStatus.SUCCESS and len(self.records) > 0


class CacheMetadata(BaseModel):
    """Aggregate cache state published for display surfaces."""

    cache_size: int = Field(default=0, ge=0, description="Number of cached addresses")
    last_update: datetime | None = Field(default=None, description="Last completed batch")
