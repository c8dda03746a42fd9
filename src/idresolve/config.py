"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict

from idresolve.core.types import ResolutionMode


class IdresolveSettings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="IDRESOLVE_",
    )

    # Identity service
    api_url: str = Field(
        default="https://api.neynar.com",
        description="Base URL of the identity service",
    )
    api_key: str = Field(
        default="",
        description="API key sent with every identity service request",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )

    # Cache
    cache_duration_ms: int = Field(
        default=3_600_000,
        gt=0,
        description="How long a resolved identity stays fresh",
    )
    negative_cache_ttl_ms: int = Field(
        default=0,
        ge=0,
        description="How long a not-found result suppresses re-queries (0 disables)",
    )

    # Batching
    debounce_window_ms: int = Field(
        default=100,
        ge=0,
        description="Delay before a pending batch is sent",
    )
    poll_delay_ms: int = Field(
        default=150,
        ge=0,
        description="Fixed wait before a caller re-reads the cache in poll mode",
    )
    resolution_mode: ResolutionMode = Field(
        default=ResolutionMode.COMPLETION,
        description="How callers wait for their batch",
    )

    # Retry
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Maximum bulk lookup attempts",
    )
    retry_base_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Backoff base delay; attempt n waits base * 2^n",
    )

    # Enrichment
    notable_refresh_interval_ms: int = Field(
        default=3_600_000,
        gt=0,
        description="How often the notable member list is refreshed",
    )

    # Metadata side channel
    redis_url: RedisDsn | None = Field(
        default=None,
        description="Redis URL for publishing cache metadata (optional)",
    )

    # App settings
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def cache_duration(self) -> float:
        return self.cache_duration_ms / 1000

    @property
    def negative_cache_ttl(self) -> float:
        return self.negative_cache_ttl_ms / 1000

    @property
    def debounce_window(self) -> float:
        return self.debounce_window_ms / 1000

    @property
    def poll_delay(self) -> float:
        return self.poll_delay_ms / 1000

    @property
    def retry_base_delay(self) -> float:
        return self.retry_base_delay_ms / 1000

    @property
    def notable_refresh_interval(self) -> float:
        return self.notable_refresh_interval_ms / 1000


@lru_cache
def get_settings() -> IdresolveSettings:
    """Get cached settings instance."""
    return IdresolveSettings()
