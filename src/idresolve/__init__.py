"""idresolve - Batch-coalescing blockchain address to identity resolution."""

from idresolve.client import IdresolveClient, resolve_address
from idresolve.config import IdresolveSettings, get_settings
from idresolve.core.models import CacheMetadata, IdentityRecord, ResolvedIdentity
from idresolve.core.types import IdentityKind, LookupStatus, ResolutionMode
from idresolve.log import configure_logging
from idresolve.resolution.resolver import AddressResolver

__version__ = "0.1.0"
__all__ = [
    # Client
    "IdresolveClient",
    "resolve_address",
    "AddressResolver",
    # Config
    "IdresolveSettings",
    "configure_logging",
    "get_settings",
    # Types
    "IdentityKind",
    "LookupStatus",
    "ResolutionMode",
    # Models
    "CacheMetadata",
    "IdentityRecord",
    "ResolvedIdentity",
    # Version
    "__version__",
]
