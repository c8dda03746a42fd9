"""Resolution layer: pending batches and the coalescing resolver."""

from idresolve.resolution.batch import PendingBatch
from idresolve.resolution.resolver import AddressResolver

__all__ = [
    "AddressResolver",
    "PendingBatch",
]
