"""Record resolution: match one record or deduplicate a batch."""

from entmatch.resolution.models import (
    DeduplicationBatchResult,
    DeduplicationResult,
    DeduplicationStats,
)
from entmatch.resolution.resolver import Resolver

__all__ = [
    "Resolver",
    "DeduplicationResult",
    "DeduplicationStats",
    "DeduplicationBatchResult",
]
