"""Data models for blocking output."""

from dataclasses import asdict, dataclass
from typing import Any

__all__ = ["BlockKey", "BlockSet", "BlockingStats"]

BlockKey = str

# Insertion-ordered: block order and in-block record order are stable.
BlockSet = dict[BlockKey, list[Any]]


@dataclass(frozen=True, slots=True)
class BlockingStats:
    """Effectiveness summary of one blocking pass.

    Attributes
    ----------
    total_records : int
        Unique records considered.
    total_blocks : int
        Number of blocks produced.
    avg_records_per_block : float
        Mean block size (records in several blocks count once per block).
    min_block_size : int
        Smallest block.
    max_block_size : int
        Largest block.
    comparisons_with_blocking : int
        Sum of ``size * (size - 1) / 2`` over blocks. An upper bound on
        the deduplicated pair count when blocks overlap.
    comparisons_without_blocking : int
        ``n * (n - 1) / 2`` for ``n = total_records``.
    reduction_percentage : float
        Share of the full comparison space avoided, in percent. Can be
        negative for heavily overlapping blocks.
    """

    total_records: int
    total_blocks: int
    avg_records_per_block: float
    min_block_size: int
    max_block_size: int
    comparisons_with_blocking: int
    comparisons_without_blocking: int
    reduction_percentage: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
