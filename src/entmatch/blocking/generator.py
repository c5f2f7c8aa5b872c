"""Block generation orchestrator.

Runs one or more blocking strategies over a record set, enumerates the
deduplicated candidate pairs they imply and summarises how much of the
full comparison space blocking avoided.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any

from entmatch.audit.logger import AuditLogger
from entmatch.blocking.models import BlockingStats, BlockSet
from entmatch.blocking.pairs import iter_unique_pairs
from entmatch.blocking.strategies import BlockingStrategy, blocking_keys
from entmatch.utils import RecordKey, default_record_key

__all__ = ["BlockGenerator", "DEFAULT_MAX_BLOCK_SIZE"]

DEFAULT_MAX_BLOCK_SIZE = 1000
BLOCKING_STAGE = "blocking"
PAIR_STAGE = "pair_generation"


class BlockGenerator:
    """Apply blocking strategies and derive candidate pairs.

    Parameters
    ----------
    record_key : RecordKey, optional
        Record identity used to deduplicate pairs and count unique
        records. Defaults to the ``id`` field, else object identity.
    logger : AuditLogger | None, optional
        Audit logger for stage and oversized-block events.
    max_block_size : int, optional
        Emit an ``oversized_block`` warning above this size, by default 1000.
    """

    def __init__(
        self,
        *,
        record_key: RecordKey = default_record_key,
        logger: AuditLogger | None = None,
        max_block_size: int = DEFAULT_MAX_BLOCK_SIZE,
    ) -> None:
        self.record_key = record_key
        self.logger = logger
        self.max_block_size = max_block_size

    # ------------------------------------------------------------------
    # Block generation
    # ------------------------------------------------------------------

    def generate_blocks(self, records: Sequence[Any], strategy: BlockingStrategy) -> BlockSet:
        """Delegate to *strategy* and report the result to the audit log."""
        start = time.perf_counter()
        if self.logger:
            self.logger.stage_started(BLOCKING_STAGE, expected_records=len(records))

        blocks = strategy.generate_blocks(records)

        self._after_blocking(blocks, [strategy.name], start)
        return blocks

    def generate_blocks_composite(
        self,
        records: Sequence[Any],
        strategies: Sequence[BlockingStrategy],
    ) -> BlockSet:
        """Union the blocks of several strategies.

        Keys are namespaced ``<strategy name>:<key>``; repeated names get
        a ``#<index>`` suffix so no two strategies share a namespace. A
        single strategy returns its blocks unchanged.
        """
        start = time.perf_counter()
        if self.logger:
            self.logger.stage_started(BLOCKING_STAGE, expected_records=len(records))

        if len(strategies) == 1:
            blocks = strategies[0].generate_blocks(records)
        else:
            blocks = {}
            seen_names: set[str] = set()
            for index, strategy in enumerate(strategies):
                prefix = strategy.name
                if prefix in seen_names:
                    prefix = f"{prefix}#{index}"
                seen_names.add(prefix)
                for key, block in strategy.generate_blocks(records).items():
                    blocks[f"{prefix}:{key}"] = list(block)

        self._after_blocking(blocks, [s.name for s in strategies], start)
        return blocks

    def _after_blocking(self, blocks: BlockSet, names: list[str], start: float) -> None:
        if not self.logger:
            return

        for key, block in blocks.items():
            if len(block) > self.max_block_size:
                self.logger.event(
                    "oversized_block",
                    data={
                        "block_key": key[:100],
                        "block_size": len(block),
                        "max_block_size": self.max_block_size,
                    },
                    level="WARN",
                    stage=BLOCKING_STAGE,
                )

        self.logger.stage_finished(
            stage=BLOCKING_STAGE,
            duration_seconds=time.perf_counter() - start,
            counters={
                "strategies": len(names),
                "blocks": len(blocks),
                "max_block_size": max((len(b) for b in blocks.values()), default=0),
            },
        )

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def calculate_stats(
        self,
        blocks: BlockSet,
        total_records: int | None = None,
    ) -> BlockingStats:
        """Summarise *blocks*.

        Parameters
        ----------
        blocks : BlockSet
            Output of a blocking pass.
        total_records : int | None, optional
            Size of the record population. Needed whenever records can
            be missing from every block (null keys) or sit in several
            blocks; otherwise the unique records found in *blocks* are
            counted.

        Returns
        -------
        BlockingStats
            Comparison counts are per-block estimates; overlapping
            blocks are not deduplicated (use ``generate_pairs``).
        """
        if total_records is None:
            total_records = len(
                {self.record_key(record) for block in blocks.values() for record in block}
            )

        sizes = [len(block) for block in blocks.values()]
        with_blocking = sum(size * (size - 1) // 2 for size in sizes)
        without_blocking = total_records * (total_records - 1) // 2

        if without_blocking > 0:
            reduction = (without_blocking - with_blocking) / without_blocking * 100
        else:
            reduction = 0.0

        return BlockingStats(
            total_records=total_records,
            total_blocks=len(sizes),
            avg_records_per_block=sum(sizes) / len(sizes) if sizes else 0.0,
            min_block_size=min(sizes, default=0),
            max_block_size=max(sizes, default=0),
            comparisons_with_blocking=with_blocking,
            comparisons_without_blocking=without_blocking,
            reduction_percentage=reduction,
        )

    # ------------------------------------------------------------------
    # Pairs
    # ------------------------------------------------------------------

    def generate_pairs(self, blocks: BlockSet) -> list[tuple[Any, Any]]:
        """All within-block record pairs, each unordered pair exactly once.

        Pairs keep first-seen order: block order, then position inside
        the block.
        """
        start = time.perf_counter()
        if self.logger:
            self.logger.stage_started(PAIR_STAGE)

        pairs = [(left, right) for _, left, right in iter_unique_pairs(blocks, self.record_key)]

        if self.logger:
            raw = sum(len(b) * (len(b) - 1) // 2 for b in blocks.values())
            self.logger.stage_finished(
                stage=PAIR_STAGE,
                duration_seconds=time.perf_counter() - start,
                counters={"pairs_raw": raw, "pairs_unique": len(pairs)},
            )
        return pairs

    # ------------------------------------------------------------------
    # Single-record keys
    # ------------------------------------------------------------------

    def extract_blocking_keys(self, record: Any, strategy: BlockingStrategy) -> dict[str, str]:
        """Transformed key values *record* contributes to *strategy*.

        Returns ``{field: value}``. Built-in strategies report each key
        field (fields yielding null are omitted) and Composite merges its
        children. Any other strategy is asked for the blocks of *record*
        alone and its ``field:value`` keys are split apart.
        """
        return blocking_keys(strategy, record)
