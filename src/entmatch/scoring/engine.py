"""Weighted field-by-field matching engine.

The engine is built once from a ``MatchingConfig`` and an explicit
comparator table; every comparator name and option is checked at
construction so ``compare`` itself never fails on configuration.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from itertools import combinations
from typing import Any

from entmatch.audit.logger import AuditLogger
from entmatch.blocking.factory import BlockingConfig
from entmatch.blocking.generator import DEFAULT_MAX_BLOCK_SIZE, BlockGenerator
from entmatch.blocking.models import BlockingStats, BlockSet
from entmatch.scoring.classifier import classify_outcome
from entmatch.scoring.models import (
    FieldComparison,
    FieldMatchConfig,
    MatchingConfig,
    MatchOutcome,
    MatchScore,
    RecordPair,
)
from entmatch.similarity.registry import (
    Comparator,
    accepted_options,
    default_comparators,
    resolve_comparator,
    validate_options,
)
from entmatch.utils import RecordKey, default_record_key, get_field_value

__all__ = ["MatchingEngine"]


@dataclass(frozen=True, slots=True)
class _FieldRule:
    field: str
    config: FieldMatchConfig
    comparator: Comparator
    kwargs: dict[str, Any]


class MatchingEngine:
    """Score record pairs and classify the result.

    Parameters
    ----------
    config : MatchingConfig
        Field rules and thresholds.
    comparators : Mapping[str, Comparator] | None, optional
        Name → comparator table; ``default_comparators()`` when None.
    blocking : BlockingConfig | None, optional
        Candidate generation; every pair is a candidate when None.
    record_key : RecordKey, optional
        Record identity for pair deduplication.
    logger : AuditLogger | None, optional
        Forwarded to the block generator.
    max_block_size : int, optional
        Oversized-block warning limit.

    Raises
    ------
    ConfigurationError
        On an unknown comparator name or an option it does not accept.
    """

    def __init__(
        self,
        config: MatchingConfig,
        *,
        comparators: Mapping[str, Comparator] | None = None,
        blocking: BlockingConfig | None = None,
        record_key: RecordKey = default_record_key,
        logger: AuditLogger | None = None,
        max_block_size: int = DEFAULT_MAX_BLOCK_SIZE,
    ) -> None:
        self.config = config
        self.comparators: dict[str, Comparator] = (
            dict(comparators) if comparators is not None else default_comparators()
        )
        self.blocking = blocking
        self.record_key = record_key
        self.block_generator = BlockGenerator(
            record_key=record_key,
            logger=logger,
            max_block_size=max_block_size,
        )
        self._rules = [self._build_rule(name, cfg) for name, cfg in config.fields.items()]

    def _build_rule(self, field_name: str, cfg: FieldMatchConfig) -> _FieldRule:
        comparator = resolve_comparator(cfg.strategy, self.comparators)
        validate_options(cfg.strategy, comparator, cfg.options)

        kwargs = dict(cfg.options)
        if cfg.case_sensitive is not None:
            accepted = accepted_options(comparator)
            if accepted is None or "case_sensitive" in accepted:
                kwargs["case_sensitive"] = cfg.case_sensitive
        return _FieldRule(field=field_name, config=cfg, comparator=comparator, kwargs=kwargs)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    @property
    def has_blocking(self) -> bool:
        """Whether at least one blocking strategy is configured."""
        return self.blocking is not None and len(self.blocking.strategies) > 0

    def compare(self, pair: RecordPair) -> MatchScore:
        """Score *pair* field by field.

        Missing values compare as None under each comparator's null
        policy. A field whose similarity falls below its threshold still
        appears in ``field_comparisons`` with similarity 0.
        """
        comparisons: list[FieldComparison] = []
        total = 0.0

        for rule in self._rules:
            cfg = rule.config
            left_value = get_field_value(pair.left, rule.field)
            right_value = get_field_value(pair.right, rule.field)
            raw = float(rule.comparator(left_value, right_value, **rule.kwargs))

            met = cfg.threshold is None or raw >= cfg.threshold
            similarity = raw if met else 0.0
            weighted = similarity * cfg.weight
            total += weighted

            comparisons.append(
                FieldComparison(
                    field=rule.field,
                    similarity=similarity,
                    raw_similarity=raw,
                    weight=cfg.weight,
                    weighted_score=weighted,
                    strategy=cfg.strategy,
                    left_value=left_value,
                    right_value=right_value,
                    threshold=cfg.threshold,
                    met_threshold=met,
                )
            )

        max_possible = self.config.total_weight
        return MatchScore(
            total=total,
            normalized_total=total / max_possible if max_possible > 0 else 0.0,
            field_comparisons=tuple(comparisons),
            max_possible=max_possible,
        )

    def compare_records(self, left: Any, right: Any) -> MatchScore:
        """Shorthand for ``compare(RecordPair(left, right))``."""
        return self.compare(RecordPair(left, right))

    def classify(self, score: MatchScore | float) -> MatchOutcome:
        """Classify a score (or raw total) against the configured thresholds."""
        total = score.total if isinstance(score, MatchScore) else score
        return classify_outcome(total, self.config.thresholds)

    # ------------------------------------------------------------------
    # Blocking
    # ------------------------------------------------------------------

    def generate_blocks(self, records: Sequence[Any]) -> BlockSet:
        """Blocks from the configured strategies, ``{}`` without blocking."""
        blocking = self.blocking
        if blocking is None or not blocking.strategies:
            return {}
        if blocking.combines:
            return self.block_generator.generate_blocks_composite(records, blocking.strategies)
        return self.block_generator.generate_blocks(records, blocking.strategies[0])

    def get_blocking_stats(self, records: Sequence[Any]) -> BlockingStats | None:
        """Reduction statistics, or None when blocking is not configured."""
        if not self.has_blocking:
            return None
        blocks = self.generate_blocks(records)
        return self.block_generator.calculate_stats(blocks, total_records=len(records))

    def generate_candidate_pairs(self, records: Sequence[Any]) -> Iterator[RecordPair]:
        """Candidate pairs from blocking, or every unordered pair without it."""
        if self.has_blocking:
            blocks = self.generate_blocks(records)
            for left, right in self.block_generator.generate_pairs(blocks):
                yield RecordPair(left, right)
            return

        for left, right in combinations(records, 2):
            if self.record_key(left) != self.record_key(right):
                yield RecordPair(left, right)
