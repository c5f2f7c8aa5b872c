"""Single-record and batch resolution on top of the matching engine.

``Resolver`` narrows the comparison set with the engine's blocking
configuration, scores every candidate, classifies and explains it.
"""

from __future__ import annotations

import time
from collections.abc import Hashable, Sequence
from typing import Any

from entmatch.audit.logger import AuditLogger
from entmatch.resolution.models import (
    DeduplicationBatchResult,
    DeduplicationResult,
    DeduplicationStats,
)
from entmatch.scoring.engine import MatchingEngine
from entmatch.scoring.explainer import MatchExplainer
from entmatch.scoring.models import MatchOutcome, MatchResult, MatchScore, RecordPair, Thresholds

__all__ = ["Resolver"]

RESOLUTION_STAGE = "resolution"
SCORING_STAGE = "scoring"


class Resolver:
    """Find matches for records using a configured ``MatchingEngine``.

    Parameters
    ----------
    engine : MatchingEngine
        Scoring rules, thresholds and (optionally) blocking.
    explainer : MatchExplainer | None, optional
        Explanation renderer; a default ``MatchExplainer`` when None.
    logger : AuditLogger | None, optional
        Audit logger; defaults to the engine's block generator logger.

    Examples
    --------
    >>> from entmatch.scoring import FieldMatchConfig, MatchingConfig, Thresholds
    >>> engine = MatchingEngine(MatchingConfig(
    ...     fields={"email": FieldMatchConfig("exact", 20)},
    ...     thresholds=Thresholds(no_match=10, definite_match=20),
    ... ))
    >>> results = Resolver(engine).resolve({"email": "a@x.io"}, [{"email": "a@x.io"}])
    >>> results[0].outcome.value
    'definite-match'
    """

    def __init__(
        self,
        engine: MatchingEngine,
        *,
        explainer: MatchExplainer | None = None,
        logger: AuditLogger | None = None,
    ) -> None:
        self.engine = engine
        self.explainer = explainer or MatchExplainer()
        self.logger = logger if logger is not None else engine.block_generator.logger

    @property
    def thresholds(self) -> Thresholds:
        """Outcome thresholds of the engine configuration."""
        return self.engine.config.thresholds

    def _result(self, other: Any, score: MatchScore) -> MatchResult:
        outcome = self.engine.classify(score)
        return MatchResult(
            outcome=outcome,
            candidate_record=other,
            score=score,
            explanation=self.explainer.explain_score(score, outcome),
        )

    # ------------------------------------------------------------------
    # Single record
    # ------------------------------------------------------------------

    def candidates_for(self, candidate: Any, existing: Sequence[Any]) -> list[Any]:
        """Existing records sharing at least one block with *candidate*.

        Without blocking every existing record is a candidate.
        """
        if not self.engine.has_blocking:
            return list(existing)

        blocks = self.engine.generate_blocks([candidate, *existing])
        record_key = self.engine.record_key
        seen: set[Hashable] = set()
        found: list[Any] = []
        for block in blocks.values():
            if not any(record is candidate for record in block):
                continue
            for record in block:
                if record is candidate:
                    continue
                key = record_key(record)
                if key not in seen:
                    seen.add(key)
                    found.append(record)
        return found

    def resolve(
        self,
        candidate: Any,
        existing: Sequence[Any],
        *,
        max_results: int | None = None,
    ) -> list[MatchResult]:
        """Score *candidate* against *existing* records.

        Parameters
        ----------
        candidate : Any
            Incoming record.
        existing : Sequence[Any]
            Records to search.
        max_results : int | None, optional
            Keep only the best N results when positive.

        Returns
        -------
        list[MatchResult]
            One result per compared record, highest total first (ties
            keep comparison order).
        """
        if not existing:
            return []

        start = time.perf_counter()
        if self.logger:
            self.logger.stage_started(RESOLUTION_STAGE, expected_records=len(existing))

        to_compare = self.candidates_for(candidate, existing)

        results = [
            self._result(other, self.engine.compare(RecordPair(candidate, other)))
            for other in to_compare
        ]
        results.sort(key=lambda r: r.score.total, reverse=True)
        if max_results is not None and max_results > 0:
            results = results[:max_results]

        if self.logger:
            self.logger.stage_finished(
                stage=RESOLUTION_STAGE,
                duration_seconds=time.perf_counter() - start,
                counters={
                    "existing_records": len(existing),
                    "candidates_compared": len(to_compare),
                    "results_returned": len(results),
                },
            )
        return results

    def find_matches(
        self,
        candidate: Any,
        existing: Sequence[Any],
        min_score: float | None = None,
    ) -> list[MatchResult]:
        """``resolve`` results with ``total >= min_score``.

        *min_score* defaults to the no-match threshold.
        """
        floor = self.thresholds.no_match if min_score is None else min_score
        return [r for r in self.resolve(candidate, existing) if r.score.total >= floor]

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def deduplicate_batch(
        self,
        records: Sequence[Any],
        *,
        max_pairs_per_record: int | None = None,
        min_score: float | None = None,
        include_no_matches: bool = False,
    ) -> DeduplicationBatchResult:
        """Find duplicates within *records*.

        Parameters
        ----------
        records : Sequence[Any]
            Dataset to deduplicate.
        max_pairs_per_record : int | None, optional
            Keep only the best N matches per record when positive.
        min_score : float | None, optional
            Pairs scoring below this are dropped; defaults to the
            no-match threshold.
        include_no_matches : bool, optional
            Also return records left without any match.

        Returns
        -------
        DeduplicationBatchResult
            Results in input order plus run counters.
        """
        if not records:
            return DeduplicationBatchResult(results=(), stats=DeduplicationStats())

        start = time.perf_counter()
        floor = self.thresholds.no_match if min_score is None else min_score
        record_key = self.engine.record_key

        matches_by_key: dict[Hashable, tuple[Any, list[MatchResult]]] = {}
        for record in records:
            matches_by_key.setdefault(record_key(record), (record, []))

        pairs = list(self.engine.generate_candidate_pairs(records))

        if self.logger:
            self.logger.stage_started(SCORING_STAGE, expected_records=len(pairs))

        outcome_counts = dict.fromkeys(MatchOutcome, 0)
        for pair in pairs:
            score = self.engine.compare(pair)
            if score.total < floor:
                continue
            left = self._result(pair.right, score)
            right = self._result(pair.left, score)
            outcome_counts[left.outcome] += 1
            matches_by_key[record_key(pair.left)][1].append(left)
            matches_by_key[record_key(pair.right)][1].append(right)

        results: list[DeduplicationResult] = []
        with_matches = 0
        for record, matches in matches_by_key.values():
            matches.sort(key=lambda r: r.score.total, reverse=True)
            if max_pairs_per_record is not None and max_pairs_per_record > 0:
                del matches[max_pairs_per_record:]
            if matches:
                with_matches += 1
            if matches or include_no_matches:
                results.append(DeduplicationResult(record=record, matches=tuple(matches)))

        stats = DeduplicationStats(
            records_processed=len(records),
            comparisons_made=len(pairs),
            definite_matches_found=outcome_counts[MatchOutcome.DEFINITE_MATCH],
            potential_matches_found=outcome_counts[MatchOutcome.POTENTIAL_MATCH],
            no_matches_found=outcome_counts[MatchOutcome.NO_MATCH],
            records_with_matches=with_matches,
            records_without_matches=len(matches_by_key) - with_matches,
        )

        if self.logger:
            self.logger.stage_finished(
                stage=SCORING_STAGE,
                duration_seconds=time.perf_counter() - start,
                counters=stats.to_dict(),
            )
        return DeduplicationBatchResult(results=tuple(results), stats=stats)
