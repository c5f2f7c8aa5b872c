"""Data models for batch deduplication results."""

from dataclasses import asdict, dataclass
from typing import Any

from entmatch.scoring.models import MatchOutcome, MatchResult

__all__ = ["DeduplicationResult", "DeduplicationStats", "DeduplicationBatchResult"]


@dataclass(frozen=True, slots=True)
class DeduplicationResult:
    """Matches found for one record of a batch.

    Attributes
    ----------
    record : Any
        The record being deduplicated.
    matches : tuple[MatchResult, ...]
        Matching records, highest total first.
    """

    record: Any
    matches: tuple[MatchResult, ...]

    @property
    def match_count(self) -> int:
        """Number of matches kept for this record."""
        return len(self.matches)

    @property
    def has_definite_matches(self) -> bool:
        """Whether any kept match is a definite match."""
        return any(m.outcome is MatchOutcome.DEFINITE_MATCH for m in self.matches)

    @property
    def has_potential_matches(self) -> bool:
        """Whether any kept match is a potential match."""
        return any(m.outcome is MatchOutcome.POTENTIAL_MATCH for m in self.matches)


@dataclass(frozen=True, slots=True)
class DeduplicationStats:
    """Counters for one batch deduplication run.

    Attributes
    ----------
    records_processed : int
        Records in the batch.
    comparisons_made : int
        Candidate pairs scored.
    definite_matches_found : int
        Pairs kept as definite matches.
    potential_matches_found : int
        Pairs kept as potential matches.
    no_matches_found : int
        Pairs kept despite a no-match outcome (``min_score`` below
        the no-match threshold).
    records_with_matches : int
        Records with at least one kept match.
    records_without_matches : int
        Records with none.
    """

    records_processed: int = 0
    comparisons_made: int = 0
    definite_matches_found: int = 0
    potential_matches_found: int = 0
    no_matches_found: int = 0
    records_with_matches: int = 0
    records_without_matches: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True, slots=True)
class DeduplicationBatchResult:
    """Per-record results plus run counters."""

    results: tuple[DeduplicationResult, ...]
    stats: DeduplicationStats
