"""Data models for weighted pair scoring.

Configuration (``FieldMatchConfig``, ``Thresholds``, ``MatchingConfig``)
is validated when constructed; results (``FieldComparison``,
``MatchScore``) are plain frozen data ready for JSON serialization.
"""

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from entmatch.errors import ConfigurationError

__all__ = [
    "FieldMatchConfig",
    "Thresholds",
    "MatchingConfig",
    "RecordPair",
    "FieldComparison",
    "MatchScore",
    "MatchOutcome",
    "MatchResult",
]


# ============================================================================
# Configuration
# ============================================================================


@dataclass(frozen=True, slots=True)
class FieldMatchConfig:
    """How one field contributes to a match score.

    Attributes
    ----------
    strategy : str
        Comparator name (key of the engine's comparator table).
    weight : float
        Points contributed at similarity 1.0; must be >= 0.
    threshold : float | None
        Similarity below this gates the field to 0. In [0, 1].
    case_sensitive : bool | None
        Forwarded to comparators that accept it; comparator default when None.
    options : dict[str, Any]
        Extra keyword options for the comparator.
    """

    strategy: str
    weight: float
    threshold: float | None = None
    case_sensitive: bool | None = None
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate weight and threshold ranges."""
        if self.weight < 0:
            raise ConfigurationError(f"Field weight must be >= 0, got {self.weight}")
        if self.threshold is not None and not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(f"Field threshold must be in [0, 1], got {self.threshold}")


@dataclass(frozen=True, slots=True)
class Thresholds:
    """Outcome boundaries on the raw (weighted) score scale.

    Attributes
    ----------
    no_match : float
        Totals strictly below this are no-match.
    definite_match : float
        Totals at or above this are definite-match.
    """

    no_match: float
    definite_match: float

    def __post_init__(self) -> None:
        """Validate threshold ordering."""
        if self.no_match >= self.definite_match:
            raise ConfigurationError(
                f"no_match threshold ({self.no_match}) must be less than "
                f"definite_match threshold ({self.definite_match})"
            )


@dataclass(frozen=True, slots=True)
class MatchingConfig:
    """Field comparison rules plus outcome thresholds.

    Attributes
    ----------
    fields : dict[str, FieldMatchConfig]
        Field path (dotted for nested values) → comparison rule.
    thresholds : Thresholds
        Outcome boundaries.
    """

    fields: dict[str, FieldMatchConfig]
    thresholds: Thresholds

    @property
    def total_weight(self) -> float:
        """Sum of all field weights."""
        return sum(cfg.weight for cfg in self.fields.values())


# ============================================================================
# Results
# ============================================================================


@dataclass(frozen=True, slots=True)
class RecordPair:
    """Ordered pair of records under comparison."""

    left: Any
    right: Any


@dataclass(frozen=True, slots=True)
class FieldComparison:
    """Comparison result for a single field.

    Attributes
    ----------
    field : str
        Field path.
    similarity : float
        Similarity after the threshold gate (0 when gated).
    raw_similarity : float
        Comparator output before gating.
    weight : float
        Configured weight.
    weighted_score : float
        ``similarity * weight``.
    strategy : str
        Comparator name.
    left_value, right_value : Any
        Compared values.
    threshold : float | None
        Configured gate.
    met_threshold : bool
        False only when a threshold is set and not reached.
    """

    field: str
    similarity: float
    raw_similarity: float
    weight: float
    weighted_score: float
    strategy: str
    left_value: Any
    right_value: Any
    threshold: float | None = None
    met_threshold: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True, slots=True)
class MatchScore:
    """Aggregate score of one record pair.

    Attributes
    ----------
    total : float
        Sum of weighted field scores.
    normalized_total : float
        ``total / max_possible``, 0 when no weight is configured.
    field_comparisons : tuple[FieldComparison, ...]
        One entry per configured field, in configuration order.
    max_possible : float
        Sum of configured weights.
    """

    total: float
    normalized_total: float
    field_comparisons: tuple[FieldComparison, ...]
    max_possible: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total": self.total,
            "normalized_total": self.normalized_total,
            "max_possible": self.max_possible,
            "field_comparisons": [fc.to_dict() for fc in self.field_comparisons],
        }


class MatchOutcome(StrEnum):
    """Three-way classification of a match score."""

    NO_MATCH = "no-match"
    POTENTIAL_MATCH = "potential-match"
    DEFINITE_MATCH = "definite-match"


@dataclass(frozen=True, slots=True)
class MatchResult:
    """A scored, classified and explained comparison against one record.

    Attributes
    ----------
    outcome : MatchOutcome
        Classification of ``score.total``.
    candidate_record : Any
        The existing record the input was compared with.
    score : MatchScore
        Full scoring breakdown.
    explanation : str
        Human-readable breakdown (see ``MatchExplainer``).
    """

    outcome: MatchOutcome
    candidate_record: Any
    score: MatchScore
    explanation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "outcome": self.outcome.value,
            "candidate_record": self.candidate_record,
            "score": self.score.to_dict(),
            "explanation": self.explanation,
        }
