"""Weighted scoring and three-way outcome classification.

This module turns per-field comparator similarities into an aggregate
match score and classifies it against configured thresholds.
"""

from entmatch.scoring.classifier import classify_outcome
from entmatch.scoring.engine import MatchingEngine
from entmatch.scoring.explainer import MatchExplainer, similarity_label
from entmatch.scoring.models import (
    FieldComparison,
    FieldMatchConfig,
    MatchingConfig,
    MatchOutcome,
    MatchResult,
    MatchScore,
    RecordPair,
    Thresholds,
)

__all__ = [
    # Configuration
    "FieldMatchConfig",
    "Thresholds",
    "MatchingConfig",
    # Results
    "RecordPair",
    "FieldComparison",
    "MatchScore",
    "MatchOutcome",
    "MatchResult",
    # Engine
    "MatchingEngine",
    "classify_outcome",
    # Explanations
    "MatchExplainer",
    "similarity_label",
]
