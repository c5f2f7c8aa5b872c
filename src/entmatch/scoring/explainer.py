"""Human-readable explanations of match scores."""

import json
from datetime import date
from typing import Any

from entmatch.scoring.models import FieldComparison, MatchOutcome, MatchResult, MatchScore

__all__ = ["MatchExplainer", "similarity_label"]

OUTCOME_LABELS: dict[MatchOutcome, str] = {
    MatchOutcome.NO_MATCH: "No Match",
    MatchOutcome.POTENTIAL_MATCH: "Potential Match",
    MatchOutcome.DEFINITE_MATCH: "Definite Match",
}

# (lower bound, label), checked top-down
_SIMILARITY_LABELS: tuple[tuple[float, str], ...] = (
    (1.0, "exact match"),
    (0.9, "very high similarity"),
    (0.8, "high similarity"),
    (0.6, "moderate similarity"),
    (0.4, "low similarity"),
)


def similarity_label(similarity: float) -> str:
    """Describe a similarity in words.

    Examples
    --------
    >>> similarity_label(0.85)
    'high similarity'
    >>> similarity_label(0.1)
    'no match'
    """
    for bound, label in _SIMILARITY_LABELS:
        if similarity >= bound:
            return label
    return "no match"


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool | int | float):
        return str(value)
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


class MatchExplainer:
    """Render a ``MatchResult`` as a multi-line text breakdown.

    The first line states the outcome and ``score/max``; each field then
    gets a line with a threshold indicator (✓ / ✗), a similarity label
    and the ``similarity × weight = contribution`` arithmetic, followed
    by both values.
    """

    def explain(self, result: MatchResult) -> str:
        """Explain a classified match result."""
        return self.explain_score(result.score, result.outcome)

    def explain_score(self, score: MatchScore, outcome: MatchOutcome) -> str:
        """Explain a score that has not been wrapped in a ``MatchResult`` yet."""
        label = OUTCOME_LABELS.get(outcome, str(outcome))
        lines = [
            f"Match Outcome: {label} (Score: {score.total:.1f}/{score.max_possible:.1f})",
            "",
            "Field Comparisons:",
        ]
        for comparison in score.field_comparisons:
            lines.extend(self._format_field(comparison))
        return "\n".join(lines)

    def _format_field(self, comparison: FieldComparison) -> list[str]:
        indicator = "✓" if comparison.met_threshold else "✗"
        lines = [
            f"{indicator} {comparison.field}: {similarity_label(comparison.similarity)} "
            f"({comparison.similarity:.2f} × {comparison.weight:.0f} = "
            f"{comparison.weighted_score:.1f})",
            f"  Record A: {_format_value(comparison.left_value)}",
            f"  Record B: {_format_value(comparison.right_value)}",
        ]
        if comparison.strategy != "exact":
            lines.append(f"  Strategy: {comparison.strategy}")
        if not comparison.met_threshold and comparison.threshold:
            lines.append(
                f"  Below threshold: {comparison.raw_similarity:.2f} < {comparison.threshold:.2f}"
            )
        lines.append("")
        return lines
