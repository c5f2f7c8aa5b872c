"""Threshold classification of raw match totals."""

from entmatch.scoring.models import MatchOutcome, Thresholds

__all__ = ["classify_outcome"]


def classify_outcome(total: float, thresholds: Thresholds) -> MatchOutcome:
    """Map a raw *total* onto no-match / potential-match / definite-match.

    Parameters
    ----------
    total : float
        Non-normalized match total.
    thresholds : Thresholds
        Outcome boundaries on the same scale as *total*.

    Returns
    -------
    MatchOutcome
        ``NO_MATCH`` below ``no_match``, ``DEFINITE_MATCH`` at or above
        ``definite_match``, ``POTENTIAL_MATCH`` in between.

    Examples
    --------
    >>> classify_outcome(20, Thresholds(no_match=10, definite_match=20))
    <MatchOutcome.DEFINITE_MATCH: 'definite-match'>
    """
    if total < thresholds.no_match:
        return MatchOutcome.NO_MATCH
    if total >= thresholds.definite_match:
        return MatchOutcome.DEFINITE_MATCH
    return MatchOutcome.POTENTIAL_MATCH
