"""Exact and edit-based string similarity comparators.

Every comparator maps two field values to a similarity in [0, 1] and
shares one null policy:

- both values None → 1.0 (0.0 when ``null_matches_null=False``)
- exactly one None → 0.0

Non-string values are coerced with ``str()`` where the comparator works
on characters. No comparator raises for data-shape reasons.
"""

import re
from typing import Any

from rapidfuzz.distance import Levenshtein

__all__ = [
    "null_similarity",
    "exact_match",
    "levenshtein",
    "jaro",
    "jaro_winkler",
]

_WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_PREFIX_SCALE = 0.1
DEFAULT_MAX_PREFIX_LENGTH = 4


def null_similarity(a: Any, b: Any, null_matches_null: bool = True) -> float | None:
    """Apply the shared null policy.

    Returns
    -------
    float | None
        The similarity when at least one side is None, otherwise None
        (meaning the caller must compare the values itself).
    """
    if a is None and b is None:
        return 1.0 if null_matches_null else 0.0
    if a is None or b is None:
        return 0.0
    return None


def exact_match(
    a: Any,
    b: Any,
    *,
    case_sensitive: bool = True,
    null_matches_null: bool = True,
) -> float:
    """Compare two values for equality.

    Parameters
    ----------
    a, b : Any
        Values to compare (strings, dates, numbers, ...).
    case_sensitive : bool, optional
        Only affects str/str comparisons, by default True.
    null_matches_null : bool, optional
        Similarity of two missing values, by default True.

    Returns
    -------
    float
        1.0 on equality, 0.0 otherwise.
    """
    nulls = null_similarity(a, b, null_matches_null)
    if nulls is not None:
        return nulls

    if isinstance(a, str) and isinstance(b, str):
        if case_sensitive:
            return 1.0 if a == b else 0.0
        return 1.0 if a.casefold() == b.casefold() else 0.0

    # bool is an int subclass; True must not equal 1 here
    if isinstance(a, bool) != isinstance(b, bool):
        return 0.0

    return 1.0 if a == b else 0.0


def levenshtein(
    a: Any,
    b: Any,
    *,
    case_sensitive: bool = False,
    normalize_whitespace: bool = True,
    null_matches_null: bool = True,
) -> float:
    """Normalised Levenshtein similarity: ``1 - distance / max(len)``.

    Parameters
    ----------
    a, b : Any
        Values to compare, coerced to str.
    case_sensitive : bool, optional
        By default False.
    normalize_whitespace : bool, optional
        Collapse whitespace runs and strip both ends, by default True.
    null_matches_null : bool, optional
        By default True.

    Returns
    -------
    float
        Similarity in [0, 1]; two empty strings are identical, an empty
        string against a non-empty one scores 0.

    Examples
    --------
    >>> levenshtein("hello", "hallo")
    0.8
    >>> levenshtein("Hello", "hello")
    1.0
    """
    nulls = null_similarity(a, b, null_matches_null)
    if nulls is not None:
        return nulls

    str_a, str_b = str(a), str(b)
    if not case_sensitive:
        str_a, str_b = str_a.lower(), str_b.lower()
    if normalize_whitespace:
        str_a = _WHITESPACE_RE.sub(" ", str_a).strip()
        str_b = _WHITESPACE_RE.sub(" ", str_b).strip()

    if not str_a and not str_b:
        return 1.0
    if not str_a or not str_b:
        return 0.0

    distance = Levenshtein.distance(str_a, str_b)
    return 1.0 - distance / max(len(str_a), len(str_b))


def jaro(s: str, t: str) -> float:
    """Base Jaro similarity of two non-empty strings.

    Notes
    -----
    Match window is ``max(len) // 2 - 1``; a negative window (both
    strings of length 1) yields 0. Each character of *t* can be matched
    once. Transpositions are counted over matched characters in their
    original order.
    """
    len_s, len_t = len(s), len(t)
    window = max(len_s, len_t) // 2 - 1
    if window < 0:
        return 0.0

    matched_s = [False] * len_s
    matched_t = [False] * len_t
    matches = 0

    for i, char in enumerate(s):
        start = max(0, i - window)
        end = min(i + window + 1, len_t)
        for j in range(start, end):
            if not matched_t[j] and char == t[j]:
                matched_s[i] = True
                matched_t[j] = True
                matches += 1
                break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i, char in enumerate(s):
        if not matched_s[i]:
            continue
        while not matched_t[k]:
            k += 1
        if char != t[k]:
            transpositions += 1
        k += 1

    return (matches / len_s + matches / len_t + (matches - transpositions / 2) / matches) / 3


def jaro_winkler(
    a: Any,
    b: Any,
    *,
    case_sensitive: bool = False,
    prefix_scale: float = DEFAULT_PREFIX_SCALE,
    max_prefix_length: int = DEFAULT_MAX_PREFIX_LENGTH,
    null_matches_null: bool = True,
) -> float:
    """Jaro similarity with the Winkler common-prefix bonus.

    Parameters
    ----------
    a, b : Any
        Values to compare, coerced to str.
    case_sensitive : bool, optional
        By default False.
    prefix_scale : float, optional
        Bonus per shared prefix character, by default 0.1.
    max_prefix_length : int, optional
        Longest prefix rewarded, by default 4.
    null_matches_null : bool, optional
        By default True.

    Returns
    -------
    float
        ``jaro + prefix_len * prefix_scale * (1 - jaro)``, capped at 1.

    Examples
    --------
    >>> round(jaro_winkler("MARTHA", "MARHTA"), 3)
    0.961
    >>> round(jaro_winkler("DIXON", "DICKSONX"), 3)
    0.813
    """
    nulls = null_similarity(a, b, null_matches_null)
    if nulls is not None:
        return nulls

    str_a, str_b = str(a), str(b)
    if not case_sensitive:
        str_a, str_b = str_a.lower(), str_b.lower()

    if not str_a and not str_b:
        return 1.0
    if not str_a or not str_b:
        return 0.0
    if str_a == str_b:
        return 1.0

    base = jaro(str_a, str_b)

    prefix = 0
    for char_a, char_b in zip(str_a[:max_prefix_length], str_b[:max_prefix_length], strict=False):
        if char_a != char_b:
            break
        prefix += 1

    return min(1.0, base + prefix * prefix_scale * (1 - base))
