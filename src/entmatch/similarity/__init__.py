"""Field-level similarity comparators.

All comparators are pure functions ``(a, b, **options) -> float`` in
[0, 1] sharing one null policy (see ``string_metrics``).
"""

from entmatch.similarity.phonetic import (
    metaphone,
    metaphone_encode,
    soundex,
    soundex_encode,
)
from entmatch.similarity.registry import (
    BUILTIN_COMPARATORS,
    Comparator,
    accepted_options,
    default_comparators,
    resolve_comparator,
    validate_options,
)
from entmatch.similarity.string_metrics import (
    exact_match,
    jaro,
    jaro_winkler,
    levenshtein,
    null_similarity,
)

__all__ = [
    # String metrics
    "null_similarity",
    "exact_match",
    "levenshtein",
    "jaro",
    "jaro_winkler",
    # Phonetic
    "soundex",
    "soundex_encode",
    "metaphone",
    "metaphone_encode",
    # Registry
    "Comparator",
    "BUILTIN_COMPARATORS",
    "default_comparators",
    "resolve_comparator",
    "accepted_options",
    "validate_options",
]
