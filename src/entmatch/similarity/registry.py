"""Explicit comparator lookup table.

The matching engine receives a name → function mapping at build time;
nothing here is mutated at runtime. ``default_comparators()`` returns a
fresh dict so callers can add their own comparators without affecting
other engines.
"""

import inspect
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from entmatch.errors import ConfigurationError
from entmatch.similarity.phonetic import metaphone, soundex
from entmatch.similarity.string_metrics import exact_match, jaro_winkler, levenshtein

__all__ = [
    "Comparator",
    "BUILTIN_COMPARATORS",
    "default_comparators",
    "resolve_comparator",
    "accepted_options",
    "validate_options",
]

# (a, b, **options) -> similarity in [0, 1]
Comparator = Callable[..., float]

BUILTIN_COMPARATORS: Mapping[str, Comparator] = MappingProxyType(
    {
        "exact": exact_match,
        "levenshtein": levenshtein,
        "jaro_winkler": jaro_winkler,
        "jaro-winkler": jaro_winkler,
        "soundex": soundex,
        "metaphone": metaphone,
    }
)


def default_comparators() -> dict[str, Comparator]:
    """Return a new, caller-owned copy of the built-in comparators."""
    return dict(BUILTIN_COMPARATORS)


def resolve_comparator(name: str, comparators: Mapping[str, Comparator]) -> Comparator:
    """Look up *name* in *comparators*.

    Raises
    ------
    ConfigurationError
        If the name is not registered.
    """
    comparator = comparators.get(name)
    if comparator is None:
        valid = ", ".join(sorted(comparators))
        raise ConfigurationError(f"Unknown comparator: {name!r}. Valid comparators: {valid}")
    return comparator


def accepted_options(comparator: Comparator) -> set[str] | None:
    """Keyword options *comparator* accepts, or None if it takes ``**kwargs``."""
    try:
        params = inspect.signature(comparator).parameters.values()
    except (TypeError, ValueError):
        return None
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params):
        return None
    return {p.name for p in params if p.kind is inspect.Parameter.KEYWORD_ONLY}


def validate_options(name: str, comparator: Comparator, options: Mapping[str, Any]) -> None:
    """Check every key of *options* is a keyword the comparator accepts.

    Raises
    ------
    ConfigurationError
        On the first unknown option.
    """
    accepted = accepted_options(comparator)
    if accepted is None:
        return
    unknown = sorted(set(options) - accepted)
    if unknown:
        raise ConfigurationError(
            f"Comparator {name!r} does not accept option(s): {', '.join(unknown)}"
        )
