"""Block-key transforms.

A transform turns one field value into one key component, or None when
the value cannot produce a key (the record is then left out of the
block). Transforms are named (``identity``, ``firstLetter``, ``firstN``,
``soundex``, ``metaphone``, ``year``) or caller-supplied callables.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

from entmatch.errors import ConfigurationError
from entmatch.similarity.phonetic import metaphone_encode, soundex_encode

__all__ = [
    "BlockTransform",
    "TRANSFORM_NAMES",
    "apply_transform",
    "validate_transform",
    "transform_label",
    "identity",
    "first_letter",
    "first_n",
    "soundex_transform",
    "metaphone_transform",
    "year_transform",
]

BlockTransform = str | Callable[[Any], str | None]


def identity(value: Any) -> str | None:
    """Use the value as-is."""
    if value is None:
        return None
    return str(value)


def first_letter(value: Any) -> str | None:
    """First non-blank character, upper-cased."""
    return first_n(value, 1)


def first_n(value: Any, n: int) -> str | None:
    """First *n* characters of the trimmed value, upper-cased."""
    if value is None or n <= 0:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text[:n].upper()


def soundex_transform(value: Any) -> str | None:
    """Soundex code of the value."""
    if value is None:
        return None
    return soundex_encode(str(value).strip()) or None


def metaphone_transform(value: Any) -> str | None:
    """Metaphone code of the value."""
    if value is None:
        return None
    return metaphone_encode(str(value).strip()) or None


def year_transform(value: Any) -> str | None:
    """Year of a date, datetime, ISO-8601 string or POSIX timestamp."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, date):
        return str(value.year)
    if isinstance(value, int | float):
        try:
            return str(datetime.fromtimestamp(value, UTC).year)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        try:
            return str(datetime.fromisoformat(text).year)
        except ValueError:
            return None
    return None


_NAMED: dict[str, Callable[[Any], str | None]] = {
    "identity": identity,
    "firstLetter": first_letter,
    "soundex": soundex_transform,
    "metaphone": metaphone_transform,
    "year": year_transform,
}

TRANSFORM_NAMES: frozenset[str] = frozenset({*_NAMED, "firstN"})


def validate_transform(transform: BlockTransform | None, n: int | None = None) -> None:
    """Reject unknown transform names and ``firstN`` without a positive *n*.

    Raises
    ------
    ConfigurationError
        If the transform cannot be applied.
    """
    if transform is None or callable(transform):
        return
    if transform not in TRANSFORM_NAMES:
        valid = ", ".join(sorted(TRANSFORM_NAMES))
        raise ConfigurationError(f"Unknown transform: {transform!r}. Valid transforms: {valid}")
    if transform == "firstN" and (n is None or n <= 0):
        raise ConfigurationError(f"firstN transform requires a positive n, got {n!r}")


def apply_transform(value: Any, transform: BlockTransform | None, n: int | None = None) -> str | None:
    """Apply *transform* to *value*.

    Parameters
    ----------
    value : Any
        Raw field value.
    transform : BlockTransform | None
        Transform name or callable; None behaves like ``identity``.
    n : int | None, optional
        Prefix length for ``firstN``.

    Returns
    -------
    str | None
        Key component, or None if the value yields no key.

    Notes
    -----
    A callable transform that raises is treated as returning None, so
    one malformed record never aborts a blocking pass.
    """
    if value is None:
        return None

    if transform is None:
        return identity(value)

    if callable(transform):
        try:
            result = transform(value)
        except Exception:  # noqa: BLE001 - caller code; record is excluded instead
            return None
        return None if result is None else str(result)

    if transform == "firstN":
        return first_n(value, n or 0)

    return _NAMED[transform](value)


def transform_label(transform: BlockTransform | None) -> str:
    """Readable name of a transform for strategy names."""
    if transform is None:
        return ""
    if callable(transform):
        return "custom"
    return transform
