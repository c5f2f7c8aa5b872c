"""Record field access and identity helpers.

Records are caller-defined: plain mappings, dataclasses or any object
with attributes. Helpers here never raise on missing data.
"""

from collections.abc import Callable, Hashable, Mapping
from typing import Any

__all__ = ["RecordKey", "get_field_value", "default_record_key", "pair_key"]

# record -> hashable identity used for pair deduplication
RecordKey = Callable[[Any], Hashable]


def get_field_value(record: Any, path: str) -> Any:
    """Resolve a dotted *path* (``"address.city"``) inside *record*.

    Parameters
    ----------
    record : Any
        Mapping or attribute-bearing object.
    path : str
        Field name, optionally dotted for nested values.

    Returns
    -------
    Any
        The value, or None when any segment is missing.
    """
    value = record
    for segment in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(segment)
        else:
            value = getattr(value, segment, None)
    return value


def default_record_key(record: Any) -> Hashable:
    """Identity of *record*: its ``id`` field when usable, else the object itself.

    Notes
    -----
    Structural equality is never used; two distinct records with equal
    contents but no ``id`` are different records.
    """
    rid = get_field_value(record, "id")
    if isinstance(rid, str | int) and not isinstance(rid, bool):
        return ("id", rid)
    return ("ref", id(record))


def pair_key(key_a: Hashable, key_b: Hashable) -> frozenset[Hashable]:
    """Order-independent key for an unordered record pair."""
    return frozenset((key_a, key_b))
