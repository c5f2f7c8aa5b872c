"""Common utility functions for entmatch."""

from entmatch.utils.fields import (
    RecordKey,
    default_record_key,
    get_field_value,
    pair_key,
)
from entmatch.utils.timestamps import get_iso_timestamp

__all__ = [
    "RecordKey",
    "default_record_key",
    "get_field_value",
    "pair_key",
    "get_iso_timestamp",
]
