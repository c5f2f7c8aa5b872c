"""Blocking strategies.

Each strategy maps a record sequence to a ``BlockSet``: block key →
ordered records sharing that key. Records sharing a block become
candidate pairs; everything else is never compared.

Architecture
------------
* ``BlockingStrategy`` — structural protocol (one attribute, one method).
* ``StandardBlockingStrategy`` — exact equality of (transformed) keys.
* ``SortedNeighbourhoodStrategy`` — overlapping windows over a sort order.
* ``CompositeBlockingStrategy`` — union or intersection of child strategies.
* ``blocking_keys`` — the field values one record contributes to a strategy.

No strategy raises while generating blocks; invalid options are
rejected by the constructors.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable

from entmatch.blocking.models import BlockKey, BlockSet
from entmatch.blocking.pairs import iter_unique_pairs
from entmatch.blocking.transforms import (
    BlockTransform,
    apply_transform,
    transform_label,
    validate_transform,
)
from entmatch.errors import ConfigurationError
from entmatch.utils import RecordKey, default_record_key, get_field_value

__all__ = [
    "BlockingStrategy",
    "blocking_keys",
    "BlockField",
    "SortField",
    "StandardBlockingStrategy",
    "SortedNeighbourhoodStrategy",
    "CompositeBlockingStrategy",
    "CompositeMode",
    "MIN_WINDOW_SIZE",
]

MIN_WINDOW_SIZE = 2

SortOrder = Literal["asc", "desc"]
CompositeMode = Literal["union", "intersection"]


# ============================================================================
# Protocol
# ============================================================================


@runtime_checkable
class BlockingStrategy(Protocol):
    """Structural protocol every blocking strategy satisfies.

    Attributes
    ----------
    name : str
        Stable, descriptive identifier (used to namespace block keys).
    """

    name: str

    def generate_blocks(self, records: Sequence[Any]) -> BlockSet:
        """Group *records* into blocks."""
        ...


def blocking_keys(strategy: BlockingStrategy, record: Any) -> dict[str, str]:
    """Field → key value pairs *record* contributes to *strategy*.

    Strategies exposing a ``blocking_keys(record)`` method answer
    directly. For any other strategy the record is blocked on its own and
    each resulting ``field:value`` key component (components joined by
    ``|``) is split on its first colon. Components without a colon carry
    no field name and are skipped. Where two components name the same
    field the first wins.

    Parameters
    ----------
    strategy : BlockingStrategy
        Strategy to query.
    record : Any
        Record to key.

    Returns
    -------
    dict[str, str]
        Key values by field name; empty when the record is not keyable.
    """
    method = getattr(strategy, "blocking_keys", None)
    if callable(method):
        return dict(method(record))

    keys: dict[str, str] = {}
    for block_key in strategy.generate_blocks([record]):
        for part in str(block_key).split("|"):
            field_name, sep, value = part.partition(":")
            if sep and field_name:
                keys.setdefault(field_name, value)
    return keys


# ============================================================================
# Field specifications
# ============================================================================


@dataclass(frozen=True, slots=True)
class BlockField:
    """One blocking key component.

    Attributes
    ----------
    field : str
        Field name, dotted for nested values.
    transform : BlockTransform | None
        Transform name or callable, identity when None.
    n : int | None
        Prefix length for ``firstN``.
    """

    field: str
    transform: BlockTransform | None = None
    n: int | None = None

    def __post_init__(self) -> None:
        """Validate transform options."""
        if not self.field:
            raise ConfigurationError("Blocking field name must not be empty")
        validate_transform(self.transform, self.n)

    def key_part(self, record: Any) -> str | None:
        """Transformed value of this field for *record*."""
        return apply_transform(get_field_value(record, self.field), self.transform, self.n)


@dataclass(frozen=True, slots=True)
class SortField:
    """One sort key for sorted-neighbourhood blocking.

    Attributes
    ----------
    field : str
        Field name, dotted for nested values.
    transform : BlockTransform | None
        Transform applied before sorting.
    n : int | None
        Prefix length for ``firstN``.
    order : {"asc", "desc"}
        Sort direction for this key.
    """

    field: str
    transform: BlockTransform | None = None
    n: int | None = None
    order: SortOrder = "asc"

    def __post_init__(self) -> None:
        """Validate transform options and order."""
        if not self.field:
            raise ConfigurationError("Sort field name must not be empty")
        validate_transform(self.transform, self.n)
        if self.order not in ("asc", "desc"):
            raise ConfigurationError(f"Sort order must be 'asc' or 'desc', got {self.order!r}")

    def sort_key(self, record: Any) -> str | None:
        """Transformed value of this field for *record*."""
        return apply_transform(get_field_value(record, self.field), self.transform, self.n)


def _as_fields(spec: Any, cls: type) -> tuple[Any, ...]:
    items = spec if isinstance(spec, list | tuple) else [spec]
    fields = tuple(cls(field=item) if isinstance(item, str) else item for item in items)
    if not fields:
        raise ConfigurationError(f"At least one {cls.__name__} is required")
    for item in fields:
        if not isinstance(item, cls):
            raise ConfigurationError(f"Expected str or {cls.__name__}, got {type(item).__name__}")
    return fields


# ============================================================================
# Standard blocking
# ============================================================================


class StandardBlockingStrategy:
    """Block records whose (transformed) key fields are equal.

    Keys read ``field:value`` for one field and
    ``field1:value1|field2:value2`` for several. A record with any key
    component that transforms to None is left out of every block.

    Parameters
    ----------
    fields : str | BlockField | Sequence[str | BlockField]
        Key component(s), in key order.
    normalize_keys : bool, optional
        Trim and lower-case the final key, by default True.

    Examples
    --------
    >>> strategy = StandardBlockingStrategy(BlockField("lastName", "soundex"))
    >>> strategy.name
    'standard:lastName:soundex'
    """

    def __init__(
        self,
        fields: str | BlockField | Sequence[str | BlockField],
        *,
        normalize_keys: bool = True,
    ) -> None:
        self.fields: tuple[BlockField, ...] = _as_fields(fields, BlockField)
        self.normalize_keys = normalize_keys
        self.name = self._build_name()

    def block_key(self, record: Any) -> BlockKey | None:
        """Block key for *record*, or None when it cannot be keyed."""
        parts: list[str] = []
        for spec in self.fields:
            value = spec.key_part(record)
            if value is None:
                return None
            parts.append(f"{spec.field}:{value}")
        key = "|".join(parts)
        return key.strip().lower() if self.normalize_keys else key

    def blocking_keys(self, record: Any) -> dict[str, str]:
        """Transformed value of each key field, omitting fields that yield None."""
        keys: dict[str, str] = {}
        for spec in self.fields:
            value = spec.key_part(record)
            if value is not None:
                keys[spec.field] = value
        return keys

    def generate_blocks(self, records: Sequence[Any]) -> BlockSet:
        """Group records by block key, preserving input order."""
        blocks: BlockSet = {}
        for record in records:
            key = self.block_key(record)
            if key is None:
                continue
            blocks.setdefault(key, []).append(record)
        return blocks

    def _build_name(self) -> str:
        if len(self.fields) == 1:
            spec = self.fields[0]
            label = transform_label(spec.transform)
            return f"standard:{spec.field}:{label}" if label else f"standard:{spec.field}"
        return "standard:" + "+".join(spec.field for spec in self.fields)


# ============================================================================
# Sorted neighbourhood
# ============================================================================


class SortedNeighbourhoodStrategy:
    """Slide a fixed-size window over records sorted by one or more keys.

    Window ``i`` (``0 <= i <= n - window_size``) becomes block
    ``window:<i>`` holding sorted records ``i .. i + window_size - 1``.
    Neighbouring records share several windows; pair generation removes
    the repeats. When ``window_size >= n`` a single ``window:0`` block
    holds every record.

    Parameters
    ----------
    sort_by : str | SortField | Sequence[str | SortField]
        Primary key first; later keys break ties. The sort is stable,
        so fully tied records keep input order.
    window_size : int
        Records per window, at least 2.

    Notes
    -----
    Records whose sort key transforms to None are skipped.
    """

    def __init__(
        self,
        sort_by: str | SortField | Sequence[str | SortField],
        window_size: int,
    ) -> None:
        if isinstance(window_size, bool) or not isinstance(window_size, int):
            raise ConfigurationError(f"window_size must be an integer, got {window_size!r}")
        if window_size < MIN_WINDOW_SIZE:
            raise ConfigurationError(
                f"window_size must be >= {MIN_WINDOW_SIZE}, got {window_size}"
            )
        self.sort_fields: tuple[SortField, ...] = _as_fields(sort_by, SortField)
        self.window_size = window_size
        self.name = (
            "sorted-neighbourhood:"
            + "+".join(spec.field for spec in self.sort_fields)
            + f":w{window_size}"
        )

    def sort_records(self, records: Sequence[Any]) -> list[Any]:
        """Return the keyable records in sort order."""
        keyed: list[tuple[tuple[str | None, ...], Any]] = []
        for record in records:
            keys = tuple(spec.sort_key(record) for spec in self.sort_fields)
            if any(key is None for key in keys):
                continue
            keyed.append((keys, record))

        # Least significant key first; each pass is stable.
        for index in reversed(range(len(self.sort_fields))):
            descending = self.sort_fields[index].order == "desc"
            keyed.sort(key=lambda item, i=index: item[0][i], reverse=descending)

        return [record for _, record in keyed]

    def blocking_keys(self, record: Any) -> dict[str, str]:
        """Transformed sort key values, omitting fields that yield None."""
        keys: dict[str, str] = {}
        for spec in self.sort_fields:
            value = spec.sort_key(record)
            if value is not None:
                keys[spec.field] = value
        return keys

    def generate_blocks(self, records: Sequence[Any]) -> BlockSet:
        """Emit one block per window position."""
        ordered = self.sort_records(records)
        count = len(ordered)
        if count == 0:
            return {}

        if self.window_size >= count:
            return {"window:0": ordered}

        return {
            f"window:{start}": ordered[start : start + self.window_size]
            for start in range(count - self.window_size + 1)
        }


# ============================================================================
# Composite
# ============================================================================


class CompositeBlockingStrategy:
    """Combine child strategies by union or intersection.

    ``union`` keeps a pair that shares a block in *any* child: every
    child's blocks are kept, keys namespaced ``s<index>:<key>``.

    ``intersection`` keeps a pair only if it shares a block in *every*
    child: the children's pair sets are intersected by record identity
    and each surviving pair is emitted as its own two-record block
    ``pair:<i>``.

    Parameters
    ----------
    strategies : Sequence[BlockingStrategy]
        Child strategies (at least one). A single child passes through.
    mode : {"union", "intersection"}, optional
        By default "union".
    record_key : RecordKey, optional
        Identity used to intersect pair sets.
    """

    def __init__(
        self,
        strategies: Sequence[BlockingStrategy],
        mode: CompositeMode = "union",
        *,
        record_key: RecordKey = default_record_key,
    ) -> None:
        if not strategies:
            raise ConfigurationError("CompositeBlockingStrategy requires at least one strategy")
        if mode not in ("union", "intersection"):
            raise ConfigurationError(f"Composite mode must be 'union' or 'intersection', got {mode!r}")
        self.strategies: tuple[BlockingStrategy, ...] = tuple(strategies)
        self.mode: CompositeMode = mode
        self.record_key = record_key
        self.name = f"composite:{mode}:[" + "+".join(s.name for s in self.strategies) + "]"

    def generate_blocks(self, records: Sequence[Any]) -> BlockSet:
        """Run every child, then combine their blocks according to ``mode``."""
        if not records:
            return {}
        if len(self.strategies) == 1:
            return self.strategies[0].generate_blocks(records)

        block_sets = [strategy.generate_blocks(records) for strategy in self.strategies]

        if self.mode == "union":
            return {
                f"s{index}:{key}": list(block)
                for index, blocks in enumerate(block_sets)
                for key, block in blocks.items()
            }
        return self._intersect(block_sets)

    def blocking_keys(self, record: Any) -> dict[str, str]:
        """Merged keys of every child; the earliest child wins a shared field."""
        merged: dict[str, str] = {}
        for child in self.strategies:
            for field_name, value in blocking_keys(child, record).items():
                merged.setdefault(field_name, value)
        return merged

    def _intersect(self, block_sets: list[BlockSet]) -> BlockSet:
        first, *rest = block_sets
        rest_keys = [
            {key for key, _, _ in iter_unique_pairs(blocks, self.record_key)} for blocks in rest
        ]

        blocks: BlockSet = {}
        for key, left, right in iter_unique_pairs(first, self.record_key):
            if all(key in keys for keys in rest_keys):
                blocks[f"pair:{len(blocks)}"] = [left, right]
        return blocks
