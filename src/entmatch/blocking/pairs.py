"""Deduplicated pair enumeration over blocks."""

from collections.abc import Hashable, Iterator
from itertools import combinations
from typing import Any

from entmatch.blocking.models import BlockSet
from entmatch.utils import RecordKey, pair_key

__all__ = ["iter_unique_pairs"]


def iter_unique_pairs(
    blocks: BlockSet,
    record_key: RecordKey,
) -> Iterator[tuple[frozenset[Hashable], Any, Any]]:
    """Yield ``(pair_key, left, right)`` once per unordered record pair.

    Pairs come out in block order, then in-block order. A pair seen in
    an earlier block is skipped; a record paired with itself (same
    identity listed twice) is never emitted.

    Parameters
    ----------
    blocks : BlockSet
        Blocks to enumerate.
    record_key : RecordKey
        Identity function; records are keyed once per block.
    """
    seen: set[frozenset[Hashable]] = set()

    for block in blocks.values():
        if len(block) < 2:
            continue
        keyed = [(record_key(record), record) for record in block]
        for (key_a, left), (key_b, right) in combinations(keyed, 2):
            if key_a == key_b:
                continue
            key = pair_key(key_a, key_b)
            if key in seen:
                continue
            seen.add(key)
            yield key, left, right
