"""Tests for BlockGenerator statistics, pairs and audit events."""

import json
import string
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from entmatch.audit import AuditLogger
from entmatch.blocking import (
    BlockField,
    BlockGenerator,
    BlockSet,
    CompositeBlockingStrategy,
    SortedNeighbourhoodStrategy,
    StandardBlockingStrategy,
)


@pytest.fixture
def generator() -> BlockGenerator:
    """Provide a generator with default record identity."""
    return BlockGenerator()


# ============================================================================
# calculate_stats
# ============================================================================


@pytest.mark.unit
def test_stats_singleton_blocks_full_reduction(
    generator: BlockGenerator,
    make_person: Callable[..., dict[str, Any]],
) -> None:
    """Test 26 records in 26 singleton blocks need no comparisons."""
    records = [make_person(f"r{c}", code=c) for c in string.ascii_uppercase]
    blocks = generator.generate_blocks(records, StandardBlockingStrategy("code"))

    stats = generator.calculate_stats(blocks)

    assert stats.total_records == 26
    assert stats.total_blocks == 26
    assert stats.min_block_size == stats.max_block_size == 1
    assert stats.avg_records_per_block == 1.0
    assert stats.comparisons_with_blocking == 0
    assert stats.comparisons_without_blocking == 325
    assert stats.reduction_percentage == 100.0


@pytest.mark.unit
def test_stats_standard_blocking_never_exceeds_full_space(
    generator: BlockGenerator,
    people: list[dict[str, Any]],
) -> None:
    """Test partitioning blocks never cost more than comparing everything."""
    strategy = StandardBlockingStrategy(BlockField("lastName", "soundex"))
    stats = generator.calculate_stats(generator.generate_blocks(people, strategy))

    assert stats.total_records == 5
    assert stats.total_blocks == 3
    assert stats.comparisons_with_blocking == 2
    assert stats.comparisons_without_blocking == 10
    assert stats.comparisons_with_blocking <= stats.comparisons_without_blocking
    assert stats.reduction_percentage == pytest.approx(80.0)


@pytest.mark.unit
def test_stats_overlapping_windows_use_override(
    generator: BlockGenerator,
    make_person: Callable[..., dict[str, Any]],
) -> None:
    """Test overlapping windows are counted per block and the override sets n."""
    records = [make_person(f"r{i}", name=str(i)) for i in range(5)]
    blocks = SortedNeighbourhoodStrategy("name", window_size=3).generate_blocks(records)

    stats = generator.calculate_stats(blocks, total_records=5)

    assert stats.total_blocks == 3
    assert stats.comparisons_with_blocking == 9
    assert stats.comparisons_without_blocking == 10
    assert stats.reduction_percentage == pytest.approx(10.0)
    assert len(generator.generate_pairs(blocks)) == 7


@pytest.mark.unit
def test_stats_count_unique_records_without_override(
    generator: BlockGenerator,
    make_person: Callable[..., dict[str, Any]],
) -> None:
    """Test records appearing in several blocks are counted once."""
    a, b, c = make_person("a"), make_person("b"), make_person("c")

    stats = generator.calculate_stats({"x": [a, b], "y": [b, c]})

    assert stats.total_records == 3
    assert stats.avg_records_per_block == 2.0


@pytest.mark.unit
def test_stats_empty_blocks(generator: BlockGenerator) -> None:
    """Test empty input produces zeroed statistics without dividing by zero."""
    stats = generator.calculate_stats({})

    assert stats.total_records == 0
    assert stats.total_blocks == 0
    assert stats.avg_records_per_block == 0.0
    assert stats.reduction_percentage == 0.0
    assert stats.to_dict()["max_block_size"] == 0


# ============================================================================
# generate_pairs
# ============================================================================


@pytest.mark.unit
def test_pairs_deduplicated_across_blocks(
    generator: BlockGenerator,
    make_person: Callable[..., dict[str, Any]],
) -> None:
    """Test the same two records in two blocks give exactly one pair."""
    a, b = make_person("a"), make_person("b")

    pairs = generator.generate_pairs({"k1": [a, b], "k2": [b, a]})

    assert pairs == [(a, b)]


@pytest.mark.unit
def test_pairs_skip_self_pairs(
    generator: BlockGenerator,
    make_person: Callable[..., dict[str, Any]],
) -> None:
    """Test a record listed twice in a block is not paired with itself."""
    a = make_person("a")

    assert generator.generate_pairs({"k": [a, a]}) == []


@pytest.mark.unit
def test_pairs_use_object_identity_without_ids(generator: BlockGenerator) -> None:
    """Test records without ids are distinct even with equal contents."""
    left, right = {"name": "Ann"}, {"name": "Ann"}

    assert generator.generate_pairs({"k": [left, right]}) == [(left, right)]


@pytest.mark.unit
def test_pairs_custom_record_key(make_person: Callable[..., dict[str, Any]]) -> None:
    """Test a caller-supplied identity controls deduplication."""
    generator = BlockGenerator(record_key=lambda r: r["email"])
    a = make_person("a", email="x@example.com")
    b = make_person("b", email="x@example.com")
    c = make_person("c", email="y@example.com")

    assert generator.generate_pairs({"k": [a, b, c]}) == [(a, c)]


# ============================================================================
# generate_blocks_composite
# ============================================================================


@pytest.mark.unit
def test_generate_blocks_composite_namespaces_by_strategy_name(
    generator: BlockGenerator,
    people: list[dict[str, Any]],
) -> None:
    """Test several strategies are unioned under their names."""
    blocks = generator.generate_blocks_composite(
        people,
        [StandardBlockingStrategy("lastName"), StandardBlockingStrategy("email")],
    )

    assert "standard:lastName:lastname:jones" in blocks
    assert "standard:email:email:john.smith@example.com" in blocks


@pytest.mark.unit
def test_generate_blocks_composite_repeated_names(
    generator: BlockGenerator,
    people: list[dict[str, Any]],
) -> None:
    """Test two strategies with the same name keep separate namespaces."""
    blocks = generator.generate_blocks_composite(
        people,
        [StandardBlockingStrategy("lastName"), StandardBlockingStrategy("lastName")],
    )

    assert "standard:lastName:lastname:jones" in blocks
    assert "standard:lastName#1:lastname:jones" in blocks


@pytest.mark.unit
def test_generate_blocks_composite_single_strategy(
    generator: BlockGenerator,
    people: list[dict[str, Any]],
) -> None:
    """Test one strategy returns its blocks without namespacing."""
    strategy = StandardBlockingStrategy("lastName")

    assert generator.generate_blocks_composite(people, [strategy]) == strategy.generate_blocks(
        people
    )


# ============================================================================
# extract_blocking_keys
# ============================================================================


@pytest.mark.unit
def test_extract_blocking_keys(
    generator: BlockGenerator,
    make_person: Callable[..., dict[str, Any]],
) -> None:
    """Test per-field keys for standard, neighbourhood and composite strategies."""
    record = make_person("a", firstName="John", lastName="Smith")
    standard = StandardBlockingStrategy(
        [BlockField("lastName", "soundex"), BlockField("firstName", "firstLetter")]
    )
    neighbourhood = SortedNeighbourhoodStrategy("email", window_size=2)

    assert generator.extract_blocking_keys(record, standard) == {
        "lastName": "S530",
        "firstName": "J",
    }
    assert generator.extract_blocking_keys(record, neighbourhood) == {}
    assert generator.extract_blocking_keys(
        record, CompositeBlockingStrategy([neighbourhood, standard])
    ) == {"lastName": "S530", "firstName": "J"}


class EmailDomainStrategy:
    """Strategy without a ``blocking_keys`` method."""

    name = "email-domain"

    def generate_blocks(self, records: Sequence[Any]) -> BlockSet:
        blocks: BlockSet = {}
        for record in records:
            email = record.get("email")
            if email:
                domain = email.split("@")[-1]
                blocks.setdefault(f"domain:{domain}|tag:x:y", []).append(record)
                blocks.setdefault(f"email:{email}", []).append(record)
        return blocks


@pytest.mark.unit
def test_extract_blocking_keys_custom_strategy(
    generator: BlockGenerator,
    make_person: Callable[..., dict[str, Any]],
) -> None:
    """Test keys of a user-defined strategy are read from its block keys."""
    record = make_person("a", email="ann@example.com")
    strategy = EmailDomainStrategy()

    assert generator.extract_blocking_keys(record, strategy) == {
        "domain": "example.com",
        "tag": "x:y",
        "email": "ann@example.com",
    }
    assert generator.extract_blocking_keys(make_person("b"), strategy) == {}
    assert generator.extract_blocking_keys(
        record,
        CompositeBlockingStrategy([strategy, StandardBlockingStrategy("email")]),
    ) == {"domain": "example.com", "tag": "x:y", "email": "ann@example.com"}


@pytest.mark.unit
def test_extract_blocking_keys_skips_unnamed_components(generator: BlockGenerator) -> None:
    """Test key components without a field name are ignored."""

    class Bare:
        name = "bare"

        def generate_blocks(self, records: Sequence[Any]) -> BlockSet:
            return {"email:x": list(records), "plain": list(records), ":y": list(records)}

    assert generator.extract_blocking_keys({"id": "a"}, Bare()) == {"email": "x"}


# ============================================================================
# Audit events
# ============================================================================


@pytest.mark.unit
def test_oversized_block_warning(
    tmp_path: Path,
    make_person: Callable[..., dict[str, Any]],
) -> None:
    """Test blocks above max_block_size emit a WARN event."""
    records = [make_person(f"r{i}", city="Leeds") for i in range(3)]
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="t", log_path=log_path) as logger:
        generator = BlockGenerator(logger=logger, max_block_size=2)
        blocks = generator.generate_blocks(records, StandardBlockingStrategy("city"))
        generator.generate_pairs(blocks)

    events = [json.loads(line) for line in log_path.read_text().splitlines()]
    names = [e["event"] for e in events]

    assert names == [
        "stage_started",
        "oversized_block",
        "stage_finished",
        "stage_started",
        "stage_finished",
    ]
    warning = events[1]
    assert warning["level"] == "WARN"
    assert warning["stage"] == "blocking"
    assert warning["data"]["block_size"] == 3
    assert events[-1]["data"]["counters"] == {"pairs_raw": 3, "pairs_unique": 3}
