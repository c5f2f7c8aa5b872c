"""Tests for the public API module."""

import json
from pathlib import Path
from typing import Any

import pytest

from entmatch import RecordLoadError, dedupe, load_records, write_jsonl
from entmatch.api import batch_rows, record_label
from entmatch.errors import ConfigurationError


@pytest.fixture
def records_file(tmp_path: Path, people: list[dict[str, Any]]) -> Path:
    """People written as JSONL."""
    path = tmp_path / "people.jsonl"
    path.write_text("".join(json.dumps(p) + "\n" for p in people), encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path: Path, config_document: dict[str, Any]) -> Path:
    """Configuration document written as JSON."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_document), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# load_records
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_load_records_jsonl_skips_blank_lines(tmp_path: Path) -> None:
    """Test JSONL input with blank lines."""
    path = tmp_path / "r.jsonl"
    path.write_text('{"id": "a"}\n\n{"id": "b"}\n', encoding="utf-8")

    assert load_records(path) == [{"id": "a"}, {"id": "b"}]


@pytest.mark.unit
def test_load_records_json_array(tmp_path: Path) -> None:
    """Test a JSON array is detected from its first character."""
    path = tmp_path / "r.json"
    path.write_text('  [{"id": "a"}, {"id": "b"}]', encoding="utf-8")

    assert [r["id"] for r in load_records(path)] == ["a", "b"]


@pytest.mark.unit
def test_load_records_nonexistent_raises_error() -> None:
    """Test load_records raises FileNotFoundError for nonexistent file."""
    with pytest.raises(FileNotFoundError):
        load_records("/nonexistent/records.jsonl")


@pytest.mark.unit
def test_load_records_reports_bad_line(tmp_path: Path) -> None:
    """Test invalid JSONL reports the 1-based line number."""
    path = tmp_path / "r.jsonl"
    path.write_text('{"id": "a"}\n{broken\n', encoding="utf-8")

    with pytest.raises(RecordLoadError, match="line 2") as exc_info:
        load_records(path)

    assert exc_info.value.line == 2
    assert exc_info.value.file == str(path)


@pytest.mark.unit
@pytest.mark.parametrize("content", ["[1, 2]", '"text"\n', "[{broken"])
def test_load_records_rejects_non_objects(tmp_path: Path, content: str) -> None:
    """Test records must be JSON objects in valid JSON."""
    path = tmp_path / "r.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(RecordLoadError):
        load_records(path)


# ---------------------------------------------------------------------------
# write_jsonl / labels
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_write_jsonl(tmp_path: Path) -> None:
    """Test rows are written one per line with sorted keys."""
    output = tmp_path / "nested" / "out.jsonl"

    count = write_jsonl([{"b": 1, "a": "é"}, {"c": None}], output)

    assert count == 2
    assert output.read_text(encoding="utf-8").splitlines() == ['{"a": "é", "b": 1}', '{"c": null}']


@pytest.mark.unit
def test_record_label() -> None:
    """Test ids are preferred and positions used as fallback."""
    assert record_label({"id": 7}) == "7"
    assert record_label({"name": "x"}, 3) == "#3"
    assert record_label({"name": "x"}) == "?"


# ---------------------------------------------------------------------------
# dedupe
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_dedupe_returns_batch(records_file: Path, config_file: Path) -> None:
    """Test dedupe runs the configured resolver over the file."""
    batch = dedupe(records_file, config_file)

    assert batch.stats.records_processed == 5
    assert batch.stats.definite_matches_found == 1
    assert batch.stats.potential_matches_found == 1


@pytest.mark.unit
def test_dedupe_writes_output_rows(tmp_path: Path, records_file: Path, config_file: Path) -> None:
    """Test per-record rows are written to output_path."""
    output = tmp_path / "matches.jsonl"

    dedupe(records_file, config_file, output_path=output, min_score=30)

    rows = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    assert [row["record_id"] for row in rows] == ["p1", "p2"]
    assert rows[0]["matches"][0]["record_id"] == "p2"
    assert rows[0]["matches"][0]["outcome"] == "definite-match"


@pytest.mark.unit
def test_batch_rows_label_records_without_ids(config_document: dict[str, Any]) -> None:
    """Test records without ids are labelled by input position."""
    from entmatch.config import parse_config

    del config_document["blocking"]
    ann = {"email": "a@x.io", "firstName": "Ann", "lastName": "Lee"}
    records = [ann, {"email": "b@x.io", "firstName": "Bob", "lastName": "Kerr"}, dict(ann)]
    batch = parse_config(config_document).build_resolver().deduplicate_batch(records)

    rows = batch_rows(batch, records)

    assert [row["record_id"] for row in rows] == ["#0", "#2"]
    assert rows[0]["matches"][0]["record_id"] == "#2"


@pytest.mark.unit
def test_dedupe_audit_log_on_failure(tmp_path: Path, records_file: Path) -> None:
    """Test failures are logged before being re-raised."""
    config = tmp_path / "bad.json"
    config.write_text('{"matching": {}}', encoding="utf-8")
    log = tmp_path / "audit.jsonl"

    with pytest.raises(ConfigurationError):
        dedupe(records_file, config, audit_log=log)

    events = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert [e["event"] for e in events] == ["run_started", "error", "run_finished"]
    assert events[1]["data"]["exception_class"] == "ConfigurationError"
    assert events[2]["data"]["status"] == "failed"
