"""Public API for loading records and running deduplication.

This module provides the high-level convenience layer of entmatch:
- Loading records from JSON arrays or JSONL files
- Exporting rows to JSONL format
- Running batch deduplication from a configuration file
"""

from __future__ import annotations

import json
import sys
import time
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from entmatch.audit import AuditLogger, generate_run_id
from entmatch.config import load_config
from entmatch.resolution import DeduplicationBatchResult
from entmatch.utils import get_field_value

__all__ = [
    "load_records",
    "write_jsonl",
    "record_label",
    "batch_rows",
    "dedupe",
    "RecordLoadError",
]


class RecordLoadError(Exception):
    """Raised when a records file cannot be read."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> None:
        """Initialize record load error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where the error occurred.
        line : int | None, optional
            1-based JSONL line number, when known.
        """
        super().__init__(message)
        self.file = file
        self.line = line


def load_records(path: str | Path) -> list[dict[str, Any]]:
    """Load records from a JSON array or a JSONL file.

    The format is detected from the first non-blank character: ``[``
    means a JSON array, anything else one JSON object per line.

    Parameters
    ----------
    path : str | Path
        Records file.

    Returns
    -------
    list[dict[str, Any]]
        Records in file order.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    RecordLoadError
        If the content is not valid JSON or a record is not an object.

    Examples
    --------
        >>> from entmatch import load_records
        >>> records = load_records("customers.jsonl")
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    text = file_path.read_text(encoding="utf-8")
    if text.lstrip().startswith("["):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise RecordLoadError(f"Invalid JSON in {file_path.name}: {e}", file=str(file_path)) from e
        records = list(data)
    else:
        records = []
        for line_no, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise RecordLoadError(
                    f"Invalid JSON on line {line_no} of {file_path.name}: {e}",
                    file=str(file_path),
                    line=line_no,
                ) from e

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise RecordLoadError(
                f"Record {index} in {file_path.name} is not a JSON object",
                file=str(file_path),
            )
    return records


def write_jsonl(
    rows: Iterable[Mapping[str, Any]],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> int:
    """Write *rows* to a JSONL file (one JSON object per line).

    Returns
    -------
    int
        Number of rows written.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False, sort_keys=sort_keys, default=str) + "\n")
            count += 1
    return count


def record_label(record: Any, fallback: int | None = None) -> str:
    """Display identifier of *record*: its ``id`` field, else ``#<fallback>``."""
    rid = get_field_value(record, "id")
    if rid is not None:
        return str(rid)
    return f"#{fallback}" if fallback is not None else "?"


def batch_rows(
    batch: DeduplicationBatchResult,
    records: Sequence[Any],
) -> list[dict[str, Any]]:
    """Flatten a batch result into JSON-ready rows.

    Each row is ``{"record_id", "matches": [{"record_id", "outcome",
    "total", "normalized_total"}]}``. Records without an ``id`` are
    labelled by their input position.
    """
    positions = {id(record): index for index, record in enumerate(records)}

    def label(record: Any) -> str:
        return record_label(record, positions.get(id(record)))

    return [
        {
            "record_id": label(result.record),
            "matches": [
                {
                    "record_id": label(match.candidate_record),
                    "outcome": match.outcome.value,
                    "total": match.score.total,
                    "normalized_total": match.score.normalized_total,
                }
                for match in result.matches
            ],
        }
        for result in batch.results
    ]


def dedupe(
    records_path: str | Path,
    config_path: str | Path,
    *,
    output_path: str | Path | None = None,
    audit_log: str | Path | None = None,
    min_score: float | None = None,
    max_pairs_per_record: int | None = None,
) -> DeduplicationBatchResult:
    """Deduplicate a records file using a JSON configuration.

    Parameters
    ----------
    records_path : str | Path
        JSON array or JSONL records file.
    config_path : str | Path
        Resolver configuration file.
    output_path : str | Path | None, optional
        Write per-record matches as JSONL here.
    audit_log : str | Path | None, optional
        Append audit events to this JSONL file.
    min_score : float | None, optional
        Minimum total for a kept pair; defaults to the no-match threshold.
    max_pairs_per_record : int | None, optional
        Keep only the best N matches per record.

    Returns
    -------
    DeduplicationBatchResult
        Per-record matches and run counters.

    Raises
    ------
    FileNotFoundError
        If an input file does not exist.
    ConfigurationError
        If the configuration is invalid.
    RecordLoadError
        If the records file cannot be read.

    Examples
    --------
        >>> from entmatch import dedupe
        >>> batch = dedupe("people.jsonl", "config.json", output_path="matches.jsonl")
        >>> print(batch.stats.definite_matches_found)
    """
    logger = AuditLogger(generate_run_id(), Path(audit_log)) if audit_log else None
    start = time.perf_counter()

    try:
        if logger:
            logger.run_started(
                command=sys.argv,
                parameters={
                    "records": str(records_path),
                    "config": str(config_path),
                    "min_score": min_score,
                    "max_pairs_per_record": max_pairs_per_record,
                },
            )

        settings = load_config(config_path)
        records = load_records(records_path)
        resolver = settings.build_resolver(logger=logger)
        batch = resolver.deduplicate_batch(
            records,
            max_pairs_per_record=max_pairs_per_record,
            min_score=min_score,
        )

        if output_path is not None:
            written = write_jsonl(batch_rows(batch, records), output_path)
            if logger:
                logger.artifact_written(path=str(output_path), record_count=written)

        if logger:
            logger.run_finished(
                status="success",
                duration_seconds=time.perf_counter() - start,
                records_processed=len(records),
            )
        return batch
    except Exception as e:
        if logger:
            logger.error(type(e).__name__, str(e))
            logger.run_finished(status="failed", duration_seconds=time.perf_counter() - start)
        raise
    finally:
        if logger:
            logger.close()
