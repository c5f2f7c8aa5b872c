"""Command-line interface for entmatch.

Provides CLI commands for batch deduplication, single-record resolution
and blocking statistics.
"""

import json
import sys
from pathlib import Path

import click

from entmatch.audit.helpers import get_package_version

__all__ = ["cli"]

__version__ = get_package_version()


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Resolver configuration JSON file",
)


@click.group()
@click.version_option(version=__version__, prog_name="entmatch")
def cli() -> None:
    """Blocking, scoring and classification for entity resolution.

    Use 'entmatch COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("records_path", type=click.Path(exists=True, dir_okay=False))
@config_option
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write per-record matches as JSONL",
)
@click.option(
    "--audit-log",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append JSONL audit events to this file",
)
@click.option(
    "--min-score",
    type=float,
    default=None,
    help="Minimum total for a kept pair (default: no_match threshold)",
)
@click.option(
    "--max-pairs-per-record",
    type=click.IntRange(min=1),
    default=None,
    help="Keep only the best N matches per record",
)
def dedupe(
    records_path: str,
    config_path: str,
    output: str | None,
    audit_log: str | None,
    min_score: float | None,
    max_pairs_per_record: int | None,
) -> None:
    """Find duplicates within RECORDS_PATH (JSON array or JSONL).

    Examples
    --------
        entmatch dedupe people.jsonl -c config.json -o matches.jsonl
        entmatch dedupe people.json -c config.json --min-score 25 --audit-log run.jsonl
    """
    from entmatch.api import dedupe as run_dedupe

    try:
        batch = run_dedupe(
            records_path,
            config_path,
            output_path=output,
            audit_log=audit_log,
            min_score=min_score,
            max_pairs_per_record=max_pairs_per_record,
        )
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    stats = batch.stats
    click.secho(
        f"✓ Compared {stats.comparisons_made} pairs across {stats.records_processed} records "
        f"({stats.definite_matches_found} definite, {stats.potential_matches_found} potential)",
        fg="green",
    )
    click.echo(f"  Records with matches: {stats.records_with_matches}")
    click.echo(f"  Records without matches: {stats.records_without_matches}")
    if output:
        click.echo(f"  Output: {output}")


@cli.command()
@click.argument("record_json", type=str)
@click.argument("records_path", type=click.Path(exists=True, dir_okay=False))
@config_option
@click.option(
    "--max-results",
    type=click.IntRange(min=1),
    default=None,
    help="Show only the best N results",
)
@click.option(
    "--explain",
    is_flag=True,
    help="Print the field-by-field explanation of each result",
)
def resolve(
    record_json: str,
    records_path: str,
    config_path: str,
    max_results: int | None,
    explain: bool,
) -> None:
    """Match RECORD_JSON against the records in RECORDS_PATH.

    RECORD_JSON is an inline JSON object, or @FILE to read it from a file.

    Examples
    --------
        entmatch resolve '{"email": "ann@example.com"}' people.jsonl -c config.json
        entmatch resolve @new.json people.jsonl -c config.json --explain
    """
    from entmatch.api import load_records, record_label
    from entmatch.config import load_config

    try:
        raw = Path(record_json[1:]).read_text(encoding="utf-8") if record_json.startswith("@") else record_json
        candidate = json.loads(raw)
        if not isinstance(candidate, dict):
            raise ValueError("RECORD_JSON must be a JSON object")

        resolver = load_config(config_path).build_resolver()
        existing = load_records(records_path)
        results = resolver.resolve(candidate, existing, max_results=max_results)
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    if not results:
        click.echo("No candidates found.")
        return

    positions = {id(record): index for index, record in enumerate(existing)}
    for result in results:
        label = record_label(result.candidate_record, positions.get(id(result.candidate_record)))
        click.echo(f"{label}\t{result.outcome.value}\t{result.score.total:.2f}")
        if explain:
            click.echo(result.explanation)


@cli.command()
@click.argument("records_path", type=click.Path(exists=True, dir_okay=False))
@config_option
def stats(records_path: str, config_path: str) -> None:
    """Print blocking statistics for RECORDS_PATH as JSON.

    Examples
    --------
        entmatch stats people.jsonl -c config.json
    """
    from entmatch.api import load_records
    from entmatch.config import load_config

    try:
        engine = load_config(config_path).build_engine()
        blocking_stats = engine.get_blocking_stats(load_records(records_path))
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    if blocking_stats is None:
        click.secho("✗ Error: no blocking strategies configured", fg="red", err=True)
        sys.exit(1)

    click.echo(json.dumps(blocking_stats.to_dict(), indent=2))


if __name__ == "__main__":
    cli()
