"""Load resolver configuration from JSON.

A configuration document is validated against ``CONFIG_SCHEMA`` first,
then turned into the frozen dataclasses the engine consumes. Semantic
checks the schema cannot express (threshold ordering, transform names,
comparator names) are raised by those dataclasses and the engine.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from entmatch.audit.logger import AuditLogger
from entmatch.blocking.factory import BlockingConfig, BlockingStrategyConfig
from entmatch.blocking.generator import DEFAULT_MAX_BLOCK_SIZE
from entmatch.config.schema import CONFIG_SCHEMA
from entmatch.errors import ConfigurationError
from entmatch.resolution.resolver import Resolver
from entmatch.scoring.engine import MatchingEngine
from entmatch.scoring.models import FieldMatchConfig, MatchingConfig, Thresholds
from entmatch.similarity.registry import Comparator
from entmatch.utils import RecordKey, default_record_key

__all__ = ["ResolverSettings", "load_config", "parse_config", "validate_config"]

_VALIDATOR = Draft202012Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class ResolverSettings:
    """Everything needed to build an engine and a resolver.

    Attributes
    ----------
    matching : MatchingConfig
        Field rules and thresholds.
    blocking : BlockingConfig | None
        Candidate generation, None to compare every pair.
    max_block_size : int
        Oversized-block warning limit.
    record_key : RecordKey
        Record identity shared by the blocking strategies and the engine.
    """

    matching: MatchingConfig
    blocking: BlockingConfig | None = None
    max_block_size: int = DEFAULT_MAX_BLOCK_SIZE
    record_key: RecordKey = default_record_key

    def build_engine(
        self,
        *,
        comparators: Mapping[str, Comparator] | None = None,
        logger: AuditLogger | None = None,
    ) -> MatchingEngine:
        """Construct a ``MatchingEngine`` from these settings."""
        return MatchingEngine(
            self.matching,
            comparators=comparators,
            blocking=self.blocking,
            record_key=self.record_key,
            logger=logger,
            max_block_size=self.max_block_size,
        )

    def build_resolver(
        self,
        *,
        comparators: Mapping[str, Comparator] | None = None,
        logger: AuditLogger | None = None,
    ) -> Resolver:
        """Construct a ``Resolver`` around a fresh engine."""
        engine = self.build_engine(comparators=comparators, logger=logger)
        return Resolver(engine, logger=logger)


def validate_config(data: Any) -> None:
    """Validate a raw configuration document against ``CONFIG_SCHEMA``.

    Raises
    ------
    ConfigurationError
        With the most relevant schema violation and its JSON path.
    """
    error = best_match(_VALIDATOR.iter_errors(data))
    if error is not None:
        location = error.json_path if error.path else "$"
        raise ConfigurationError(f"Invalid configuration at {location}: {error.message}")


def parse_config(
    data: Mapping[str, Any],
    *,
    record_key: RecordKey = default_record_key,
) -> ResolverSettings:
    """Build ``ResolverSettings`` from a configuration mapping.

    Parameters
    ----------
    data : Mapping[str, Any]
        Parsed JSON document.
    record_key : RecordKey, optional
        Record identity for the engine and for composite intersection.
        Defaults to the ``id`` field, else object identity.

    Returns
    -------
    ResolverSettings
        Validated settings.

    Raises
    ------
    ConfigurationError
        If the document is structurally or semantically invalid.
    """
    validate_config(data)

    matching_data = data["matching"]
    fields = {
        name: FieldMatchConfig(
            strategy=spec["strategy"],
            weight=spec["weight"],
            threshold=spec.get("threshold"),
            case_sensitive=spec.get("case_sensitive"),
            options=dict(spec.get("options", {})),
        )
        for name, spec in matching_data["fields"].items()
    }
    thresholds = Thresholds(
        no_match=matching_data["thresholds"]["no_match"],
        definite_match=matching_data["thresholds"]["definite_match"],
    )
    matching = MatchingConfig(fields=fields, thresholds=thresholds)

    blocking_data = data.get("blocking")
    if blocking_data is None:
        return ResolverSettings(matching=matching, record_key=record_key)

    configs = [BlockingStrategyConfig.from_dict(item) for item in blocking_data["strategies"]]
    blocking = BlockingConfig.from_configs(
        configs, mode=blocking_data.get("mode", "single"), record_key=record_key
    )
    return ResolverSettings(
        matching=matching,
        blocking=blocking,
        max_block_size=blocking_data.get("max_block_size", DEFAULT_MAX_BLOCK_SIZE),
        record_key=record_key,
    )


def load_config(path: Path | str, *, record_key: RecordKey = default_record_key) -> ResolverSettings:
    """Read and parse a JSON configuration file.

    *record_key* is passed to ``parse_config``.

    Raises
    ------
    ConfigurationError
        If the file is not valid JSON or not a valid configuration.
    FileNotFoundError
        If *path* does not exist.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e
    return parse_config(data, record_key=record_key)
