"""Tests for JSON configuration loading and schema validation."""

import copy
import json
from pathlib import Path
from typing import Any

import pytest
from jsonschema import Draft202012Validator

from entmatch.blocking import StandardBlockingStrategy
from entmatch.config import (
    CONFIG_SCHEMA,
    LOG_EVENT_SCHEMA,
    load_config,
    parse_config,
    validate_config,
)
from entmatch.errors import ConfigurationError
from entmatch.resolution import Resolver
from entmatch.scoring import MatchingEngine


@pytest.mark.unit
@pytest.mark.parametrize("schema", [CONFIG_SCHEMA, LOG_EVENT_SCHEMA])
def test_schemas_are_valid_draft_2020_12(schema: dict[str, Any]) -> None:
    """Test bundled schemas are themselves valid."""
    Draft202012Validator.check_schema(schema)


@pytest.mark.unit
def test_parse_config(config_document: dict[str, Any]) -> None:
    """Test a valid document becomes typed settings."""
    settings = parse_config(config_document)

    assert list(settings.matching.fields) == ["email", "firstName", "lastName"]
    assert settings.matching.fields["firstName"].threshold == 0.8
    assert settings.matching.thresholds.definite_match == 40
    assert settings.blocking is not None
    assert settings.blocking.mode == "single"
    assert isinstance(settings.blocking.strategies[0], StandardBlockingStrategy)
    assert settings.max_block_size == 1000


@pytest.mark.unit
def test_parse_config_without_blocking(config_document: dict[str, Any]) -> None:
    """Test blocking is optional."""
    del config_document["blocking"]

    settings = parse_config(config_document)

    assert settings.blocking is None
    assert not settings.build_engine().has_blocking


@pytest.mark.unit
def test_build_engine_and_resolver(
    config_document: dict[str, Any],
    people: list[dict[str, Any]],
) -> None:
    """Test settings build a working engine and resolver."""
    config_document["blocking"]["max_block_size"] = 50
    settings = parse_config(config_document)

    engine = settings.build_engine()
    resolver = settings.build_resolver()

    assert isinstance(engine, MatchingEngine)
    assert engine.block_generator.max_block_size == 50
    assert isinstance(resolver, Resolver)
    assert resolver.deduplicate_batch(people).stats.comparisons_made == 2


@pytest.mark.unit
@pytest.mark.parametrize(
    ("mutate", "location"),
    [
        (lambda d: d.pop("matching"), "$"),
        (lambda d: d["matching"]["fields"]["email"].update(weight=-1), "$.matching.fields.email"),
        (lambda d: d["matching"]["fields"]["email"].update(threshold=2), "$.matching.fields.email"),
        (lambda d: d["matching"]["thresholds"].pop("no_match"), "$.matching.thresholds"),
        (lambda d: d.update(extra=True), "$"),
        (lambda d: d["blocking"].update(mode="chain"), "$.blocking.mode"),
        (lambda d: d["blocking"]["strategies"][0].update(type="lsh"), "$.blocking.strategies[0]"),
        (
            lambda d: d["blocking"]["strategies"].append(
                {"type": "sorted_neighbourhood", "params": {"sort_by": "name", "window_size": 1}}
            ),
            "$.blocking.strategies[1]",
        ),
    ],
)
def test_schema_violations(
    config_document: dict[str, Any],
    mutate: Any,
    location: str,
) -> None:
    """Test structural errors are reported with their location."""
    document = copy.deepcopy(config_document)
    mutate(document)

    with pytest.raises(ConfigurationError, match="Invalid configuration at") as exc_info:
        validate_config(document)

    assert location in str(exc_info.value)


@pytest.mark.unit
def test_semantic_errors(config_document: dict[str, Any]) -> None:
    """Test checks beyond the schema still raise ConfigurationError."""
    inverted = copy.deepcopy(config_document)
    inverted["matching"]["thresholds"] = {"no_match": 50, "definite_match": 40}
    with pytest.raises(ConfigurationError, match="less than"):
        parse_config(inverted)

    first_n = copy.deepcopy(config_document)
    first_n["blocking"]["strategies"][0]["params"]["fields"] = [
        {"field": "lastName", "transform": "firstN"}
    ]
    with pytest.raises(ConfigurationError, match="firstN"):
        parse_config(first_n)

    bad_flag = copy.deepcopy(config_document)
    bad_flag["blocking"]["strategies"][0]["params"]["fields"] = "lastName"
    bad_flag["blocking"]["strategies"][0]["params"]["normalize_keys"] = "yes"
    with pytest.raises(ConfigurationError):
        parse_config(bad_flag)


@pytest.mark.unit
def test_record_key_shared_by_blocking_and_engine(config_document: dict[str, Any]) -> None:
    """Test one record identity reaches composite blocking and the engine."""

    def by_email(record: dict[str, Any]) -> Any:
        return record.get("email")

    config_document["blocking"]["strategies"] = [
        {
            "type": "composite",
            "params": {
                "mode": "intersection",
                "strategies": [
                    {"type": "standard", "params": {"fields": "lastName"}},
                    {"type": "standard", "params": {"fields": "firstName"}},
                ],
            },
        }
    ]

    settings = parse_config(config_document, record_key=by_email)
    engine = settings.build_engine()

    assert settings.record_key is by_email
    assert settings.blocking.strategies[0].record_key is by_email
    assert engine.record_key is by_email
    assert settings.build_resolver().engine.record_key is by_email


@pytest.mark.unit
def test_unknown_comparator_fails_when_building(config_document: dict[str, Any]) -> None:
    """Test comparator names are checked against the comparator table."""
    config_document["matching"]["fields"]["email"]["strategy"] = "cosine"
    settings = parse_config(config_document)

    with pytest.raises(ConfigurationError, match="Unknown comparator"):
        settings.build_engine()


@pytest.mark.unit
def test_load_config(tmp_path: Path, config_document: dict[str, Any]) -> None:
    """Test loading from a file."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_document), encoding="utf-8")

    settings = load_config(path)

    assert settings.matching.total_weight == 50


@pytest.mark.unit
def test_load_config_errors(tmp_path: Path) -> None:
    """Test missing files and malformed JSON."""
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_config(broken)
