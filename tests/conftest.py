"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from entmatch.scoring import FieldMatchConfig, MatchingConfig, Thresholds  # noqa: E402


@pytest.fixture
def make_person() -> Callable[..., dict[str, Any]]:
    """Factory for person records with minimal boilerplate.

    Only the fields passed are set; ``id`` is always present.
    """

    def _factory(rid: str = "p1", **fields: Any) -> dict[str, Any]:
        return {"id": rid, **fields}

    return _factory


@pytest.fixture
def people(make_person: Callable[..., dict[str, Any]]) -> list[dict[str, Any]]:
    """Small population with two near-duplicate pairs."""
    return [
        make_person("p1", firstName="John", lastName="Smith", email="john.smith@example.com"),
        make_person("p2", firstName="Jon", lastName="Smyth", email="john.smith@example.com"),
        make_person("p3", firstName="Mary", lastName="Jones", email="mary@example.com"),
        make_person("p4", firstName="Maria", lastName="Jones", email="maria.j@example.com"),
        make_person("p5", firstName="Robert", lastName="Brown", email="rbrown@example.com"),
    ]


@pytest.fixture
def person_matching() -> MatchingConfig:
    """Email + name rules on a 0-50 point scale."""
    return MatchingConfig(
        fields={
            "email": FieldMatchConfig(strategy="exact", weight=20),
            "firstName": FieldMatchConfig(strategy="jaro_winkler", weight=10, threshold=0.8),
            "lastName": FieldMatchConfig(strategy="jaro_winkler", weight=20, threshold=0.8),
        },
        thresholds=Thresholds(no_match=20, definite_match=40),
    )


@pytest.fixture
def config_document() -> dict[str, Any]:
    """Valid JSON configuration document matching ``person_matching``."""
    return {
        "matching": {
            "fields": {
                "email": {"strategy": "exact", "weight": 20},
                "firstName": {"strategy": "jaro_winkler", "weight": 10, "threshold": 0.8},
                "lastName": {"strategy": "jaro_winkler", "weight": 20, "threshold": 0.8},
            },
            "thresholds": {"no_match": 20, "definite_match": 40},
        },
        "blocking": {
            "mode": "single",
            "strategies": [
                {
                    "type": "standard",
                    "params": {"fields": [{"field": "lastName", "transform": "soundex"}]},
                }
            ],
        },
    }
