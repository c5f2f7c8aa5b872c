"""Blocking, scoring and classification for entity resolution.

This package provides:
- Similarity (entmatch.similarity) — field-level comparators
- Blocking (entmatch.blocking) — candidate generation strategies
- Scoring (entmatch.scoring) — weighted scoring and classification
- Resolution (entmatch.resolution) — single-record and batch matching
- Config (entmatch.config) — JSON configuration loading
- Audit (entmatch.audit) — JSONL event logging
- CLI (entmatch.cli) — command-line interface
- Public API (entmatch.api) — high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from entmatch.api import (
    RecordLoadError,
    dedupe,
    load_records,
    write_jsonl,
)
from entmatch.blocking import (
    BlockField,
    BlockGenerator,
    BlockingConfig,
    BlockingStats,
    CompositeBlockingStrategy,
    SortedNeighbourhoodStrategy,
    SortField,
    StandardBlockingStrategy,
)
from entmatch.config import ResolverSettings, load_config
from entmatch.errors import ConfigurationError
from entmatch.resolution import Resolver
from entmatch.scoring import (
    FieldMatchConfig,
    MatchExplainer,
    MatchingConfig,
    MatchingEngine,
    MatchOutcome,
    MatchScore,
    RecordPair,
    Thresholds,
)

__all__ = [
    "__version__",
    "__license__",
    # Errors
    "ConfigurationError",
    "RecordLoadError",
    # Blocking
    "BlockField",
    "SortField",
    "StandardBlockingStrategy",
    "SortedNeighbourhoodStrategy",
    "CompositeBlockingStrategy",
    "BlockGenerator",
    "BlockingConfig",
    "BlockingStats",
    # Scoring
    "FieldMatchConfig",
    "Thresholds",
    "MatchingConfig",
    "MatchingEngine",
    "MatchOutcome",
    "MatchScore",
    "RecordPair",
    "MatchExplainer",
    # Resolution
    "Resolver",
    # Config & API
    "ResolverSettings",
    "load_config",
    "load_records",
    "write_jsonl",
    "dedupe",
]
