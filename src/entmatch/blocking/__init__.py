"""Blocking: reduce the comparison space to plausible candidate pairs.

Main Components
---------------
- StandardBlockingStrategy: exact (transformed) key equality
- SortedNeighbourhoodStrategy: sliding window over a sort order
- CompositeBlockingStrategy: union / intersection of strategies
- BlockGenerator: pair enumeration and reduction statistics
- STRATEGY_REGISTRY / create_strategy: declarative construction
"""

from entmatch.blocking.factory import (
    STRATEGY_REGISTRY,
    BlockingConfig,
    BlockingMode,
    BlockingStrategyConfig,
    create_strategies,
    create_strategy,
)
from entmatch.blocking.generator import DEFAULT_MAX_BLOCK_SIZE, BlockGenerator
from entmatch.blocking.models import BlockingStats, BlockKey, BlockSet
from entmatch.blocking.strategies import (
    MIN_WINDOW_SIZE,
    BlockField,
    BlockingStrategy,
    CompositeBlockingStrategy,
    CompositeMode,
    SortedNeighbourhoodStrategy,
    SortField,
    StandardBlockingStrategy,
    blocking_keys,
)
from entmatch.blocking.transforms import TRANSFORM_NAMES, BlockTransform, apply_transform

__all__ = [
    # Strategies
    "BlockingStrategy",
    "BlockField",
    "SortField",
    "StandardBlockingStrategy",
    "SortedNeighbourhoodStrategy",
    "CompositeBlockingStrategy",
    "CompositeMode",
    "MIN_WINDOW_SIZE",
    "blocking_keys",
    # Transforms
    "BlockTransform",
    "TRANSFORM_NAMES",
    "apply_transform",
    # Generator
    "BlockGenerator",
    "DEFAULT_MAX_BLOCK_SIZE",
    # Models
    "BlockKey",
    "BlockSet",
    "BlockingStats",
    # Factory
    "STRATEGY_REGISTRY",
    "BlockingConfig",
    "BlockingMode",
    "BlockingStrategyConfig",
    "create_strategy",
    "create_strategies",
]
