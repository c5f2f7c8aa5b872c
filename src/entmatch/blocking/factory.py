"""Registry-based factory for blocking strategies.

Strategies are described declaratively (``{"type": ..., "params": ...}``)
and built through ``STRATEGY_REGISTRY``. Composite params nest further
strategy configs, built recursively.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from entmatch.blocking.strategies import (
    BlockField,
    BlockingStrategy,
    CompositeBlockingStrategy,
    SortedNeighbourhoodStrategy,
    SortField,
    StandardBlockingStrategy,
)
from entmatch.errors import ConfigurationError
from entmatch.utils import RecordKey, default_record_key

__all__ = [
    "STRATEGY_REGISTRY",
    "BlockingMode",
    "BlockingStrategyConfig",
    "BlockingConfig",
    "create_strategy",
    "create_strategies",
]

BlockingMode = Literal["single", "composite", "union"]
BLOCKING_MODES: tuple[str, ...] = ("single", "composite", "union")


@dataclass(frozen=True)
class BlockingStrategyConfig:
    """Declarative configuration for one blocking strategy.

    Attributes
    ----------
    type : str
        Key in ``STRATEGY_REGISTRY``.
    enabled : bool
        Disabled configs are skipped by ``create_strategies``.
    params : dict[str, Any]
        Strategy options, JSON-shaped.
    """

    type: str
    enabled: bool = True
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BlockingStrategyConfig:
        """Build from a ``{"type", "enabled"?, "params"?}`` mapping."""
        return cls(
            type=data["type"],
            enabled=data.get("enabled", True),
            params=dict(data.get("params", {})),
        )


# ============================================================================
# Builders
# ============================================================================


def _block_field(item: str | Mapping[str, Any]) -> BlockField:
    if isinstance(item, str):
        return BlockField(item)
    return BlockField(field=item["field"], transform=item.get("transform"), n=item.get("n"))


def _sort_field(item: str | Mapping[str, Any]) -> SortField:
    if isinstance(item, str):
        return SortField(item)
    return SortField(
        field=item["field"],
        transform=item.get("transform"),
        n=item.get("n"),
        order=item.get("order", "asc"),
    )


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list | tuple) else [value]


def _build_standard(params: Mapping[str, Any], record_key: RecordKey) -> BlockingStrategy:
    if "fields" not in params:
        raise ConfigurationError("standard blocking requires 'fields'")
    return StandardBlockingStrategy(
        [_block_field(item) for item in _as_list(params["fields"])],
        normalize_keys=params.get("normalize_keys", True),
    )


def _build_sorted_neighbourhood(
    params: Mapping[str, Any], record_key: RecordKey
) -> BlockingStrategy:
    if "sort_by" not in params or "window_size" not in params:
        raise ConfigurationError("sorted_neighbourhood blocking requires 'sort_by' and 'window_size'")
    return SortedNeighbourhoodStrategy(
        [_sort_field(item) for item in _as_list(params["sort_by"])],
        window_size=params["window_size"],
    )


def _build_composite(params: Mapping[str, Any], record_key: RecordKey) -> BlockingStrategy:
    children = [
        child if isinstance(child, BlockingStrategyConfig) else BlockingStrategyConfig.from_dict(child)
        for child in params.get("strategies", [])
    ]
    return CompositeBlockingStrategy(
        create_strategies(children, record_key=record_key),
        mode=params.get("mode", "union"),
        record_key=record_key,
    )


# type → builder taking JSON-shaped params and the record identity
STRATEGY_REGISTRY: dict[str, Callable[[Mapping[str, Any], RecordKey], BlockingStrategy]] = {
    "standard": _build_standard,
    "sorted_neighbourhood": _build_sorted_neighbourhood,
    "composite": _build_composite,
}


def create_strategy(
    config: BlockingStrategyConfig,
    *,
    record_key: RecordKey = default_record_key,
) -> BlockingStrategy:
    """Instantiate a single strategy from *config*.

    Parameters
    ----------
    config : BlockingStrategyConfig
        Declarative strategy description.
    record_key : RecordKey, optional
        Record identity for strategies that compare records, such as
        composite intersection.

    Raises
    ------
    ConfigurationError
        If ``config.type`` is not in the registry or its params are invalid.
    """
    builder = STRATEGY_REGISTRY.get(config.type)
    if builder is None:
        valid = ", ".join(sorted(STRATEGY_REGISTRY))
        raise ConfigurationError(f"Unknown blocking strategy type: {config.type!r}. Valid types: {valid}")
    return builder(config.params, record_key)


def create_strategies(
    configs: Sequence[BlockingStrategyConfig],
    *,
    record_key: RecordKey = default_record_key,
) -> list[BlockingStrategy]:
    """Instantiate all *enabled* strategies from a config list."""
    return [create_strategy(cfg, record_key=record_key) for cfg in configs if cfg.enabled]


# ============================================================================
# Engine-level blocking configuration
# ============================================================================


@dataclass(frozen=True)
class BlockingConfig:
    """Blocking strategies used by the engine and resolver.

    Attributes
    ----------
    strategies : tuple[BlockingStrategy, ...]
        Strategy instances, in priority order.
    mode : {"single", "composite", "union"}
        ``single`` with one strategy uses that strategy directly. Any
        other mode, or more than one strategy, unions the blocks of all
        strategies.
    """

    strategies: tuple[BlockingStrategy, ...]
    mode: BlockingMode = "single"

    def __post_init__(self) -> None:
        """Validate mode and coerce strategies to a tuple."""
        object.__setattr__(self, "strategies", tuple(self.strategies))
        if self.mode not in BLOCKING_MODES:
            raise ConfigurationError(
                f"Unknown blocking mode: {self.mode!r}. Valid modes: {', '.join(BLOCKING_MODES)}"
            )

    @property
    def combines(self) -> bool:
        """Whether blocks of several strategies are unioned."""
        return self.mode != "single" or len(self.strategies) > 1

    @classmethod
    def from_configs(
        cls,
        configs: Sequence[BlockingStrategyConfig],
        mode: BlockingMode = "single",
        *,
        record_key: RecordKey = default_record_key,
    ) -> BlockingConfig:
        """Build strategies from declarative configs."""
        return cls(strategies=tuple(create_strategies(configs, record_key=record_key)), mode=mode)
