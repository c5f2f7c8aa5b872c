"""JSON configuration loading and validation."""

from entmatch.config.loader import ResolverSettings, load_config, parse_config, validate_config
from entmatch.config.schema import CONFIG_SCHEMA, LOG_EVENT_SCHEMA

__all__ = [
    "ResolverSettings",
    "load_config",
    "parse_config",
    "validate_config",
    "CONFIG_SCHEMA",
    "LOG_EVENT_SCHEMA",
]
