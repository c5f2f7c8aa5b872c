"""JSON Schemas for resolver configuration files and audit log events."""

from typing import Any

__all__ = ["CONFIG_SCHEMA", "LOG_EVENT_SCHEMA"]

_BLOCK_FIELD: dict[str, Any] = {
    "oneOf": [
        {"type": "string", "minLength": 1},
        {
            "type": "object",
            "required": ["field"],
            "properties": {
                "field": {"type": "string", "minLength": 1},
                "transform": {"type": "string"},
                "n": {"type": "integer", "minimum": 1},
                "order": {"enum": ["asc", "desc"]},
            },
            "additionalProperties": False,
        },
    ]
}

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://entmatch.dev/schemas/config.schema.json",
    "title": "entmatch resolver configuration",
    "type": "object",
    "required": ["matching"],
    "properties": {
        "matching": {
            "type": "object",
            "required": ["fields", "thresholds"],
            "properties": {
                "fields": {
                    "type": "object",
                    "minProperties": 1,
                    "additionalProperties": {"$ref": "#/$defs/field_match"},
                },
                "thresholds": {
                    "type": "object",
                    "required": ["no_match", "definite_match"],
                    "properties": {
                        "no_match": {"type": "number"},
                        "definite_match": {"type": "number"},
                    },
                    "additionalProperties": False,
                },
            },
            "additionalProperties": False,
        },
        "blocking": {
            "type": "object",
            "required": ["strategies"],
            "properties": {
                "mode": {"enum": ["single", "composite", "union"]},
                "max_block_size": {"type": "integer", "minimum": 1},
                "strategies": {
                    "type": "array",
                    "items": {"$ref": "#/$defs/strategy"},
                },
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
    "$defs": {
        "field_match": {
            "type": "object",
            "required": ["strategy", "weight"],
            "properties": {
                "strategy": {"type": "string", "minLength": 1},
                "weight": {"type": "number", "minimum": 0},
                "threshold": {"type": "number", "minimum": 0, "maximum": 1},
                "case_sensitive": {"type": "boolean"},
                "options": {"type": "object"},
            },
            "additionalProperties": False,
        },
        "block_field": _BLOCK_FIELD,
        "block_fields": {
            "oneOf": [
                {"$ref": "#/$defs/block_field"},
                {"type": "array", "minItems": 1, "items": {"$ref": "#/$defs/block_field"}},
            ]
        },
        "strategy": {
            "type": "object",
            "required": ["type"],
            "properties": {
                "type": {"enum": ["standard", "sorted_neighbourhood", "composite"]},
                "enabled": {"type": "boolean"},
                "params": {"type": "object"},
            },
            "additionalProperties": False,
            "allOf": [
                {
                    "if": {"properties": {"type": {"const": "standard"}}},
                    "then": {
                        "required": ["params"],
                        "properties": {
                            "params": {
                                "required": ["fields"],
                                "properties": {
                                    "fields": {"$ref": "#/$defs/block_fields"},
                                    "normalize_keys": {"type": "boolean"},
                                },
                                "additionalProperties": False,
                            }
                        },
                    },
                },
                {
                    "if": {"properties": {"type": {"const": "sorted_neighbourhood"}}},
                    "then": {
                        "required": ["params"],
                        "properties": {
                            "params": {
                                "required": ["sort_by", "window_size"],
                                "properties": {
                                    "sort_by": {"$ref": "#/$defs/block_fields"},
                                    "window_size": {"type": "integer", "minimum": 2},
                                },
                                "additionalProperties": False,
                            }
                        },
                    },
                },
                {
                    "if": {"properties": {"type": {"const": "composite"}}},
                    "then": {
                        "required": ["params"],
                        "properties": {
                            "params": {
                                "required": ["strategies"],
                                "properties": {
                                    "mode": {"enum": ["union", "intersection"]},
                                    "strategies": {
                                        "type": "array",
                                        "minItems": 1,
                                        "items": {"$ref": "#/$defs/strategy"},
                                    },
                                },
                                "additionalProperties": False,
                            }
                        },
                    },
                },
            ],
        },
    },
}

LOG_EVENT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://entmatch.dev/schemas/log_event.schema.json",
    "title": "entmatch audit log event",
    "type": "object",
    "required": ["ts", "run_id", "level", "event", "data", "stage", "record_id"],
    "properties": {
        "ts": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T.*Z$"},
        "run_id": {"type": "string", "minLength": 1},
        "level": {"enum": ["DEBUG", "INFO", "WARN", "ERROR"]},
        "event": {"type": "string", "minLength": 1},
        "data": {"type": "object"},
        "stage": {"type": ["string", "null"]},
        "record_id": {"type": ["string", "null"]},
    },
    "additionalProperties": False,
}
