"""JSON Schema describing the p4watch configuration document.

The schema is deliberately shallow: it pins the section names, the scalar
types and rejects unknown keys so that typos (``apply_lable``) fail loudly
instead of silently falling back to a default.
"""

from __future__ import annotations

from typing import Any

SCHEMA_KEY = "$schema"
SCHEMA_URL = "http://json-schema.org/draft-07/schema#"
SCHEMA_VERSION = "20261019"
SCHEMA_FILENAME = "p4watch.config.schema.json"

_NULLABLE_STRING: dict[str, Any] = {"type": ["string", "null"]}


def get_config_schema() -> dict[str, Any]:
    """Return the JSON Schema (draft-07) for ``p4watch.config.yaml``."""
    return {
        SCHEMA_KEY: SCHEMA_URL,
        "$comment": f"p4watch config schema v{SCHEMA_VERSION}",
        "title": "P4WatchConfig",
        "type": "object",
        "required": ["perforce"],
        "additionalProperties": False,
        "properties": {
            "version": {"type": "integer"},
            "perforce": {
                "type": "object",
                "required": ["view"],
                "additionalProperties": False,
                "properties": {
                    "executable": {"type": "string", "minLength": 1},
                    "view": {"type": "string"},
                    "client": _NULLABLE_STRING,
                    "user": _NULLABLE_STRING,
                    "port": _NULLABLE_STRING,
                    "working_directory": _NULLABLE_STRING,
                },
            },
            "behavior": {
                "type": ["object", "null"],
                "additionalProperties": False,
                "properties": {
                    "auto_get_source": {"type": "boolean"},
                    "apply_label": {"type": "boolean"},
                    "label_description": {"type": "string"},
                },
            },
            "process": {
                "type": ["object", "null"],
                "additionalProperties": False,
                "properties": {
                    "timeout": {"type": ["number", "null"], "exclusiveMinimum": 0},
                },
            },
            "logging": {
                "type": ["object", "null"],
                "additionalProperties": False,
                "properties": {
                    "json_enabled": {"type": "boolean"},
                    "level": {"type": "string"},
                },
            },
        },
    }


__all__ = ["SCHEMA_FILENAME", "SCHEMA_VERSION", "get_config_schema"]
