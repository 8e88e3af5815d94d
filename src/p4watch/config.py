from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, cast

import yaml
from jsonschema import Draft7Validator

from .errors import ConfigError, ConfigurationError
from .schemas import get_config_schema

DEFAULT_EXECUTABLE = "p4"
DEFAULT_LABEL_DESCRIPTION = "Created by p4watch"

# client / user / port end up on a command line as single tokens
_SAFE_TOKEN = re.compile(r"^[A-Za-z0-9_.:@+=/\-]+$")
# depot views: //depot/path/... without revision specifiers or shell syntax
_SAFE_VIEW = re.compile(r"^//[^\s;&|<>$`'\"\\(){}!@#,%]+$")


@dataclass(frozen=True)
class P4Config:
    """Immutable adapter settings.

    Constructed once per adapter instance; use :meth:`with_overrides` to get
    a modified copy (for example from CLI flags).
    """

    view: str
    executable: str = DEFAULT_EXECUTABLE
    client: str | None = None
    user: str | None = None
    port: str | None = None
    working_directory: str | None = None
    auto_get_source: bool = False
    apply_label: bool = False
    label_description: str = DEFAULT_LABEL_DESCRIPTION
    timeout: float | None = None
    # Logging configuration
    logging_json_enabled: bool = False
    logging_level: str = "INFO"

    def __post_init__(self) -> None:
        self.validate()

    @property
    def views(self) -> tuple[str, ...]:
        return tuple(v.strip() for v in self.view.split(",") if v.strip())

    def validate(self) -> None:
        if not self.view or not self.view.strip():
            raise ConfigurationError("perforce view is required")
        for view in self.views:
            if not _SAFE_VIEW.match(view):
                raise ConfigurationError(f"invalid perforce view: {view!r}")
        if not self.executable or not self.executable.strip():
            raise ConfigurationError("perforce executable must not be empty")
        for name in ("client", "user", "port"):
            value = getattr(self, name)
            if value and not _SAFE_TOKEN.match(value):
                raise ConfigurationError(f"invalid perforce {name}: {value!r}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("process timeout must be positive")

    def with_overrides(self, **changes: Any) -> P4Config:
        return replace(self, **changes)


def _resolve_env_var(value: Any, keep_unresolved: bool = True) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith("$"):
        # Optional settings fall back to unset, required ones keep the original
        return os.getenv(value[1:], value if keep_unresolved else None)
    return value


def _section(raw: Mapping[str, Any], name: str) -> dict[str, Any]:
    return cast(dict[str, Any], raw.get(name, {}) or {})


def _validate_document(raw: Any, origin: str) -> None:
    validator = Draft7Validator(get_config_schema())
    errors = sorted(validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        location = "/".join(str(p) for p in first.path) or "<root>"
        raise ConfigurationError(f"Invalid configuration {origin} at {location}: {first.message}")


def config_from_mapping(raw: Mapping[str, Any], origin: str = "<mapping>") -> P4Config:
    """Validate a parsed configuration document and build a :class:`P4Config`."""
    _validate_document(raw, origin)
    p4 = _section(raw, "perforce")
    behavior = _section(raw, "behavior")
    process = _section(raw, "process")
    logging_config = _section(raw, "logging")

    def _opt(key: str) -> str | None:
        value = _resolve_env_var(p4.get(key), keep_unresolved=False)
        return str(value) if value not in (None, "") else None

    timeout = process.get("timeout")
    return P4Config(
        view=str(_resolve_env_var(p4.get("view", ""))),
        executable=str(_resolve_env_var(p4.get("executable", DEFAULT_EXECUTABLE))),
        client=_opt("client"),
        user=_opt("user"),
        port=_opt("port"),
        working_directory=_opt("working_directory"),
        auto_get_source=bool(behavior.get("auto_get_source", False)),
        apply_label=bool(behavior.get("apply_label", False)),
        label_description=str(behavior.get("label_description", DEFAULT_LABEL_DESCRIPTION)),
        timeout=float(timeout) if timeout is not None else None,
        logging_json_enabled=bool(logging_config.get("json_enabled", False)),
        logging_level=str(logging_config.get("level", "INFO")).upper(),
    )


def load_config(path: str | Path) -> P4Config:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Configuration file not found: {p}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {p}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration {p} must be a mapping")
    return config_from_mapping(raw, origin=str(p))


__all__ = ["DEFAULT_EXECUTABLE", "P4Config", "config_from_mapping", "load_config"]
