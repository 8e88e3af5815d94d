"""Error taxonomy & redaction helpers.

All failures raised by p4watch derive from :class:`P4Error` so callers (the
CLI, a CI orchestrator) can catch the whole family in one place while still
telling the categories apart:

- ConfigurationError -> required setting missing or unsafe; raised before any
  process is spawned.
- InvalidInputError -> a value would reach a command line but fails the
  injection-safety grammar (or is empty).
- ValidationError -> input is well formed but rejected by policy
  (numeric-only labels).
- ToolExecutionError -> ``p4`` returned a non-zero exit code or timed out.

Public helpers:
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(P4PASSWD\s*=\s*)\S+", re.IGNORECASE), r"\1<redacted>"),
    (re.compile(r"(-P\s+)\S+"), r"\1<redacted>"),
    (re.compile(r"\b[0-9A-F]{32}\b"), "<redacted>"),  # p4 login tickets
]


class P4Error(RuntimeError):
    """Base class for every error raised by p4watch."""


class ConfigurationError(P4Error):
    pass


# Short alias kept for symmetry with ``load_config``.
ConfigError = ConfigurationError


class InvalidInputError(P4Error):
    pass


class ValidationError(P4Error):
    pass


class ToolExecutionError(P4Error):
    """The external tool reported failure.

    ``stderr`` keeps the captured diagnostics verbatim; the message and
    ``command`` are redacted so the exception can be logged safely.
    """

    def __init__(
        self,
        command: str,
        exit_code: int,
        stderr: str = "",
        stdout: str = "",
        *,
        timed_out: bool = False,
    ) -> None:
        self.command = redact(command)
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout
        self.timed_out = timed_out
        detail = redact(stderr.strip()) or "no error output"
        reason = "timed out" if timed_out else f"exited with code {exit_code}"
        super().__init__(f"Command {reason}: {self.command}: {detail}")


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Mask passwords and login tickets in arbitrary text."""
    if not text:
        return text
    redacted = text
    for pat, replacement in _SENSITIVE_PATTERNS:
        redacted = pat.sub(replacement, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception.

    Taxonomy classes and local file system errors ('io') map straight to
    their category; tool failures are inspected for well-known Perforce
    messages (authentication, connection, timeouts). Everything else falls
    back to 'generic'.
    """
    msg = str(exc) if exc else ""
    low = msg.lower()
    name = exc.__class__.__name__

    if isinstance(exc, ConfigurationError):
        return ErrorInfo("config", redact(msg), name)
    if isinstance(exc, InvalidInputError):
        return ErrorInfo("p4.input", redact(msg), name)
    if isinstance(exc, ValidationError):
        return ErrorInfo("p4.validation", redact(msg), name)

    details: dict[str, Any] | None = None
    if isinstance(exc, OSError):
        if exc.filename:
            details = {"path": str(exc.filename)}
        return ErrorInfo("io", redact(msg), name, details=details)
    if isinstance(exc, ToolExecutionError):
        details = {"exit_code": exc.exit_code, "command": exc.command}
        if exc.timed_out:
            return ErrorInfo("p4.timeout", redact(msg), name, transient=True, details=details)
    if any(k in low for k in ("p4passwd", "password invalid", "session has expired", "ticket")):
        return ErrorInfo("p4.auth", redact(msg), name, details=details)
    if any(k in low for k in ("connect to server failed", "tcp connect", "connection refused")):
        return ErrorInfo("p4.connect", redact(msg), name, transient=True, details=details)
    if "timeout" in low or "timed out" in low:
        return ErrorInfo("p4.timeout", redact(msg), name, transient=True, details=details)
    return ErrorInfo("generic", redact(msg), name, details=details)


__all__ = [
    "ConfigError",
    "ConfigurationError",
    "ErrorInfo",
    "InvalidInputError",
    "P4Error",
    "ToolExecutionError",
    "ValidationError",
    "classify_error",
    "redact",
]
