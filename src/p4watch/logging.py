"""Structured JSON logging for p4watch."""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, TextIO

from .errors import redact


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for attr in (
            "operation",
            "command",
            "exit_code",
            "duration_ms",
            "error",
        ):
            if hasattr(record, attr):
                entry[attr] = getattr(record, attr)
        # Include any extra (non-standard) attributes passed via extra kwargs
        reserved = set(entry.keys()) | set(_STANDARD_RECORD_ATTRS)
        for k, v in record.__dict__.items():
            if k not in reserved and not k.startswith("_"):
                entry[k] = v
        return json.dumps(entry, default=str)


_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class StructuredLogger:
    def __init__(
        self,
        name: str = "p4watch",
        json_logging: bool = False,
        level: str = "INFO",
        stream: TextIO | None = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        for h in list(self._logger.handlers):
            self._logger.removeHandler(h)
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if json_logging
            else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        self._logger.addHandler(handler)
        self._logger.propagate = False
        self._dedupe_enabled = json_logging
        self._last_signature: tuple[int, str, tuple[tuple[str, str], ...]] | None = None

    def _emit(self, level: int, message: str, extra: dict[str, Any]) -> None:
        if self._dedupe_enabled:
            signature = (
                level,
                message,
                tuple(sorted((k, repr(v)) for k, v in extra.items())),
            )
            if signature == self._last_signature:
                return
            self._last_signature = signature
        self._logger.log(level, message, extra=extra)

    def log_operation(self, operation: str, **kw: Any) -> None:
        extra = {"operation": operation, **kw}
        self._emit(logging.INFO, f"Operation: {operation}", extra)

    def log_command(
        self,
        executable: str,
        arguments: str,
        exit_code: int | None = None,
        **kw: Any,
    ) -> None:
        command = redact(f"{executable} {arguments}".strip())
        extra: dict[str, Any] = {"operation": "p4_command", "command": command, **kw}
        if exit_code is not None:
            extra["exit_code"] = exit_code
        msg = f"p4 command {command}" + (f" -> {exit_code}" if exit_code is not None else "")
        self._emit(logging.DEBUG, msg, extra)

    def log_performance(self, operation: str, duration_ms: float, **kw: Any) -> None:
        extra = {"operation": operation, "duration_ms": round(duration_ms, 2), **kw}
        self._emit(
            logging.INFO,
            f"Performance: {operation} completed in {duration_ms:.2f}ms",
            extra,
        )

    def log_error(self, message: str, error: str | None = None, **kw: Any) -> None:
        extra = dict(kw)
        if error:
            extra["error"] = redact(error)
        self._logger.error(message, extra=extra)

    def debug(self, message: str, **kw: Any) -> None:
        self._logger.debug(message, extra=kw)

    def info(self, message: str, **kw: Any) -> None:
        self._logger.info(message, extra=kw)

    def warning(self, message: str, **kw: Any) -> None:
        self._logger.warning(message, extra=kw)

    def error(self, message: str, **kw: Any) -> None:  # noqa: D401
        self._logger.error(message, extra=kw)

    @contextmanager
    def timed_operation(self, operation: str, **kw: Any) -> Iterator[dict[str, Any]]:
        """Log start and duration of ``operation``.

        The yielded dict can be filled with result attributes (counts etc.)
        which are attached to the closing performance record.
        """
        start = time.perf_counter()
        results: dict[str, Any] = {}
        self.log_operation(f"{operation}_start", **kw)
        try:
            yield results
        except Exception as exc:
            self.log_error(f"operation {operation} failed", error=str(exc), **kw)
            raise
        self.log_performance(operation, (time.perf_counter() - start) * 1000, **{**kw, **results})


_GLOBAL: StructuredLogger | None = None


def get_logger() -> StructuredLogger:
    global _GLOBAL  # noqa: PLW0603
    if _GLOBAL is None:
        _GLOBAL = StructuredLogger()
    return _GLOBAL


def configure_logging(
    json_logging: bool = False, level: str = "INFO", stream: TextIO | None = None
) -> StructuredLogger:
    global _GLOBAL  # noqa: PLW0603
    _GLOBAL = StructuredLogger(json_logging=json_logging, level=level, stream=stream)
    return _GLOBAL


__all__ = ["JSONFormatter", "StructuredLogger", "configure_logging", "get_logger"]
