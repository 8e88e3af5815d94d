"""Runtime helpers for p4watch CLI orchestration."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from typing import Any, Protocol

from p4watch.config import P4Config, load_config
from p4watch.errors import P4Error, ToolExecutionError, classify_error
from p4watch.logging import configure_logging, get_logger

EXIT_OK = 0
EXIT_TOOL_FAILURE = 1
EXIT_USAGE = 2


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def prepare_config(
    args: Any, *, loader: Callable[[str], P4Config] = load_config
) -> P4Config:
    """Load the P4Config named by ``args.config`` and set up logging from it."""
    if not hasattr(args, "config"):
        raise AttributeError("Command namespace is missing 'config' attribute")
    cfg = loader(args.config)
    level = "WARNING" if getattr(args, "quiet", False) else cfg.logging_level
    configure_logging(json_logging=cfg.logging_json_enabled, level=level, stream=sys.stderr)
    return cfg


def exit_code_for(exc: BaseException) -> int:
    if isinstance(exc, (ToolExecutionError, OSError)):
        return EXIT_TOOL_FAILURE
    return EXIT_USAGE


def execute_command(handler: _HandlerCallable, args: Any, command: str) -> int:
    """Execute a command handler, timing it and mapping failures to exit codes."""
    logger = get_logger()
    start = time.monotonic()
    try:
        result = handler()
        exit_code = int(result) if result is not None else EXIT_OK
    except (P4Error, OSError) as exc:
        info = classify_error(exc)
        exit_code = exit_code_for(exc)
        logger.log_error(
            f"command {command} failed", error=info.message, category=info.category
        )
        print(f"[{info.category}] {info.message}", file=sys.stderr)
    duration = max(0.0, time.monotonic() - start)
    logger.log_performance(f"cli_{command}", duration * 1000, exit_code=exit_code)
    return exit_code


__all__ = [
    "EXIT_OK",
    "EXIT_TOOL_FAILURE",
    "EXIT_USAGE",
    "execute_command",
    "exit_code_for",
    "prepare_config",
]
