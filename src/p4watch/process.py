"""Process execution collaborator.

p4watch never talks to the Perforce server itself; every interaction is a
single blocking ``p4`` child process. The :class:`ProcessExecutor` protocol is
the seam: the adapter receives an executor at construction time, tests pass
a recording fake, production code uses :class:`SubprocessExecutor`.

Argument strings are split with POSIX ``shlex`` rules and passed to
``subprocess.run`` as a list, so no shell ever interprets them.
"""

from __future__ import annotations

import shlex
import subprocess  # nosec B404 - subprocess is required for p4 invocation
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import ToolExecutionError
from .logging import get_logger


@dataclass
class ProcessInfo:
    executable: str
    arguments: str = ""
    standard_input: str | None = None
    working_directory: str | None = None
    timeout: float | None = None

    @property
    def command_line(self) -> str:
        return f"{self.executable} {self.arguments}".strip()

    def argv(self) -> list[str]:
        return [self.executable, *shlex.split(self.arguments)]


@dataclass(frozen=True)
class ProcessResult:
    stdout: str
    stderr: str
    exit_code: int
    timed_out: bool = False

    @property
    def failed(self) -> bool:
        return self.timed_out or self.exit_code != 0


class ProcessExecutor(Protocol):  # pragma: no cover - interface only
    def execute(self, process_info: ProcessInfo) -> ProcessResult: ...


class SubprocessExecutor:
    """Run ``p4`` through :func:`subprocess.run` and capture its output."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self.logger = get_logger()

    def execute(self, process_info: ProcessInfo) -> ProcessResult:
        argv = process_info.argv()
        cwd = process_info.working_directory or None
        if cwd is not None and not Path(cwd).is_dir():
            raise ToolExecutionError(
                process_info.command_line, 1, f"working directory not found: {cwd}"
            )
        self.logger.log_command(process_info.executable, process_info.arguments)
        try:
            completed = subprocess.run(  # nosec B603 - argv list, no shell
                argv,
                input=process_info.standard_input,
                capture_output=True,
                text=True,
                encoding=self._encoding,
                errors="replace",
                cwd=cwd,
                timeout=process_info.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            return ProcessResult(
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr)
                or f"timed out after {process_info.timeout}s",
                exit_code=-1,
                timed_out=True,
            )
        except FileNotFoundError as exc:
            raise ToolExecutionError(
                process_info.command_line, 127, f"executable not found: {exc}"
            ) from exc
        self.logger.log_command(
            process_info.executable, process_info.arguments, exit_code=completed.returncode
        )
        return ProcessResult(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_code=completed.returncode,
        )


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def run_checked(executor: ProcessExecutor, process_info: ProcessInfo) -> ProcessResult:
    """Execute ``process_info`` and raise :class:`ToolExecutionError` on failure."""
    result = executor.execute(process_info)
    if result.failed:
        raise ToolExecutionError(
            process_info.command_line,
            result.exit_code,
            result.stderr,
            result.stdout,
            timed_out=result.timed_out,
        )
    return result


__all__ = [
    "ProcessExecutor",
    "ProcessInfo",
    "ProcessResult",
    "SubprocessExecutor",
    "run_checked",
]
