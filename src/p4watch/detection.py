"""Two-phase change discovery.

1. ``p4 -s changes -s submitted <view>@from,@to`` lists the submitted change
   lists in the window (most recent first).
2. ``p4 -s describe -s <numbers>`` expands them into per-file records.

Failures are raised as ToolExecutionError and never retried here; retry
policy belongs to whoever schedules the builds.
"""

from __future__ import annotations

from datetime import datetime

from .commands import CommandBuilder
from .config import P4Config
from .errors import ToolExecutionError
from .logging import get_logger
from .models import ChangeListEntry, ChangeWindow, Modification
from .parser import (
    change_numbers,
    parse_change_lists,
    parse_modifications,
    script_errors,
    script_exit_code,
)
from .process import ProcessExecutor, ProcessInfo, ProcessResult, run_checked


class ChangeDetector:
    def __init__(
        self,
        config: P4Config,
        executor: ProcessExecutor,
        commands: CommandBuilder | None = None,
    ) -> None:
        self.config = config
        self.executor = executor
        self.commands = commands or CommandBuilder(config)
        self.logger = get_logger()

    def _run_script(self, process_info: ProcessInfo) -> ProcessResult:
        result = run_checked(self.executor, process_info)
        # script mode reports server side errors in-band with an exit trailer
        code = script_exit_code(result.stdout)
        if code:
            errors = script_errors(result.stdout)
            raise ToolExecutionError(
                process_info.command_line,
                code,
                "\n".join(errors) or result.stderr,
                result.stdout,
            )
        return result

    def get_change_lists(self, start: datetime, end: datetime) -> list[ChangeListEntry]:
        result = self._run_script(self.commands.create_change_list_command(start, end))
        return parse_change_lists(result.stdout)

    def describe(self, numbers: str) -> list[Modification]:
        result = self._run_script(self.commands.create_describe_command(numbers))
        return parse_modifications(result.stdout)

    def get_modifications(self, start: datetime, end: datetime) -> list[Modification]:
        with self.logger.timed_operation(
            "get_modifications", start=start.isoformat(), end=end.isoformat()
        ) as stats:
            entries = self.get_change_lists(start, end)
            stats["change_lists"] = len(entries)
            if not entries:
                stats["modifications"] = 0
                return []
            modifications = self.describe(change_numbers(entries))
            stats["modifications"] = len(modifications)
            return modifications

    def get_modifications_in(self, window: ChangeWindow) -> list[Modification]:
        return self.get_modifications(window.start, window.end)


__all__ = ["ChangeDetector"]
