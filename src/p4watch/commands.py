"""Command construction for every ``p4`` sub-command p4watch runs.

All command lines are built here, never inline at the call site, so the
formatting rules and input checks live in one place:

 - ``changes`` / ``describe`` run in script mode (``-s``) with the
   connection options ``-c``, ``-p``, ``-u`` in that fixed order
 - ``label -i``, ``labelsync``, ``sync`` and ``client -i`` go through an
   injectable :class:`ProcessInfoCreator`
 - any value derived from tool output or user input is checked against a
   strict grammar before it is embedded in an argument string
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Protocol

from .config import P4Config
from .errors import InvalidInputError
from .process import ProcessInfo

P4_DATE_FORMAT = "%Y/%m/%d:%H:%M:%S"

_CHANGE_NUMBERS_RE = re.compile(r"^[0-9]+( [0-9]+)*$")
_LABEL_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.+=~:\-]*$")


def format_p4_date(value: datetime) -> str:
    """Render ``value`` as ``YYYY/MM/DD:HH:MM:SS`` without timezone conversion."""
    return value.strftime(P4_DATE_FORMAT)


def validate_change_numbers(change_numbers: str) -> str:
    """Return the normalised change-number list or raise InvalidInputError.

    Runs of whitespace collapse to single spaces; anything except digits and
    spaces is rejected.
    """
    normalised = " ".join((change_numbers or "").split())
    if not normalised:
        raise InvalidInputError("describe requires at least one change number")
    if not _CHANGE_NUMBERS_RE.match(normalised):
        raise InvalidInputError(
            f"change numbers must be digits separated by spaces: {change_numbers!r}"
        )
    return normalised


def validate_label_name(label: str) -> str:
    if not label or not _LABEL_RE.match(label):
        raise InvalidInputError(f"invalid label name: {label!r}")
    return label


def connection_arguments(config: P4Config) -> list[str]:
    args: list[str] = []
    if config.client:
        args.extend(["-c", config.client])
    if config.port:
        args.extend(["-p", config.port])
    if config.user:
        args.extend(["-u", config.user])
    return args


def script_prefix(config: P4Config) -> str:
    """Global options shared by the script-mode commands, with trailing space."""
    return " ".join(["-s", *connection_arguments(config)]) + " "


class ProcessInfoCreator(Protocol):  # pragma: no cover - interface only
    def create_process_info(self, config: P4Config, arguments: str) -> ProcessInfo: ...


class P4ConfigProcessInfoCreator:
    """Default creator: executable, working directory and timeout from config.

    Connection options are prepended only when configured, so an
    unconfigured ``sync`` is exactly ``sync``.
    """

    def create_process_info(self, config: P4Config, arguments: str) -> ProcessInfo:
        prefix = " ".join(connection_arguments(config))
        return ProcessInfo(
            executable=config.executable,
            arguments=f"{prefix} {arguments}" if prefix else arguments,
            working_directory=config.working_directory,
            timeout=config.timeout,
        )


class CommandBuilder:
    def __init__(
        self, config: P4Config, process_info_creator: ProcessInfoCreator | None = None
    ) -> None:
        self.config = config
        self.process_info_creator = process_info_creator or P4ConfigProcessInfoCreator()

    def _script_process(self, arguments: str) -> ProcessInfo:
        return ProcessInfo(
            executable=self.config.executable,
            arguments=script_prefix(self.config) + arguments,
            working_directory=self.config.working_directory,
            timeout=self.config.timeout,
        )

    def create_change_list_command(self, start: datetime, end: datetime) -> ProcessInfo:
        window = f"@{format_p4_date(start)},@{format_p4_date(end)}"
        views = " ".join(f"{view}{window}" for view in self.config.views)
        return self._script_process(f"changes -s submitted {views}")

    def create_describe_command(self, change_numbers: str) -> ProcessInfo:
        return self._script_process(f"describe -s {validate_change_numbers(change_numbers)}")

    def create_label_spec_command(self) -> ProcessInfo:
        return self.process_info_creator.create_process_info(self.config, "label -i")

    def create_label_sync_command(self, label: str) -> ProcessInfo:
        return self.process_info_creator.create_process_info(
            self.config, f"labelsync -l {validate_label_name(label)}"
        )

    def create_sync_command(self) -> ProcessInfo:
        return self.process_info_creator.create_process_info(self.config, "sync")

    def create_client_spec_command(self) -> ProcessInfo:
        return self.process_info_creator.create_process_info(self.config, "client -i")


__all__ = [
    "CommandBuilder",
    "P4ConfigProcessInfoCreator",
    "P4_DATE_FORMAT",
    "ProcessInfoCreator",
    "connection_arguments",
    "format_p4_date",
    "script_prefix",
    "validate_change_numbers",
    "validate_label_name",
]
