"""Workspace setup before a build.

``WorkspaceManager`` only resolves which directory to use and hands over to
a :class:`P4Initializer`; :class:`ClientSpecInitializer` is the default one
and registers a client workspace rooted at that directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from .commands import CommandBuilder
from .config import P4Config
from .errors import ConfigurationError
from .logging import get_logger
from .process import ProcessExecutor, run_checked


class P4Initializer(Protocol):  # pragma: no cover - interface only
    def initialize(self, config: P4Config, project_name: str, working_directory: str) -> None: ...


def client_view_mapping(view: str, client: str) -> str:
    """Map ``//depot/a/...`` to ``//depot/a/... //client/a/...``."""
    _, _, rest = view[2:].partition("/")
    return f"{view} //{client}/{rest}"


def render_client_spec(client: str, root: str, views: tuple[str, ...]) -> str:
    view_lines = "".join(f"\t{client_view_mapping(view, client)}\n" for view in views)
    return f"Client:\t{client}\n\nRoot:\t{root}\n\nView:\n{view_lines}"


class ClientSpecInitializer:
    def __init__(self, executor: ProcessExecutor, commands: CommandBuilder | None = None) -> None:
        self.executor = executor
        self._commands = commands
        self.logger = get_logger()

    def initialize(self, config: P4Config, project_name: str, working_directory: str) -> None:
        if not config.client:
            raise ConfigurationError(
                f"a perforce client is required to initialize project {project_name!r}"
            )
        root = Path(working_directory).resolve()
        root.mkdir(parents=True, exist_ok=True)
        commands = self._commands or CommandBuilder(config)
        process = commands.create_client_spec_command()
        process.standard_input = render_client_spec(config.client, str(root), config.views)
        run_checked(self.executor, process)
        self.logger.log_operation(
            "initialize", project=project_name, client=config.client, root=str(root)
        )


class WorkspaceManager:
    def __init__(
        self,
        config: P4Config,
        executor: ProcessExecutor,
        initializer: P4Initializer,
        commands: CommandBuilder | None = None,
    ) -> None:
        self.config = config
        self.executor = executor
        self.initializer = initializer
        self.commands = commands or CommandBuilder(config)
        self.logger = get_logger()

    def resolve_working_directory(self, fallback_working_directory: str) -> str:
        return self.config.working_directory or fallback_working_directory

    def initialize_directory(self, project_name: str, fallback_working_directory: str) -> None:
        directory = self.resolve_working_directory(fallback_working_directory)
        self.initializer.initialize(self.config, project_name, directory)

    def get_source(self, build_context: Any = None) -> None:
        """Run ``p4 sync`` when ``auto_get_source`` is on; output is discarded."""
        if not self.config.auto_get_source:
            return
        with self.logger.timed_operation("get_source"):
            run_checked(self.executor, self.commands.create_sync_command())


__all__ = [
    "ClientSpecInitializer",
    "P4Initializer",
    "WorkspaceManager",
    "client_view_mapping",
    "render_client_spec",
]
