"""``P4Adapter``: the object a CI orchestrator talks to.

Wires the command builder, change detector, label manager and workspace
manager around one immutable :class:`P4Config`. Every collaborator can be
injected; defaults run the real ``p4`` binary.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from .commands import CommandBuilder, ProcessInfoCreator
from .config import P4Config, load_config
from .detection import ChangeDetector
from .labels import LabelManager
from .models import Modification
from .process import ProcessExecutor, SubprocessExecutor
from .workspace import ClientSpecInitializer, P4Initializer, WorkspaceManager


class P4Adapter:
    def __init__(
        self,
        config: P4Config,
        *,
        executor: ProcessExecutor | None = None,
        initializer: P4Initializer | None = None,
        process_info_creator: ProcessInfoCreator | None = None,
    ) -> None:
        self.config = config
        self.executor: ProcessExecutor = executor or SubprocessExecutor()
        self.commands = CommandBuilder(config, process_info_creator)
        self.initializer: P4Initializer = initializer or ClientSpecInitializer(
            self.executor, self.commands
        )
        self.detector = ChangeDetector(config, self.executor, self.commands)
        self.labels = LabelManager(config, self.executor, self.commands)
        self.workspace = WorkspaceManager(config, self.executor, self.initializer, self.commands)

    @classmethod
    def from_config_path(cls, path: str | Path, **kwargs: Any) -> P4Adapter:
        return cls(load_config(path), **kwargs)

    def get_modifications(self, start: datetime, end: datetime) -> list[Modification]:
        return self.detector.get_modifications(start, end)

    def label_source_control(self, label: str, timestamp: datetime | None = None) -> None:
        self.labels.label_source_control(label, timestamp)

    def get_source(self, build_context: Any = None) -> None:
        self.workspace.get_source(build_context)

    def initialize_directory(self, project_name: str, fallback_working_directory: str) -> None:
        self.workspace.initialize_directory(project_name, fallback_working_directory)


__all__ = ["P4Adapter"]
