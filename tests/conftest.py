"""Pytest configuration for p4watch tests.

Puts the in-repo ``src`` directory on ``sys.path`` so the package imports
without an editable install, and provides recording fakes for the process
executor, process info creator and workspace initializer so no real ``p4``
binary is ever spawned.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from p4watch.config import P4Config  # noqa: E402
from p4watch.process import ProcessInfo, ProcessResult  # noqa: E402

VIEW = "//depot/myproject/..."


class FakeExecutor:
    """Returns queued results in order and records every ProcessInfo it sees."""

    def __init__(self, results: Iterable[ProcessResult | str] = ()) -> None:
        self._results: list[ProcessResult] = [
            r if isinstance(r, ProcessResult) else ProcessResult(r, "", 0) for r in results
        ]
        self.calls: list[ProcessInfo] = []

    def queue(self, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        self._results.append(ProcessResult(stdout, stderr, exit_code))

    def execute(self, process_info: ProcessInfo) -> ProcessResult:
        self.calls.append(process_info)
        if not self._results:
            raise AssertionError(f"unexpected process execution: {process_info.command_line}")
        return self._results.pop(0)


class RecordingCreator:
    def __init__(self) -> None:
        self.calls: list[tuple[P4Config, str]] = []

    def create_process_info(self, config: P4Config, arguments: str) -> ProcessInfo:
        self.calls.append((config, arguments))
        return ProcessInfo(executable="p4-fake", arguments=arguments)


class RecordingInitializer:
    def __init__(self) -> None:
        self.calls: list[tuple[P4Config, str, str]] = []

    def initialize(self, config: P4Config, project_name: str, working_directory: str) -> None:
        self.calls.append((config, project_name, working_directory))


@pytest.fixture
def config() -> P4Config:
    return P4Config(view=VIEW)


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def creator() -> RecordingCreator:
    return RecordingCreator()


@pytest.fixture
def initializer() -> RecordingInitializer:
    return RecordingInitializer()


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "p4watch.config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def fake_adapter_factory(executor: FakeExecutor, **kwargs: Any) -> Any:
    from p4watch.adapter import P4Adapter

    return lambda cfg: P4Adapter(cfg, executor=executor, **kwargs)
