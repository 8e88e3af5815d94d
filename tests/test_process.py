from __future__ import annotations

import subprocess

import pytest

from p4watch.errors import ToolExecutionError
from p4watch.process import ProcessInfo, ProcessResult, SubprocessExecutor, run_checked


class _Recorder:
    def __init__(self, result=None, exc: BaseException | None = None) -> None:
        self.result = result
        self.exc = exc
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, argv, **kwargs):
        self.calls.append((argv, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.result


def test_subprocess_executor_runs_without_shell(monkeypatch: pytest.MonkeyPatch, tmp_path):
    recorder = _Recorder(subprocess.CompletedProcess(["p4"], 0, stdout="exit: 0\n", stderr=""))
    monkeypatch.setattr("p4watch.process.subprocess.run", recorder)

    info = ProcessInfo(
        "p4",
        "-s -c ci describe -s 1 2",
        standard_input="spec",
        working_directory=str(tmp_path),
        timeout=5,
    )
    result = SubprocessExecutor().execute(info)

    assert result == ProcessResult("exit: 0\n", "", 0)
    argv, kwargs = recorder.calls[0]
    assert argv == ["p4", "-s", "-c", "ci", "describe", "-s", "1", "2"]
    assert kwargs["input"] == "spec"
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["timeout"] == 5
    assert "shell" not in kwargs


def test_subprocess_executor_reports_timeouts(monkeypatch: pytest.MonkeyPatch):
    recorder = _Recorder(exc=subprocess.TimeoutExpired(["p4"], 5, output=b"partial"))
    monkeypatch.setattr("p4watch.process.subprocess.run", recorder)

    result = SubprocessExecutor().execute(ProcessInfo("p4", "sync", timeout=5))

    assert result.timed_out is True
    assert result.failed is True
    assert result.stdout == "partial"


def test_subprocess_executor_missing_binary(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        "p4watch.process.subprocess.run", _Recorder(exc=FileNotFoundError("p4"))
    )
    with pytest.raises(ToolExecutionError) as excinfo:
        SubprocessExecutor().execute(ProcessInfo("p4", "sync"))
    assert excinfo.value.exit_code == 127


def test_subprocess_executor_missing_working_directory(monkeypatch: pytest.MonkeyPatch, tmp_path):
    recorder = _Recorder(subprocess.CompletedProcess(["p4"], 0, stdout="", stderr=""))
    monkeypatch.setattr("p4watch.process.subprocess.run", recorder)
    missing = tmp_path / "gone"

    with pytest.raises(ToolExecutionError) as excinfo:
        SubprocessExecutor().execute(ProcessInfo("p4", "sync", working_directory=str(missing)))

    assert excinfo.value.exit_code != 127
    assert "working directory not found" in str(excinfo.value)
    assert recorder.calls == []


class _StaticExecutor:
    def __init__(self, result: ProcessResult) -> None:
        self.result = result

    def execute(self, process_info: ProcessInfo) -> ProcessResult:
        return self.result


def test_run_checked_passes_success_through():
    ok = ProcessResult("out", "", 0)
    assert run_checked(_StaticExecutor(ok), ProcessInfo("p4", "sync")) is ok


def test_run_checked_raises_on_failure():
    with pytest.raises(ToolExecutionError) as excinfo:
        run_checked(_StaticExecutor(ProcessResult("", "boom", 2)), ProcessInfo("p4", "sync"))
    assert excinfo.value.exit_code == 2
    assert excinfo.value.stderr == "boom"
    assert excinfo.value.command == "p4 sync"
