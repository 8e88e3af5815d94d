from __future__ import annotations

from p4watch.errors import (
    ConfigurationError,
    InvalidInputError,
    ToolExecutionError,
    ValidationError,
    classify_error,
    redact,
)


def test_classify_taxonomy_classes():
    assert classify_error(ConfigurationError("view missing")).category == "config"
    assert classify_error(InvalidInputError("bad change")).category == "p4.input"
    assert classify_error(ValidationError("numeric")).category == "p4.validation"


def test_classify_auth_failure():
    exc = ToolExecutionError("p4 changes", 1, "Perforce password (P4PASSWD) invalid or unset.")
    info = classify_error(exc)
    assert info.category == "p4.auth"
    assert info.transient is False
    assert info.details == {"exit_code": 1, "command": "p4 changes"}


def test_classify_connect_failure_is_transient():
    exc = ToolExecutionError("p4 sync", 1, "Connect to server failed; check $P4PORT.")
    info = classify_error(exc)
    assert info.category == "p4.connect"
    assert info.transient is True


def test_classify_timeout():
    info = classify_error(ToolExecutionError("p4 sync", -1, "", timed_out=True))
    assert info.category == "p4.timeout"
    assert info.transient is True


def test_classify_file_system_errors():
    info = classify_error(PermissionError(13, "Permission denied", "/ro/mods.json"))
    assert info.category == "io"
    assert info.details == {"path": "/ro/mods.json"}


def test_classify_generic():
    assert classify_error(ValueError("Some other problem")).category == "generic"


def test_redact_passwords_and_tickets():
    ticket = "0123456789ABCDEF0123456789ABCDEF"
    out = redact(f"P4PASSWD=hunter2 p4 -P {ticket} -u me sync")
    assert "hunter2" not in out
    assert ticket not in out
    assert "-u me sync" in out


def test_tool_execution_error_message_is_redacted():
    exc = ToolExecutionError("p4 -P secret sync", 1, "failed for P4PASSWD=secret")
    assert "secret" not in str(exc)
    assert exc.stderr == "failed for P4PASSWD=secret"
    assert exc.command == "p4 -P <redacted> sync"
