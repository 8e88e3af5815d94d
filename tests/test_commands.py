from __future__ import annotations

from datetime import datetime

import pytest

from p4watch.commands import (
    CommandBuilder,
    P4ConfigProcessInfoCreator,
    format_p4_date,
    validate_change_numbers,
)
from p4watch.config import P4Config
from p4watch.errors import InvalidInputError

FULL_CONFIG = P4Config(
    executable=r"c:\bin\p4.exe",
    view="//depot/myproject/...",
    client="myclient",
    user="me",
    port="anotherserver:2666",
)


def test_format_p4_date_zero_pads():
    assert format_p4_date(datetime(2003, 1, 2, 3, 4, 5)) == "2003/01/02:03:04:05"


def test_change_list_command_without_connection_options():
    builder = CommandBuilder(P4Config(view="//depot/myproj/..."))
    process = builder.create_change_list_command(
        datetime(2002, 10, 20, 2, 0, 0), datetime(2002, 10, 31, 5, 5, 0)
    )
    assert process.executable == "p4"
    assert process.arguments == (
        "-s changes -s submitted //depot/myproj/...@2002/10/20:02:00:00,@2002/10/31:05:05:00"
    )


def test_change_list_command_with_connection_options():
    process = CommandBuilder(FULL_CONFIG).create_change_list_command(
        datetime(2003, 11, 20, 2, 10, 32), datetime(2004, 10, 31, 5, 5, 1)
    )
    assert process.executable == "c:\\bin\\p4.exe"
    assert process.arguments == (
        "-s -c myclient -p anotherserver:2666 -u me"
        " changes -s submitted //depot/myproject/...@2003/11/20:02:10:32,@2004/10/31:05:05:01"
    )


def test_change_list_command_omits_unset_options():
    cfg = P4Config(view="//depot/x/...", user="me")
    process = CommandBuilder(cfg).create_change_list_command(
        datetime(2020, 1, 1), datetime(2020, 1, 2)
    )
    assert process.arguments.startswith("-s -u me changes -s submitted ")


def test_change_list_command_renders_every_view():
    cfg = P4Config(view="//depot/a/..., //depot/b/...")
    process = CommandBuilder(cfg).create_change_list_command(
        datetime(2020, 1, 1), datetime(2020, 1, 2)
    )
    window = "@2020/01/01:00:00:00,@2020/01/02:00:00:00"
    assert process.arguments == (
        f"-s changes -s submitted //depot/a/...{window} //depot/b/...{window}"
    )


def test_describe_command():
    process = CommandBuilder(P4Config(view="//depot/x/...")).create_describe_command(
        "3327 3328 332"
    )
    assert process.executable == "p4"
    assert process.arguments == "-s describe -s 3327 3328 332"


def test_describe_command_with_connection_options():
    process = CommandBuilder(FULL_CONFIG).create_describe_command("3327 3328 332")
    assert process.arguments == (
        "-s -c myclient -p anotherserver:2666 -u me describe -s 3327 3328 332"
    )


@pytest.mark.parametrize(
    "changes",
    [
        "3327 3328 332; echo 'rm -rf /'",
        "",
        "   ",
        "3327 && 3328",
        "33a7",
        "3327\n`id`",
        "\u0661\u0662 3",
    ],
)
def test_describe_command_rejects_unsafe_input(changes: str):
    builder = CommandBuilder(P4Config(view="//depot/x/..."))
    with pytest.raises(InvalidInputError):
        builder.create_describe_command(changes)


def test_validate_change_numbers_collapses_whitespace():
    assert validate_change_numbers(" 1\t2  3 ") == "1 2 3"


def test_default_creator_plain_commands(config: P4Config):
    builder = CommandBuilder(config)
    assert builder.create_sync_command().arguments == "sync"
    assert builder.create_label_spec_command().arguments == "label -i"
    assert builder.create_label_sync_command("foo-123").arguments == "labelsync -l foo-123"
    assert builder.create_client_spec_command().arguments == "client -i"


def test_default_creator_prepends_connection_options():
    process = P4ConfigProcessInfoCreator().create_process_info(FULL_CONFIG, "sync")
    assert process.executable == r"c:\bin\p4.exe"
    assert process.arguments == "-c myclient -p anotherserver:2666 -u me sync"


def test_builder_delegates_to_injected_creator(config: P4Config, creator):
    builder = CommandBuilder(config, creator)
    builder.create_label_spec_command()
    builder.create_label_sync_command("foo-123")
    builder.create_sync_command()
    assert [args for _, args in creator.calls] == [
        "label -i",
        "labelsync -l foo-123",
        "sync",
    ]
    assert all(cfg is config for cfg, _ in creator.calls)


@pytest.mark.parametrize("label", ["", "foo bar", "foo;rm", "-l", "x$(id)", "a'b"])
def test_label_sync_rejects_unsafe_labels(config: P4Config, label: str):
    with pytest.raises(InvalidInputError):
        CommandBuilder(config).create_label_sync_command(label)


def test_process_info_argv_never_needs_a_shell():
    process = CommandBuilder(FULL_CONFIG).create_describe_command("1 2")
    assert process.argv() == [
        r"c:\bin\p4.exe",
        "-s",
        "-c",
        "myclient",
        "-p",
        "anotherserver:2666",
        "-u",
        "me",
        "describe",
        "-s",
        "1",
        "2",
    ]
