"""Parsers for ``p4 -s changes`` and ``p4 -s describe -s`` output.

Both formats are human oriented, so parsing is done line by line: every
line is first classified into one of a small set of line kinds, then a
tiny state machine assembles records from the recognised kinds. Lines that
do not fit are dropped instead of failing the whole parse, so one noisy
block never hides the other change lists.

Script mode (``-s``) prefixes each line with a tag such as ``info:``,
``info1:``, ``text:``, ``error:`` or ``exit:``; untagged lines are accepted
as well.

``changes`` line::

    info: Change 3328 on 2002/10/31 by someone@somewhere 'Something important '

``describe`` block::

    text: Change 3328 by someone@somewhere on 2002/10/31 18:20:59
    text:
    text: \tSomething important
    text:
    text: Affected files ...
    text:
    info1: //depot/myproject/something/file.txt#3 edit
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from .logging import get_logger
from .models import ChangeListEntry, Modification

_TAG_RE = re.compile(r"^(?P<tag>info\d*|text|error|warning|exit):\s?(?P<body>.*)$")
_CHANGE_RE = re.compile(
    r"^Change (?P<number>\d+) on (?P<date>\d{4}/\d{2}/\d{2})(?: \d{2}:\d{2}:\d{2})?"
    r" by (?P<user>[^@\s]+)@(?P<client>\S+)(?: \*pending\*)? '(?P<description>.*)'\s*$"
)
_HEADER_RE = re.compile(
    r"^Change (?P<number>\d+) by (?P<user>[^@\s]+)@(?P<client>\S+)"
    r" on (?P<time>\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2})(?: \*pending\*)?\s*$"
)
_HEADERISH_RE = re.compile(r"^Change \S+ by ")
_AFFECTED_RE = re.compile(r"^Affected files \.\.\.\s*$")
_JOBS_RE = re.compile(r"^Jobs fixed \.\.\.\s*$")
_FILE_RE = re.compile(r"^(?:\.\.\. )?(?P<path>//\S.*)#(?P<rev>\d+) (?P<action>[\w/]+)\s*$")
_EXIT_RE = re.compile(r"^(?P<code>-?\d+)\s*$")

_DESCRIBE_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"
_CHANGES_DATE_FORMAT = "%Y/%m/%d"


# --- line kinds -------------------------------------------------------------
@dataclass(frozen=True)
class ChangeLine:
    entry: ChangeListEntry


@dataclass(frozen=True)
class DescribeHeaderLine:
    change_number: str
    author: str
    client: str
    modified_time: datetime


@dataclass(frozen=True)
class MalformedHeaderLine:
    raw: str


@dataclass(frozen=True)
class CommentLine:
    text: str


@dataclass(frozen=True)
class JobsFixedMarker:
    pass


@dataclass(frozen=True)
class AffectedFilesMarker:
    pass


@dataclass(frozen=True)
class FileLine:
    folder_name: str
    file_name: str
    version: int
    action: str


@dataclass(frozen=True)
class ErrorLine:
    message: str


@dataclass(frozen=True)
class ExitLine:
    code: int


@dataclass(frozen=True)
class IgnoredLine:
    raw: str


ChangesLine = Union[ChangeLine, ErrorLine, ExitLine, IgnoredLine]
DescribeLine = Union[
    DescribeHeaderLine,
    MalformedHeaderLine,
    CommentLine,
    JobsFixedMarker,
    AffectedFilesMarker,
    FileLine,
    ErrorLine,
    ExitLine,
    IgnoredLine,
]


def _split_tag(line: str) -> tuple[str | None, str]:
    m = _TAG_RE.match(line)
    if not m:
        return None, line
    return m.group("tag"), m.group("body")


def _classify_common(
    tag: str | None, body: str, raw: str
) -> ErrorLine | ExitLine | IgnoredLine | None:
    if tag == "error":
        return ErrorLine(body.strip())
    if tag == "exit":
        m = _EXIT_RE.match(body)
        return ExitLine(int(m.group("code"))) if m else IgnoredLine(raw)
    return None


def classify_change_line(line: str) -> ChangesLine:
    raw = line.rstrip("\r\n")
    tag, body = _split_tag(raw)
    common = _classify_common(tag, body, raw)
    if common is not None:
        return common
    if tag not in (None, "info"):
        return IgnoredLine(raw)
    m = _CHANGE_RE.match(body)
    if not m:
        return IgnoredLine(raw)
    try:
        day = datetime.strptime(m.group("date"), _CHANGES_DATE_FORMAT).date()
    except ValueError:
        return IgnoredLine(raw)
    return ChangeLine(
        ChangeListEntry(
            change_number=m.group("number"),
            date=day,
            author=m.group("user"),
            client=m.group("client"),
            description=m.group("description"),
        )
    )


def classify_describe_line(line: str) -> DescribeLine:
    raw = line.rstrip("\r\n")
    tag, body = _split_tag(raw)
    common = _classify_common(tag, body, raw)
    if common is not None:
        return common
    header = _HEADER_RE.match(body)
    if header:
        try:
            modified = datetime.strptime(header.group("time"), _DESCRIBE_TIME_FORMAT)
        except ValueError:
            return MalformedHeaderLine(raw)
        return DescribeHeaderLine(
            change_number=header.group("number"),
            author=header.group("user"),
            client=header.group("client"),
            modified_time=modified,
        )
    if _HEADERISH_RE.match(body):
        return MalformedHeaderLine(raw)
    if _JOBS_RE.match(body):
        return JobsFixedMarker()
    if _AFFECTED_RE.match(body):
        return AffectedFilesMarker()
    file_match = _FILE_RE.match(body)
    if file_match:
        path = file_match.group("path")
        folder, _, leaf = path.rpartition("/")
        if not leaf:
            return IgnoredLine(raw)
        return FileLine(
            folder_name=folder,
            file_name=leaf,
            version=int(file_match.group("rev")),
            action=file_match.group("action"),
        )
    # description lines are tab indented; anything else is not part of it
    if body.startswith("\t"):
        return CommentLine(body[1:])
    if not body.strip():
        return CommentLine("")
    return IgnoredLine(raw)


# --- phase 1 ----------------------------------------------------------------
def parse_change_lists(text: str) -> list[ChangeListEntry]:
    """Extract change list entries from ``changes`` output, keeping tool order."""
    entries: list[ChangeListEntry] = []
    for line in (text or "").splitlines():
        kind = classify_change_line(line)
        if isinstance(kind, ChangeLine):
            entries.append(kind.entry)
    return entries


def change_numbers(entries: Iterable[ChangeListEntry]) -> str:
    return " ".join(entry.change_number for entry in entries)


# --- phase 2 ----------------------------------------------------------------
class _Block:
    def __init__(self, header: DescribeHeaderLine) -> None:
        self.header = header
        self.comment_lines: list[str] = []
        self.in_comment = True
        self.in_files = False

    @property
    def comment(self) -> str:
        return "\n".join(self.comment_lines).strip()


def _iter_modifications(lines: Iterable[str]) -> Iterator[Modification]:
    logger = get_logger()
    block: _Block | None = None
    for line in lines:
        kind = classify_describe_line(line)
        if isinstance(kind, DescribeHeaderLine):
            block = _Block(kind)
        elif isinstance(kind, MalformedHeaderLine):
            logger.debug("skipping malformed change header", line=kind.raw)
            block = None
        elif isinstance(kind, JobsFixedMarker):
            if block is not None:
                block.in_comment = False
        elif isinstance(kind, AffectedFilesMarker):
            if block is not None:
                block.in_comment = False
                block.in_files = True
        elif isinstance(kind, CommentLine):
            if block is not None and block.in_comment:
                block.comment_lines.append(kind.text)
        elif isinstance(kind, FileLine):
            if block is None or not block.in_files:
                logger.debug("skipping file line outside a change block", line=line)
                continue
            header = block.header
            yield Modification(
                change_number=header.change_number,
                author=header.author,
                modified_time=header.modified_time,
                comment=block.comment,
                file_name=kind.file_name,
                folder_name=kind.folder_name,
                type=kind.action,
                email_address=f"{header.author}@{header.client}",
                version=kind.version,
            )
        elif isinstance(kind, IgnoredLine) and kind.raw.strip():
            logger.debug("skipping unrecognised describe line", line=kind.raw)


def parse_modifications(text: str) -> list[Modification]:
    """Turn ``describe -s`` output into one Modification per affected file."""
    return list(_iter_modifications((text or "").splitlines()))


# --- script mode status -------------------------------------------------------
def script_exit_code(text: str) -> int | None:
    """Return the ``exit: N`` trailer of script-mode output, if present."""
    code: int | None = None
    for line in (text or "").splitlines():
        tag, body = _split_tag(line.rstrip("\r\n"))
        if tag == "exit":
            m = _EXIT_RE.match(body)
            if m:
                code = int(m.group("code"))
    return code


def script_errors(text: str) -> list[str]:
    errors: list[str] = []
    for line in (text or "").splitlines():
        tag, body = _split_tag(line.rstrip("\r\n"))
        if tag == "error":
            errors.append(body.strip())
    return errors


__all__ = [
    "AffectedFilesMarker",
    "ChangeLine",
    "CommentLine",
    "DescribeHeaderLine",
    "ErrorLine",
    "ExitLine",
    "FileLine",
    "IgnoredLine",
    "JobsFixedMarker",
    "MalformedHeaderLine",
    "change_numbers",
    "classify_change_line",
    "classify_describe_line",
    "parse_change_lists",
    "parse_modifications",
    "script_errors",
    "script_exit_code",
]
