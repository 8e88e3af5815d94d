from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class ChangeWindow:
    """Time window for change detection; ``start <= end`` is the caller's job."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class ChangeListEntry:
    """One submitted change list as reported by ``p4 changes``.

    Only lives between the two discovery phases; the change number feeds the
    ``describe`` call.
    """

    change_number: str
    date: date
    author: str
    client: str = ""
    description: str = ""


@dataclass(frozen=True)
class Modification:
    """A single file touched by a change list.

    A change list touching N files produces N modifications sharing the same
    change number, author, time and comment.
    """

    change_number: str
    author: str
    modified_time: datetime
    comment: str
    file_name: str
    folder_name: str
    type: str
    email_address: str = ""
    version: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["modified_time"] = self.modified_time.isoformat()
        return data


__all__ = ["ChangeListEntry", "ChangeWindow", "Modification"]
