from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class Fingerprint:
    """Opaque entity tag assigned by the store on every successful write.

    Only ever compared for equality with another ``Fingerprint``; the wrapped string is
    never parsed. ``Fingerprint("")`` stands for "no fingerprint" and is falsy.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("Fingerprint.value must be a str")

    def __bool__(self) -> bool:
        return bool(self.value)

    def __str__(self) -> str:
        return self.value


class NoteKind(Enum):
    TEXT = (".txt", "text/plain")
    MARKDOWN = (".md", "text/markdown; charset=UTF-8")

    def __init__(self, suffix: str, content_type: str) -> None:
        self.suffix = suffix
        self.content_type = content_type


class RenameStage(Enum):
    """Stages of the rename protocol, in the order they are reached."""

    STARTED = "started"
    RESERVED = "reserved"
    COPIED = "copied"
    SOURCE_DELETED = "source_deleted"


@dataclass(frozen=True)
class NoteRecord:
    """Point-in-time projection of one listed object."""

    title: str
    last_modified: datetime
    fingerprint: Fingerprint


@dataclass(frozen=True)
class NoteContent:
    content: bytes
    fingerprint: Fingerprint

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


@dataclass(frozen=True)
class NotePage:
    """One page of a listing.

    ``has_more`` comes straight from the store and is independent of ``len(records)``:
    a page can be empty after filtering and still have more entries behind it.
    """

    records: tuple[NoteRecord, ...]
    has_more: bool
    next_cursor: str = ""
