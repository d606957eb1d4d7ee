"""Domain types shared by the note operations."""

from notes_core.domain.models import (
    Fingerprint,
    NoteContent,
    NoteKind,
    NotePage,
    NoteRecord,
    RenameStage,
)

__all__ = [
    "Fingerprint",
    "NoteContent",
    "NoteKind",
    "NotePage",
    "NoteRecord",
    "RenameStage",
]
