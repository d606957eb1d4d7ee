from __future__ import annotations

from notes_core.notes.delete import delete_all_notes, delete_note
from notes_core.notes.listing import iter_notes, list_notes
from notes_core.notes.read import read_note
from notes_core.notes.rename import rename_note
from notes_core.notes.write import write_note

__all__ = [
    "delete_all_notes",
    "delete_note",
    "iter_notes",
    "list_notes",
    "read_note",
    "rename_note",
    "write_note",
]
