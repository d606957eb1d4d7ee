from __future__ import annotations

import pytest

from notes_core.api import NoteStore
from notes_core.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
    NotModifiedError,
)
from notes_core.store.stores import LocalFileStore
from notes_core.testing.memory_store import InMemoryObjectStore


@pytest.fixture(params=["memory", "local"])
def note_store(request, tmp_path) -> NoteStore:
    if request.param == "memory":
        backend = InMemoryObjectStore()
    else:
        backend = LocalFileStore(tmp_path / "root")
    return NoteStore.for_user(backend, bucket="notes", user_id="u1")


def test_write_overwrite_rename_read_scenario(note_store) -> None:
    fp1 = note_store.write("a.txt", "hello", overwrite=False)
    with pytest.raises(AlreadyExistsError):
        note_store.write("a.txt", "x", overwrite=False)
    fp2 = note_store.write("a.txt", "world", overwrite=True)
    assert fp2 != fp1

    renamed = note_store.rename("a.txt", "b.txt")

    with pytest.raises(NotFoundError):
        note_store.read("a.txt")
    note = note_store.read("b.txt")
    assert note.text == "world"
    assert note.fingerprint == renamed
    with pytest.raises(NotModifiedError):
        note_store.read("b.txt", if_fingerprint_matches=renamed)


def test_list_iter_and_delete(note_store) -> None:
    for title in ["one.md", "two.txt", "three.md"]:
        note_store.write(title, title, overwrite=False)

    first = note_store.list(page_size=2)
    assert first.has_more is True
    assert sorted(r.title for r in note_store.iter_all(page_size=2)) == [
        "one.md",
        "three.md",
        "two.txt",
    ]

    note_store.delete("one.md")
    note_store.delete("one.md")
    assert sorted(r.title for r in note_store.iter_all()) == ["three.md", "two.txt"]

    assert note_store.delete_all() == 2
    assert list(note_store.iter_all()) == []


def test_invalid_cursor(note_store) -> None:
    with pytest.raises(InvalidArgumentError):
        note_store.list(cursor="definitely-not-issued")


def test_default_page_size_is_validated() -> None:
    with pytest.raises(InvalidArgumentError):
        NoteStore.for_user(InMemoryObjectStore(), bucket="notes", user_id="u1", default_page_size=0)
