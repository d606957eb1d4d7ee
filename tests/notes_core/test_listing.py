from __future__ import annotations

import pytest

from notes_core.errors import InvalidArgumentError, ServiceUnavailableError
from notes_core.io.keys import build_namespace
from notes_core.notes.listing import iter_notes, list_notes
from notes_core.notes.write import write_note


def _put_raw(store, key: str, body: bytes = b"x") -> None:
    store.put_object(f"s3://notes-bucket/{key}", body, content_type="text/plain")


def test_list_notes_filters_suffix_and_strips_prefix(store, namespace) -> None:
    _put_raw(store, "user-1/a.txt")
    _put_raw(store, "user-1/b.md")
    _put_raw(store, "user-1/c.pdf")
    _put_raw(store, "user-1/nested/d.txt")
    _put_raw(store, "user-10/e.txt")
    _put_raw(store, "other/f.txt")

    page = list_notes(store=store, namespace=namespace)

    assert sorted(r.title for r in page.records) == ["a.txt", "b.md"]
    assert page.has_more is False
    assert page.next_cursor == ""
    for record in page.records:
        assert "/" not in record.title
        assert not record.title.startswith(namespace.prefix)


def test_list_notes_returns_store_fingerprint_and_timestamp(store, namespace) -> None:
    fingerprint = write_note(
        store=store, namespace=namespace, title="a.txt", content="hello", overwrite=False
    )

    (record,) = list_notes(store=store, namespace=namespace).records

    assert record.fingerprint == fingerprint
    assert record.last_modified.tzinfo is not None


def test_list_notes_short_page_still_reports_more(store, namespace) -> None:
    _put_raw(store, "user-1/a.pdf")
    _put_raw(store, "user-1/b.pdf")
    _put_raw(store, "user-1/c.txt")

    page = list_notes(store=store, namespace=namespace, page_size=2)

    assert page.records == ()
    assert page.has_more is True
    assert page.next_cursor


def test_list_notes_passes_page_size_and_cursor_verbatim(store, namespace) -> None:
    for i in range(3):
        _put_raw(store, f"user-1/n{i}.txt")

    first = list_notes(store=store, namespace=namespace, page_size=2)
    list_notes(store=store, namespace=namespace, page_size=2, cursor=first.next_cursor)

    list_ops = [op for op in store.ops if op.name == "list_objects"]
    assert list_ops[0].args == ("s3://notes-bucket/user-1/", 2, "")
    assert list_ops[1].args == ("s3://notes-bucket/user-1/", 2, first.next_cursor)


def test_pagination_yields_full_filtered_set_without_duplicates(store, namespace) -> None:
    expected = set()
    for i in range(23):
        suffix = [".txt", ".md", ".json"][i % 3]
        _put_raw(store, f"user-1/note-{i:02d}{suffix}")
        if suffix != ".json":
            expected.add(f"note-{i:02d}{suffix}")

    seen: list[str] = []
    cursor = ""
    while True:
        page = list_notes(store=store, namespace=namespace, page_size=4, cursor=cursor)
        seen.extend(r.title for r in page.records)
        if not page.has_more:
            break
        cursor = page.next_cursor

    assert len(seen) == len(set(seen))
    assert set(seen) == expected


def test_iter_notes_follows_cursors(store, namespace) -> None:
    for i in range(7):
        _put_raw(store, f"user-1/n{i}.md")

    titles = [r.title for r in iter_notes(store=store, namespace=namespace, page_size=3)]

    assert sorted(titles) == [f"n{i}.md" for i in range(7)]
    assert store.op_names().count("list_objects") == 3


def test_list_notes_default_page_size(store, namespace) -> None:
    list_notes(store=store, namespace=namespace, page_size=0)

    assert store.ops[0].args[1] == 100


@pytest.mark.parametrize("page_size", [-5, 1001])
def test_list_notes_invalid_page_size_makes_no_store_call(store, namespace, page_size) -> None:
    with pytest.raises(InvalidArgumentError):
        list_notes(store=store, namespace=namespace, page_size=page_size)

    assert store.ops == []


def test_list_notes_invalid_cursor_is_invalid_argument(store, namespace) -> None:
    with pytest.raises(InvalidArgumentError):
        list_notes(store=store, namespace=namespace, cursor="not-a-token")


def test_list_notes_cursor_from_other_namespace_is_invalid_argument(store, namespace) -> None:
    other = build_namespace(bucket="notes-bucket", user_id="user-2")
    for i in range(3):
        _put_raw(store, f"user-2/n{i}.txt")
    foreign = list_notes(store=store, namespace=other, page_size=1).next_cursor

    with pytest.raises(InvalidArgumentError):
        list_notes(store=store, namespace=namespace, cursor=foreign)


def test_list_notes_store_failure_is_service_unavailable(store, namespace) -> None:
    store.fail_next("list_objects", ConnectionError("reset by peer"))

    with pytest.raises(ServiceUnavailableError) as excinfo:
        list_notes(store=store, namespace=namespace)

    assert isinstance(excinfo.value.__cause__, ConnectionError)
