from __future__ import annotations

import logging
from collections.abc import Iterator

from notes_core.domain.models import Fingerprint, NotePage, NoteRecord
from notes_core.errors import InvalidArgumentError, ServiceUnavailableError
from notes_core.io.keys import DEFAULT_PAGE_SIZE, Namespace, is_supported_title, resolve_page_size
from notes_core.notes.classify import store_call
from notes_core.observability import log_event
from notes_core.store.object_store import InvalidContinuationToken, ObjectStore

logger = logging.getLogger(__name__)


def list_notes(
    *,
    store: ObjectStore,
    namespace: Namespace,
    page_size: int | None = None,
    cursor: str = "",
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> NotePage:
    """Return one page of notes in the namespace.

    ``page_size`` bounds the raw entries fetched from the store. Entries outside the
    namespace or with an unsupported suffix are dropped afterwards, so a page may hold
    fewer records than requested (even none) while ``has_more`` is still True. Callers
    loop on ``has_more``; no backfill is attempted here.

    ``cursor`` is passed to the store verbatim. Record order is the store's.
    """

    size = resolve_page_size(page_size, default=default_page_size)
    cursor = cursor or ""

    with store_call(
        "list_objects",
        namespace.prefix_uri,
        {InvalidContinuationToken: InvalidArgumentError},
    ):
        page = store.list_objects(namespace.prefix_uri, max_keys=size, cursor=cursor)

    records: list[NoteRecord] = []
    for entry in page.entries:
        title = namespace.title_of(entry.key)
        if title is None or not is_supported_title(title):
            continue
        records.append(
            NoteRecord(
                title=title,
                last_modified=entry.last_modified,
                fingerprint=Fingerprint(entry.etag),
            )
        )

    log_event(
        logger,
        "notes.list",
        prefix=namespace.prefix_uri,
        page_size=size,
        fetched=len(page.entries),
        returned=len(records),
        has_more=page.is_truncated,
    )
    return NotePage(
        records=tuple(records),
        has_more=page.is_truncated,
        next_cursor=page.next_cursor if page.is_truncated else "",
    )


def iter_notes(
    *,
    store: ObjectStore,
    namespace: Namespace,
    page_size: int | None = None,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> Iterator[NoteRecord]:
    """Yield every note of the namespace by following cursors until ``has_more`` is False."""

    cursor = ""
    while True:
        page = list_notes(
            store=store,
            namespace=namespace,
            page_size=page_size,
            cursor=cursor,
            default_page_size=default_page_size,
        )
        yield from page.records
        if not page.has_more:
            return
        if not page.next_cursor:
            raise ServiceUnavailableError(
                "store reported more results without a continuation token"
            )
        cursor = page.next_cursor
