from __future__ import annotations

import contextlib
import logging

from notes_core.errors import ServiceUnavailableError
from notes_core.io.keys import MAX_PAGE_SIZE, Namespace
from notes_core.io.uri import build_s3_uri
from notes_core.notes.classify import store_call
from notes_core.observability import log_event
from notes_core.store.object_store import NoSuchKey, ObjectStore

logger = logging.getLogger(__name__)


def delete_note(*, store: ObjectStore, namespace: Namespace, title: str) -> None:
    """Delete a note. A note that is already absent counts as deleted."""

    uri = namespace.uri(title)
    with store_call("delete_object", uri):
        with contextlib.suppress(NoSuchKey):
            store.delete_object(uri)
    log_event(logger, "notes.delete", uri=uri)


def delete_all_notes(*, store: ObjectStore, namespace: Namespace) -> int:
    """Delete every object under the namespace prefix and return how many keys were removed.

    All keys under the prefix go, not just supported note suffixes, so stray rename
    reservations and foreign files are cleared too. Keys are collected first and then
    deleted in batches; a failure part-way leaves the earlier batches deleted.
    """

    prefix_uri = namespace.prefix_uri
    keys: list[str] = []
    cursor = ""
    while True:
        with store_call("list_objects", prefix_uri):
            page = store.list_objects(prefix_uri, max_keys=MAX_PAGE_SIZE, cursor=cursor)
        keys.extend(
            entry.key for entry in page.entries if entry.key.startswith(namespace.prefix)
        )
        if not page.is_truncated:
            break
        if not page.next_cursor:
            raise ServiceUnavailableError(
                f"{prefix_uri}: store reported more results without a continuation token"
            )
        cursor = page.next_cursor

    if not keys:
        log_event(logger, "notes.delete_all", prefix=prefix_uri, deleted=0)
        return 0

    uris = [build_s3_uri(namespace.bucket, key) for key in keys]
    with store_call("delete_objects", prefix_uri):
        store.delete_objects(uris)
    log_event(logger, "notes.delete_all", prefix=prefix_uri, deleted=len(uris))
    return len(uris)
