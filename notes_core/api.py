from __future__ import annotations

import logging
from collections.abc import Iterator

from notes_core.domain.models import Fingerprint, NoteContent, NotePage, NoteRecord
from notes_core.errors import InvalidArgumentError
from notes_core.io.keys import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Namespace, build_namespace
from notes_core.notes import (
    delete_all_notes,
    delete_note,
    iter_notes,
    list_notes,
    read_note,
    rename_note,
    write_note,
)
from notes_core.observability import log_event
from notes_core.store.object_store import ObjectStore

logger = logging.getLogger(__name__)


class NoteStore:
    """Filesystem-like note operations for one namespace of an object store.

    Holds only its store and namespace bindings; all concurrency control is delegated to
    the store's conditional requests, so one instance may be shared across threads.
    Every operation blocks on store I/O and applies no timeout of its own.
    """

    def __init__(
        self,
        store: ObjectStore,
        namespace: Namespace,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._store = store
        self._namespace = namespace
        if not 1 <= default_page_size <= MAX_PAGE_SIZE:
            raise InvalidArgumentError(
                f"invalid default_page_size '{default_page_size}', "
                f"should be between 1 and {MAX_PAGE_SIZE}"
            )
        self._default_page_size = default_page_size

    @classmethod
    def for_user(
        cls,
        store: ObjectStore,
        *,
        bucket: str,
        user_id: str,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> NoteStore:
        namespace = build_namespace(bucket=bucket, user_id=user_id)
        log_event(logger, "notes.namespace", bucket=namespace.bucket, prefix=namespace.prefix)
        return cls(store, namespace, default_page_size=default_page_size)

    @property
    def namespace(self) -> Namespace:
        return self._namespace

    def list(self, page_size: int | None = None, cursor: str = "") -> NotePage:
        return list_notes(
            store=self._store,
            namespace=self._namespace,
            page_size=page_size,
            cursor=cursor,
            default_page_size=self._default_page_size,
        )

    def iter_all(self, page_size: int | None = None) -> Iterator[NoteRecord]:
        return iter_notes(
            store=self._store,
            namespace=self._namespace,
            page_size=page_size,
            default_page_size=self._default_page_size,
        )

    def read(
        self, title: str, if_fingerprint_matches: Fingerprint | str | None = None
    ) -> NoteContent:
        return read_note(
            store=self._store,
            namespace=self._namespace,
            title=title,
            if_fingerprint_matches=if_fingerprint_matches,
        )

    def write(self, title: str, content: str | bytes, *, overwrite: bool) -> Fingerprint:
        return write_note(
            store=self._store,
            namespace=self._namespace,
            title=title,
            content=content,
            overwrite=overwrite,
        )

    def rename(
        self, source_title: str, target_title: str, *, cleanup_reservation: bool = True
    ) -> Fingerprint:
        return rename_note(
            store=self._store,
            namespace=self._namespace,
            source_title=source_title,
            target_title=target_title,
            cleanup_reservation=cleanup_reservation,
        )

    def delete(self, title: str) -> None:
        delete_note(store=self._store, namespace=self._namespace, title=title)

    def delete_all(self) -> int:
        return delete_all_notes(store=self._store, namespace=self._namespace)
