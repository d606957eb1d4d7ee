"""Rename built from create + copy + delete.

The store has no native rename, so the protocol walks three stages:

``RESERVED``
    An empty create-only write claims the target name. A taken name fails the whole
    rename with ``AlreadyExistsError`` before anything else happens.
``COPIED``
    The source content is copied server-side onto the reserved key. A missing source
    fails with ``NotFoundError``; the reservation is then released on a best-effort
    basis (``cleanup_reservation``).
``SOURCE_DELETED``
    The source is deleted. If this fails the rename raises ``ServiceUnavailableError``
    and both objects exist, with the target holding the content.

No stage is retried and nothing is rolled back beyond the reservation release.
"""

from __future__ import annotations

import contextlib
import logging

from notes_core.domain.models import Fingerprint, RenameStage
from notes_core.errors import NotesCoreError, NotFoundError
from notes_core.io.keys import Namespace
from notes_core.notes.classify import store_call
from notes_core.notes.write import write_note
from notes_core.observability import error_log_fields, log_event
from notes_core.store.object_store import NoSuchKey, ObjectStore, PreconditionFailed

logger = logging.getLogger(__name__)


def _release_reservation(
    *, store: ObjectStore, target_uri: str, reservation: Fingerprint
) -> bool:
    """Delete the empty target we created, unless something else was written there since.

    The delete is conditional on the reservation's entity tag, so a write that lands at
    any point before the delete is kept.
    """

    try:
        store.delete_object(target_uri, if_match=reservation.value)
    except PreconditionFailed:
        log_event(logger, "notes.rename.release", target=target_uri, status="kept_modified")
        return False
    except Exception as exc:  # noqa: BLE001
        log_event(
            logger,
            "notes.rename.release",
            level=logging.WARNING,
            target=target_uri,
            status="failed",
            **error_log_fields(exc),
        )
        return False
    log_event(logger, "notes.rename.release", target=target_uri, status="released")
    return True


def rename_note(
    *,
    store: ObjectStore,
    namespace: Namespace,
    source_title: str,
    target_title: str,
    cleanup_reservation: bool = True,
) -> Fingerprint:
    """Rename a note and return the fingerprint of the content now stored at the target."""

    source_uri = namespace.uri(source_title)
    target_uri = namespace.uri(target_title)
    stage = RenameStage.STARTED

    def _log(current: RenameStage, **fields: object) -> None:
        log_event(
            logger,
            "notes.rename",
            source=source_uri,
            target=target_uri,
            stage=current.value,
            **fields,
        )

    _log(stage)
    reservation = write_note(
        store=store, namespace=namespace, title=target_title, content=b"", overwrite=False
    )
    stage = RenameStage.RESERVED
    _log(stage, reservation=reservation)

    try:
        with store_call("copy_object", source_uri, {NoSuchKey: NotFoundError}):
            etag = store.copy_object(source_uri, target_uri)
    except NotesCoreError as exc:
        released = False
        if cleanup_reservation:
            released = _release_reservation(
                store=store, target_uri=target_uri, reservation=reservation
            )
        _log(
            stage,
            status="failed",
            failed_step="copy",
            outcome=type(exc).__name__,
            reservation_released=released,
        )
        raise
    stage = RenameStage.COPIED
    _log(stage, etag=etag)

    try:
        with store_call("delete_object", source_uri):
            with contextlib.suppress(NoSuchKey):
                store.delete_object(source_uri)
    except NotesCoreError as exc:
        _log(stage, status="failed", failed_step="delete_source", outcome=type(exc).__name__)
        raise
    stage = RenameStage.SOURCE_DELETED
    _log(stage, status="done", etag=etag)
    return Fingerprint(etag)
