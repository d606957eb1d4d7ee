from __future__ import annotations

import logging

from notes_core.domain.models import Fingerprint, NoteContent
from notes_core.errors import InvalidArgumentError, NotFoundError, NotModifiedError
from notes_core.io.keys import Namespace
from notes_core.notes.classify import store_call
from notes_core.observability import log_event
from notes_core.store.object_store import NoSuchKey, ObjectNotModified, ObjectStore

logger = logging.getLogger(__name__)


def read_note(
    *,
    store: ObjectStore,
    namespace: Namespace,
    title: str,
    if_fingerprint_matches: Fingerprint | str | None = None,
) -> NoteContent:
    """Fetch the full content of a note.

    With a non-empty ``if_fingerprint_matches`` equal to the stored fingerprint the call
    raises ``NotModifiedError`` instead of transferring the content again. The
    fingerprint may also be passed as its string form.
    """

    uri = namespace.uri(title)
    if isinstance(if_fingerprint_matches, Fingerprint):
        if_fingerprint_matches = if_fingerprint_matches.value
    elif if_fingerprint_matches is not None and not isinstance(if_fingerprint_matches, str):
        raise InvalidArgumentError(
            "if_fingerprint_matches must be a Fingerprint or str, "
            f"got {type(if_fingerprint_matches).__name__}"
        )
    if_none_match = if_fingerprint_matches or None

    with store_call(
        "get_object",
        uri,
        {NoSuchKey: NotFoundError, ObjectNotModified: NotModifiedError},
    ):
        stored = store.get_object(uri, if_none_match=if_none_match)

    log_event(logger, "notes.read", uri=uri, size=len(stored.body), etag=stored.etag)
    return NoteContent(content=stored.body, fingerprint=Fingerprint(stored.etag))
