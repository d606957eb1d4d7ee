from __future__ import annotations

import logging

from notes_core.domain.models import Fingerprint
from notes_core.errors import AlreadyExistsError
from notes_core.io.keys import Namespace, content_type_for
from notes_core.notes.classify import store_call
from notes_core.observability import log_event
from notes_core.store.object_store import ObjectStore, PreconditionFailed

logger = logging.getLogger(__name__)

# If-None-Match value that makes a put create-only.
CREATE_ONLY = "*"


def write_note(
    *,
    store: ObjectStore,
    namespace: Namespace,
    title: str,
    content: str | bytes,
    overwrite: bool,
) -> Fingerprint:
    """Store a note and return the fingerprint the store assigned to it.

    ``overwrite=False`` is create-only: the put carries a "no existing entity tag"
    precondition, so of two racing creates exactly one succeeds and the other raises
    ``AlreadyExistsError``. ``overwrite=True`` replaces any prior content.
    The content type is derived from the title suffix only.
    """

    uri = namespace.uri(title)
    body = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    content_type = content_type_for(title)

    with store_call("put_object", uri, {PreconditionFailed: AlreadyExistsError}):
        etag = store.put_object(
            uri,
            body,
            content_type=content_type,
            if_none_match=None if overwrite else CREATE_ONLY,
        )

    log_event(
        logger,
        "notes.write",
        uri=uri,
        mode="overwrite" if overwrite else "create",
        content_type=content_type,
        size=len(body),
        etag=etag,
    )
    return Fingerprint(etag)
