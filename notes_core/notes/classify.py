from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from notes_core.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotesCoreError,
    NotFoundError,
    NotModifiedError,
    ServiceUnavailableError,
)
from notes_core.observability import error_log_fields, log_event
from notes_core.store.object_store import ObjectStoreError

logger = logging.getLogger(__name__)

ErrorMapping = Mapping[type[ObjectStoreError], type[NotesCoreError]]

_MESSAGES: dict[type[NotesCoreError], str] = {
    InvalidArgumentError: "invalid argument",
    NotFoundError: "not found",
    NotModifiedError: "not modified",
    AlreadyExistsError: "already exists",
    ServiceUnavailableError: "service unavailable",
}

# Outcomes a caller routinely expects; logged below WARNING.
_EXPECTED = {NotFoundError, NotModifiedError, AlreadyExistsError}


def _classify(exc: BaseException, mapping: ErrorMapping) -> type[NotesCoreError]:
    for store_error, domain_error in mapping.items():
        if isinstance(exc, store_error):
            return domain_error
    return ServiceUnavailableError


@contextmanager
def store_call(op: str, uri: str, mapping: ErrorMapping | None = None) -> Iterator[None]:
    """Classify any failure of the wrapped store call into the domain taxonomy.

    Store errors listed in ``mapping`` become the mapped domain error; every other
    exception becomes ``ServiceUnavailableError``. Domain errors pass through untouched so
    nothing is classified twice.
    """

    try:
        yield
    except NotesCoreError:
        raise
    except Exception as exc:  # noqa: BLE001
        target = _classify(exc, mapping or {})
        log_event(
            logger,
            "notes.store_error",
            level=logging.INFO if target in _EXPECTED else logging.WARNING,
            op=op,
            uri=uri,
            outcome=target.__name__,
            **error_log_fields(exc),
        )
        raise target(f"{uri}: {_MESSAGES[target]}") from exc
