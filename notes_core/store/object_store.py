from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol


class ObjectStoreError(Exception):
    """Base class for the failures a store adapter must report distinguishably."""


class NoSuchKey(ObjectStoreError):
    """The addressed object (or copy source) does not exist."""


class ObjectNotModified(ObjectStoreError):
    """A conditional get matched the caller's entity tag."""


class PreconditionFailed(ObjectStoreError):
    """A conditional put or delete found a different entity tag than required."""


class InvalidContinuationToken(ObjectStoreError):
    """A listing was asked to resume from a token the store does not accept."""


@dataclass(frozen=True)
class ObjectEntry:
    key: str
    last_modified: datetime
    etag: str


@dataclass(frozen=True)
class ListObjectsPage:
    entries: Sequence[ObjectEntry] = field(default_factory=tuple)
    is_truncated: bool = False
    next_cursor: str = ""


@dataclass(frozen=True)
class StoredObject:
    body: bytes
    etag: str


class ObjectStore(Protocol):
    """Object store abstraction using URI identifiers.

    All methods accept ``s3://bucket/key`` URIs; adapters parse them for their backend.
    Only the failures listed per method are translated into ``ObjectStoreError``
    subclasses; anything else propagates as raised by the backend.
    """

    def list_objects(
        self, prefix_uri: str, *, max_keys: int, cursor: str = ""
    ) -> ListObjectsPage:
        """Return one page of objects whose key starts with the prefix.

        Raises ``InvalidContinuationToken`` for a cursor the store rejects.
        """

    def get_object(self, uri: str, *, if_none_match: str | None = None) -> StoredObject:
        """Read the full object.

        Raises ``NoSuchKey`` when missing, ``ObjectNotModified`` when ``if_none_match``
        equals the current entity tag.
        """

    def put_object(
        self,
        uri: str,
        body: bytes,
        *,
        content_type: str,
        if_none_match: str | None = None,
    ) -> str:
        """Store ``body`` and return the new entity tag.

        ``if_none_match="*"`` makes the put create-only; ``PreconditionFailed`` is raised
        when an object already exists.
        """

    def copy_object(self, source_uri: str, dest_uri: str) -> str:
        """Server-side copy, overwriting dest. Returns the new entity tag.

        Raises ``NoSuchKey`` when the source is missing.
        """

    def delete_object(self, uri: str, *, if_match: str | None = None) -> None:
        """Delete one object. Deleting a missing key is success.

        With ``if_match`` the delete only happens while the object still carries that
        entity tag; otherwise ``PreconditionFailed`` is raised and the object is kept.
        """

    def delete_objects(self, uris: list[str]) -> None:
        """Delete the listed object URIs (one bucket)."""
