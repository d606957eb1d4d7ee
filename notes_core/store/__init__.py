"""Object store abstractions and implementations."""

from notes_core.store.object_store import (
    InvalidContinuationToken,
    ListObjectsPage,
    NoSuchKey,
    ObjectEntry,
    ObjectNotModified,
    ObjectStore,
    ObjectStoreError,
    PreconditionFailed,
    StoredObject,
)
from notes_core.store.stores import Boto3S3Store, LocalFileStore

__all__ = [
    "Boto3S3Store",
    "InvalidContinuationToken",
    "ListObjectsPage",
    "LocalFileStore",
    "NoSuchKey",
    "ObjectEntry",
    "ObjectNotModified",
    "ObjectStore",
    "ObjectStoreError",
    "PreconditionFailed",
    "StoredObject",
]
