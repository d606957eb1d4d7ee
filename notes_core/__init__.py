"""Stable public imports for `notes_core`.

Prefer importing from these symbols when embedding the note store in a request layer.
Lower-level utilities should be imported from their submodules explicitly.
"""

from notes_core.api import NoteStore
from notes_core.config import (
    StoreSettings,
    build_note_store,
    build_object_store,
    load_settings_from_env,
    load_settings_from_yaml,
)
from notes_core.domain import Fingerprint, NoteContent, NoteKind, NotePage, NoteRecord, RenameStage
from notes_core.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotesCoreError,
    NotFoundError,
    NotModifiedError,
    ServiceUnavailableError,
)
from notes_core.io.keys import Namespace, build_namespace
from notes_core.store import Boto3S3Store, LocalFileStore, ObjectStore

__all__ = [
    "AlreadyExistsError",
    "Boto3S3Store",
    "Fingerprint",
    "InvalidArgumentError",
    "LocalFileStore",
    "Namespace",
    "NotFoundError",
    "NotModifiedError",
    "NoteContent",
    "NoteKind",
    "NotePage",
    "NoteRecord",
    "NoteStore",
    "NotesCoreError",
    "ObjectStore",
    "RenameStage",
    "ServiceUnavailableError",
    "StoreSettings",
    "build_namespace",
    "build_note_store",
    "build_object_store",
    "load_settings_from_env",
    "load_settings_from_yaml",
]
