from __future__ import annotations


class NotesCoreError(Exception):
    """Base error for notes_core.

    Every note operation fails with exactly one of the subclasses below.
    """


class InvalidArgumentError(NotesCoreError):
    """Raised when a parameter the core can check syntactically is malformed (page size, cursor)."""


class NotFoundError(NotesCoreError):
    """Raised when a note that must exist (read, rename source) is missing."""


class NotModifiedError(NotesCoreError):
    """Raised by a conditional read when the caller already holds the current fingerprint."""


class AlreadyExistsError(NotesCoreError):
    """Raised when a create-only write (or a rename target reservation) hits an existing note."""


class ServiceUnavailableError(NotesCoreError):
    """Raised for any store or transport failure not covered by a more specific error."""
