from __future__ import annotations

from dataclasses import dataclass

from notes_core.domain.models import NoteKind
from notes_core.errors import InvalidArgumentError
from notes_core.io.uri import build_s3_uri, normalize_bucket

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class Namespace:
    """Key prefix scoping all notes of one principal inside a bucket."""

    bucket: str
    prefix: str

    def __post_init__(self) -> None:
        if not self.bucket:
            raise ValueError("Namespace.bucket is required")
        if not self.prefix or not self.prefix.endswith("/"):
            raise ValueError(f"Namespace.prefix must end with '/', got '{self.prefix}'")

    @property
    def prefix_uri(self) -> str:
        return build_s3_uri(self.bucket, self.prefix)

    def key(self, title: str) -> str:
        if not title:
            raise InvalidArgumentError("title is required")
        return self.prefix + title

    def uri(self, title: str) -> str:
        return build_s3_uri(self.bucket, self.key(title))

    def title_of(self, key: str) -> str | None:
        """Return the title for a key inside this namespace, or None when it lies outside."""

        if not key.startswith(self.prefix):
            return None
        title = key[len(self.prefix) :]
        if not title or "/" in title:
            return None
        return title


def build_namespace(*, bucket: str, user_id: str) -> Namespace:
    """Build the namespace of one caller.

    ``bucket`` is either an ``s3://bucket`` URI or a bucket name.
    """

    user = (user_id or "").strip()
    if not user:
        raise ValueError("user_id is required")
    if "/" in user:
        raise ValueError(f"user_id must not contain '/': {user_id}")
    return Namespace(bucket=normalize_bucket(bucket), prefix=f"{user}/")


def note_kind(title: str) -> NoteKind | None:
    for kind in NoteKind:
        if title.endswith(kind.suffix):
            return kind
    return None


def is_supported_title(title: str) -> bool:
    return note_kind(title) is not None


def content_type_for(title: str) -> str:
    kind = note_kind(title)
    if kind is None:
        return NoteKind.TEXT.content_type
    return kind.content_type


def resolve_page_size(page_size: int | None, *, default: int = DEFAULT_PAGE_SIZE) -> int:
    """Validate a requested page size; ``None`` and ``0`` mean the default."""

    if page_size is None:
        return default
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise InvalidArgumentError(f"invalid page_size '{page_size}', expected an integer")
    if page_size == 0:
        return default
    if page_size < 0 or page_size > MAX_PAGE_SIZE:
        raise InvalidArgumentError(
            f"invalid page_size '{page_size}', should be between 1 and {MAX_PAGE_SIZE}"
        )
    return page_size
