"""Store configuration (env-first, optional YAML file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from notes_core.api import NoteStore
from notes_core.io.keys import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from notes_core.io.uri import normalize_bucket
from notes_core.store.object_store import ObjectStore
from notes_core.store.stores import Boto3S3Store, LocalFileStore

BACKENDS = {"s3", "local"}


@dataclass(frozen=True)
class StoreSettings:
    bucket: str
    backend: str = "s3"
    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str = "us-east-1"
    use_ssl: bool | None = None
    url_style: str = "path"
    session_token: str | None = None
    local_root: str | None = None
    default_page_size: int = DEFAULT_PAGE_SIZE
    connect_timeout: float | None = None
    read_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {sorted(BACKENDS)}, got '{self.backend}'")
        object.__setattr__(self, "bucket", normalize_bucket(self.bucket))
        if bool(self.access_key) != bool(self.secret_key):
            raise ValueError("S3_ACCESS_KEY_ID and S3_SECRET_ACCESS_KEY must be set together")
        if self.backend == "local" and not self.local_root:
            raise ValueError("NOTES_LOCAL_ROOT is required for the local backend")
        if not 1 <= self.default_page_size <= MAX_PAGE_SIZE:
            raise ValueError(
                f"default_page_size must be between 1 and {MAX_PAGE_SIZE}, "
                f"got {self.default_page_size}"
            )


def _parse_bool(value: str | None, *, default: bool | None = None) -> bool | None:
    if value is None:
        return default
    text = value.strip().lower()
    if text in {"1", "true", "yes", "y"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    return default


def _parse_int(value: str | None, *, name: str) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{value}'") from exc


def _parse_float(value: str | None, *, name: str) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        return float(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got '{value}'") from exc


def _env_str(env: dict[str, str], *names: str) -> str | None:
    for name in names:
        value = env.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _settings_from_env(env: dict[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {
        "bucket": _env_str(env, "NOTES_S3_BUCKET", "S3_BUCKET_NAME"),
        "backend": _env_str(env, "NOTES_STORE_BACKEND"),
        "endpoint_url": _env_str(env, "S3_ENDPOINT_URL"),
        "access_key": _env_str(env, "S3_ACCESS_KEY_ID"),
        "secret_key": _env_str(env, "S3_SECRET_ACCESS_KEY"),
        "region": _env_str(env, "S3_REGION"),
        "use_ssl": _parse_bool(env.get("S3_USE_SSL")),
        "url_style": _env_str(env, "S3_URL_STYLE"),
        "session_token": _env_str(env, "S3_SESSION_TOKEN"),
        "local_root": _env_str(env, "NOTES_LOCAL_ROOT"),
        "default_page_size": _parse_int(env.get("NOTES_PAGE_SIZE"), name="NOTES_PAGE_SIZE"),
        "connect_timeout": _parse_float(
            env.get("S3_CONNECT_TIMEOUT"), name="S3_CONNECT_TIMEOUT"
        ),
        "read_timeout": _parse_float(env.get("S3_READ_TIMEOUT"), name="S3_READ_TIMEOUT"),
    }
    return {key: value for key, value in values.items() if value is not None}


def _build(values: dict[str, Any]) -> StoreSettings:
    if not values.get("bucket"):
        raise ValueError("Missing store configuration: set NOTES_S3_BUCKET (or S3_BUCKET_NAME)")
    return StoreSettings(**values)


def load_settings_from_env(env: dict[str, str] | None = None) -> StoreSettings:
    """Resolve store settings from environment variables.

    Without S3_ACCESS_KEY_ID/S3_SECRET_ACCESS_KEY boto3 uses its default credential chain.
    """

    env = env if env is not None else dict(os.environ)
    return _build(_settings_from_env(env))


def load_settings_from_yaml(
    path: str | Path, env: dict[str, str] | None = None
) -> StoreSettings:
    """Load settings from a YAML mapping of ``StoreSettings`` fields; env values win."""

    with open(path, encoding="utf-8") as f:
        payload = yaml.safe_load(f) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"{path} must contain a YAML mapping")

    known = {f.name for f in fields(StoreSettings)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ValueError(f"{path} has unknown settings: {', '.join(unknown)}")

    env = env if env is not None else dict(os.environ)
    values = dict(payload)
    values.update(_settings_from_env(env))
    return _build(values)


def build_object_store(settings: StoreSettings) -> ObjectStore:
    if settings.backend == "local":
        return LocalFileStore(Path(str(settings.local_root)))

    return Boto3S3Store(
        endpoint_url=settings.endpoint_url,
        access_key=settings.access_key,
        secret_key=settings.secret_key,
        region=settings.region,
        use_ssl=settings.use_ssl,
        url_style=settings.url_style,
        session_token=settings.session_token,
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
    )


def build_note_store(
    settings: StoreSettings, *, user_id: str, store: ObjectStore | None = None
) -> NoteStore:
    """Build a ``NoteStore`` for one caller; ``store`` overrides the configured backend."""

    return NoteStore.for_user(
        store if store is not None else build_object_store(settings),
        bucket=settings.bucket,
        user_id=user_id,
        default_page_size=settings.default_page_size,
    )
