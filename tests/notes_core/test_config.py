from __future__ import annotations

import pytest

from notes_core.api import NoteStore
from notes_core.config import (
    StoreSettings,
    build_note_store,
    build_object_store,
    load_settings_from_env,
    load_settings_from_yaml,
)
from notes_core.store.stores import Boto3S3Store, LocalFileStore
from notes_core.testing.memory_store import InMemoryObjectStore


def test_load_settings_from_explicit_env() -> None:
    env = {
        "NOTES_S3_BUCKET": "notes",
        "S3_ENDPOINT_URL": "https://minio.example.local:9000",
        "S3_ACCESS_KEY_ID": "access",
        "S3_SECRET_ACCESS_KEY": "secret",
        "S3_REGION": "eu-west-1",
        "S3_USE_SSL": "true",
        "S3_URL_STYLE": "virtual",
        "S3_SESSION_TOKEN": "token",
        "NOTES_PAGE_SIZE": "250",
        "S3_CONNECT_TIMEOUT": "2.5",
    }

    settings = load_settings_from_env(env)

    assert settings.bucket == "notes"
    assert settings.backend == "s3"
    assert settings.endpoint_url == "https://minio.example.local:9000"
    assert settings.access_key == "access"
    assert settings.secret_key == "secret"
    assert settings.region == "eu-west-1"
    assert settings.use_ssl is True
    assert settings.url_style == "virtual"
    assert settings.session_token == "token"
    assert settings.default_page_size == 250
    assert settings.connect_timeout == 2.5
    assert settings.read_timeout is None


def test_load_settings_defaults_and_bucket_fallback() -> None:
    settings = load_settings_from_env({"S3_BUCKET_NAME": "s3://legacy-bucket"})

    assert settings.bucket == "legacy-bucket"
    assert settings.region == "us-east-1"
    assert settings.url_style == "path"
    assert settings.use_ssl is None
    assert settings.access_key is None
    assert settings.default_page_size == 100


def test_load_settings_missing_bucket() -> None:
    with pytest.raises(ValueError, match="NOTES_S3_BUCKET"):
        load_settings_from_env({"S3_REGION": "us-east-1"})


def test_load_settings_requires_both_keys() -> None:
    with pytest.raises(ValueError, match="S3_SECRET_ACCESS_KEY"):
        load_settings_from_env({"NOTES_S3_BUCKET": "notes", "S3_ACCESS_KEY_ID": "minio"})


@pytest.mark.parametrize(
    ("env", "match"),
    [
        ({"NOTES_PAGE_SIZE": "many"}, "NOTES_PAGE_SIZE"),
        ({"NOTES_PAGE_SIZE": "5000"}, "default_page_size"),
        ({"S3_READ_TIMEOUT": "soon"}, "S3_READ_TIMEOUT"),
        ({"NOTES_STORE_BACKEND": "gcs"}, "backend"),
        ({"NOTES_STORE_BACKEND": "local"}, "NOTES_LOCAL_ROOT"),
    ],
)
def test_load_settings_rejects_bad_values(env: dict[str, str], match: str) -> None:
    with pytest.raises(ValueError, match=match):
        load_settings_from_env({"NOTES_S3_BUCKET": "notes", **env})


def test_load_settings_from_yaml_env_overrides(tmp_path) -> None:
    path = tmp_path / "notes.yaml"
    path.write_text(
        """
bucket: from-file
backend: local
local_root: /srv/notes
default_page_size: 50
""".lstrip(),
        encoding="utf-8",
    )

    settings = load_settings_from_yaml(path, env={"NOTES_S3_BUCKET": "from-env"})

    assert settings.bucket == "from-env"
    assert settings.backend == "local"
    assert settings.local_root == "/srv/notes"
    assert settings.default_page_size == 50


def test_load_settings_from_yaml_rejects_unknown_keys(tmp_path) -> None:
    path = tmp_path / "notes.yaml"
    path.write_text("bucket: b\nbukket: typo\n", encoding="utf-8")

    with pytest.raises(ValueError, match="bukket"):
        load_settings_from_yaml(path, env={})


def test_load_settings_from_yaml_requires_mapping(tmp_path) -> None:
    path = tmp_path / "notes.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_settings_from_yaml(path, env={})


def test_build_object_store_local(tmp_path) -> None:
    settings = StoreSettings(bucket="notes", backend="local", local_root=str(tmp_path))

    assert isinstance(build_object_store(settings), LocalFileStore)


def test_build_object_store_s3_uses_boto3(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def fake_client(**kwargs: object) -> object:
        captured.update(kwargs)
        return object()

    monkeypatch.setattr("boto3.client", fake_client)
    settings = StoreSettings(
        bucket="notes",
        endpoint_url="http://minio:9000",
        access_key="minio",
        secret_key="secret",
        read_timeout=5.0,
    )

    store = build_object_store(settings)

    assert isinstance(store, Boto3S3Store)
    assert captured["service_name"] == "s3"
    assert captured["endpoint_url"] == "http://minio:9000"
    assert captured["use_ssl"] is False
    assert captured["aws_access_key_id"] == "minio"
    assert captured["config"].read_timeout == 5.0


def test_build_note_store_binds_user_namespace() -> None:
    settings = StoreSettings(bucket="notes", default_page_size=20)
    note_store = build_note_store(settings, user_id="u1", store=InMemoryObjectStore())

    assert isinstance(note_store, NoteStore)
    assert note_store.namespace.prefix_uri == "s3://notes/u1/"
