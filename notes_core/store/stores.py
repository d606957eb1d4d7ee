from __future__ import annotations

import base64
import binascii
import hashlib
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from notes_core.io.uri import parse_s3_uri
from notes_core.store.object_store import (
    InvalidContinuationToken,
    ListObjectsPage,
    NoSuchKey,
    ObjectEntry,
    ObjectNotModified,
    ObjectStore,
    PreconditionFailed,
    StoredObject,
)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
_NOT_MODIFIED_CODES = {"304", "NotModified"}
_PRECONDITION_CODES = {"412", "PreconditionFailed"}
_INVALID_TOKEN_CODES = {"InvalidArgument", "InvalidToken"}

# S3 DeleteObjects accepts at most 1000 keys per request.
DELETE_BATCH_SIZE = 1000


def _error_code(exc: BaseException) -> str:
    response = getattr(exc, "response", None) or {}
    error = response.get("Error") or {}
    code = str(error.get("Code") or "")
    if code:
        return code
    status = (response.get("ResponseMetadata") or {}).get("HTTPStatusCode")
    return str(status or "")


def _batched(values: list[str], *, size: int = DELETE_BATCH_SIZE) -> list[list[str]]:
    return [values[i : i + size] for i in range(0, len(values), size)]


def _group_by_bucket(uris: list[str]) -> dict[str, list[str]]:
    by_bucket: dict[str, list[str]] = {}
    for uri in uris:
        bucket, key = parse_s3_uri(uri)
        by_bucket.setdefault(bucket, []).append(key)
    return by_bucket


class Boto3S3Store(ObjectStore):
    """S3/MinIO adapter using boto3.

    Without explicit keys boto3 falls back to its default credential chain
    (environment, shared config, instance role).
    """

    def __init__(
        self,
        *,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "us-east-1",
        use_ssl: bool | None = None,
        url_style: str = "path",
        session_token: str | None = None,
        connect_timeout: float | None = None,
        read_timeout: float | None = None,
        client: Any | None = None,
        client_kwargs: dict[str, Any] | None = None,
    ) -> None:
        if client is not None:
            self._client = client
            return

        try:
            import boto3
            from botocore.config import Config
        except Exception as exc:  # noqa: BLE001
            raise RuntimeError("boto3 is required for Boto3S3Store") from exc

        if use_ssl is None:
            use_ssl = not endpoint_url or endpoint_url.startswith("https://")

        config_kwargs: dict[str, Any] = {"s3": {"addressing_style": url_style}}
        if connect_timeout is not None:
            config_kwargs["connect_timeout"] = connect_timeout
        if read_timeout is not None:
            config_kwargs["read_timeout"] = read_timeout
        # One attempt per call; retries belong to the caller.
        config_kwargs["retries"] = {"max_attempts": 1, "mode": "standard"}

        kwargs: dict[str, Any] = dict(client_kwargs or {})
        kwargs.update(
            dict(
                service_name="s3",
                endpoint_url=endpoint_url,
                region_name=region,
                use_ssl=use_ssl,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                aws_session_token=session_token,
                config=Config(**config_kwargs),
            )
        )
        self._client = boto3.client(**kwargs)

    def list_objects(
        self, prefix_uri: str, *, max_keys: int, cursor: str = ""
    ) -> ListObjectsPage:
        bucket, key_prefix = parse_s3_uri(prefix_uri)
        kwargs: dict[str, Any] = {"Bucket": bucket, "Prefix": key_prefix, "MaxKeys": max_keys}
        if cursor:
            kwargs["ContinuationToken"] = cursor
        try:
            response = self._client.list_objects_v2(**kwargs)
        except Exception as exc:  # noqa: BLE001
            if cursor and _error_code(exc) in _INVALID_TOKEN_CODES:
                raise InvalidContinuationToken(cursor) from exc
            raise

        entries = [
            ObjectEntry(key=obj["Key"], last_modified=obj["LastModified"], etag=obj["ETag"])
            for obj in response.get("Contents", []) or []
        ]
        return ListObjectsPage(
            entries=tuple(entries),
            is_truncated=bool(response.get("IsTruncated")),
            next_cursor=str(response.get("NextContinuationToken") or ""),
        )

    def get_object(self, uri: str, *, if_none_match: str | None = None) -> StoredObject:
        bucket, key = parse_s3_uri(uri)
        kwargs: dict[str, Any] = {"Bucket": bucket, "Key": key}
        if if_none_match:
            kwargs["IfNoneMatch"] = if_none_match
        try:
            response = self._client.get_object(**kwargs)
        except Exception as exc:  # noqa: BLE001
            code = _error_code(exc)
            if code in _NOT_FOUND_CODES:
                raise NoSuchKey(uri) from exc
            if code in _NOT_MODIFIED_CODES:
                raise ObjectNotModified(uri) from exc
            raise

        body = response["Body"]
        try:
            data = body.read()
        finally:
            body.close()
        return StoredObject(body=data, etag=response["ETag"])

    def put_object(
        self,
        uri: str,
        body: bytes,
        *,
        content_type: str,
        if_none_match: str | None = None,
    ) -> str:
        bucket, key = parse_s3_uri(uri)
        kwargs: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }
        if if_none_match:
            kwargs["IfNoneMatch"] = if_none_match
        try:
            response = self._client.put_object(**kwargs)
        except Exception as exc:  # noqa: BLE001
            if _error_code(exc) in _PRECONDITION_CODES:
                raise PreconditionFailed(uri) from exc
            raise
        return response["ETag"]

    def copy_object(self, source_uri: str, dest_uri: str) -> str:
        source_bucket, source_key = parse_s3_uri(source_uri)
        dest_bucket, dest_key = parse_s3_uri(dest_uri)
        try:
            response = self._client.copy_object(
                Bucket=dest_bucket,
                Key=dest_key,
                CopySource={"Bucket": source_bucket, "Key": source_key},
            )
        except Exception as exc:  # noqa: BLE001
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise NoSuchKey(source_uri) from exc
            raise
        return response["CopyObjectResult"]["ETag"]

    def delete_object(self, uri: str, *, if_match: str | None = None) -> None:
        bucket, key = parse_s3_uri(uri)
        kwargs: dict[str, Any] = {"Bucket": bucket, "Key": key}
        if if_match:
            kwargs["IfMatch"] = if_match
        try:
            self._client.delete_object(**kwargs)
        except Exception as exc:  # noqa: BLE001
            code = _error_code(exc)
            if code in _NOT_FOUND_CODES:
                return
            if code in _PRECONDITION_CODES:
                raise PreconditionFailed(uri) from exc
            raise

    def delete_objects(self, uris: list[str]) -> None:
        for bucket, keys in _group_by_bucket(uris).items():
            for chunk in _batched(keys):
                response = self._client.delete_objects(
                    Bucket=bucket,
                    Delete={"Objects": [{"Key": key} for key in chunk], "Quiet": True},
                )
                errors = [
                    item
                    for item in (response or {}).get("Errors", []) or []
                    if str(item.get("Code") or "") not in _NOT_FOUND_CODES
                ]
                if errors:
                    first = errors[0]
                    raise RuntimeError(
                        f"delete_objects failed for {len(errors)} key(s) in {bucket}: "
                        f"{first.get('Key')} {first.get('Code')} {first.get('Message')}"
                    )


def _etag_for(data: bytes) -> str:
    # Same shape as S3's single-part ETag: quoted hex MD5.
    return '"' + hashlib.md5(data).hexdigest() + '"'  # noqa: S324


_CURSOR_PREFIX = "k1."


def _encode_cursor(key: str) -> str:
    return _CURSOR_PREFIX + base64.urlsafe_b64encode(key.encode("utf-8")).decode("ascii")


def _decode_cursor(cursor: str) -> str:
    if not cursor.startswith(_CURSOR_PREFIX):
        raise InvalidContinuationToken(cursor)
    raw = cursor[len(_CURSOR_PREFIX) :]
    try:
        key = base64.b64decode(raw.encode("ascii"), altchars=b"-_", validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidContinuationToken(cursor) from exc
    if not key:
        raise InvalidContinuationToken(cursor)
    return key


class LocalFileStore(ObjectStore):
    """Local filesystem store with S3 object semantics.

    Maps each ``s3://bucket/key`` URI to ``root_dir / bucket / key``. Entity tags are the
    quoted MD5 of the content, as S3 reports them for single-part uploads. Create-only puts
    publish a fully written staging file with ``os.link``, which fails atomically when
    the target already exists.
    """

    _STAGING_DIR = ".staging"

    def __init__(self, root_dir: str | Path):
        self.root_dir = Path(root_dir).resolve()
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self._staging = self.root_dir / self._STAGING_DIR
        self._staging.mkdir(parents=True, exist_ok=True)

    def _to_path(self, uri: str) -> Path:
        bucket, key = parse_s3_uri(uri)
        path = (self.root_dir / bucket / key).resolve()
        try:
            path.relative_to(self.root_dir / bucket)
        except ValueError as exc:
            raise ValueError(f"Path escapes root_dir: {uri}") from exc
        return path

    def _stage(self, data: bytes) -> Path:
        staged = self._staging / uuid.uuid4().hex
        staged.write_bytes(data)
        return staged

    def list_objects(
        self, prefix_uri: str, *, max_keys: int, cursor: str = ""
    ) -> ListObjectsPage:
        bucket, key_prefix = parse_s3_uri(prefix_uri)
        start_after = _decode_cursor(cursor) if cursor else ""
        bucket_root = self.root_dir / bucket
        if not bucket_root.exists():
            return ListObjectsPage()

        keys: list[str] = []
        for file_path in bucket_root.rglob("*"):
            if not file_path.is_file():
                continue
            rel = file_path.relative_to(bucket_root).as_posix()
            if rel.startswith(key_prefix) and rel > start_after:
                keys.append(rel)
        keys.sort()

        page_keys = keys[:max_keys]
        entries: list[ObjectEntry] = []
        for key in page_keys:
            path = bucket_root / key
            try:
                data = path.read_bytes()
                stat = path.stat()
            except FileNotFoundError:
                continue
            entries.append(
                ObjectEntry(
                    key=key,
                    last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    etag=_etag_for(data),
                )
            )

        is_truncated = len(keys) > max_keys
        next_cursor = _encode_cursor(page_keys[-1]) if is_truncated and page_keys else ""
        return ListObjectsPage(
            entries=tuple(entries), is_truncated=is_truncated, next_cursor=next_cursor
        )

    def get_object(self, uri: str, *, if_none_match: str | None = None) -> StoredObject:
        path = self._to_path(uri)
        try:
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NoSuchKey(uri) from exc
        etag = _etag_for(data)
        if if_none_match and if_none_match in {etag, "*"}:
            raise ObjectNotModified(uri)
        return StoredObject(body=data, etag=etag)

    def put_object(
        self,
        uri: str,
        body: bytes,
        *,
        content_type: str,
        if_none_match: str | None = None,
    ) -> str:
        path = self._to_path(uri)
        path.parent.mkdir(parents=True, exist_ok=True)
        staged = self._stage(body)
        try:
            if if_none_match == "*":
                try:
                    os.link(staged, path)
                except FileExistsError as exc:
                    raise PreconditionFailed(uri) from exc
            else:
                os.replace(staged, path)
        finally:
            staged.unlink(missing_ok=True)
        return _etag_for(body)

    def copy_object(self, source_uri: str, dest_uri: str) -> str:
        source = self._to_path(source_uri)
        try:
            data = source.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NoSuchKey(source_uri) from exc
        dest = self._to_path(dest_uri)
        dest.parent.mkdir(parents=True, exist_ok=True)
        staged = self._stage(data)
        try:
            os.replace(staged, dest)
        finally:
            staged.unlink(missing_ok=True)
        return _etag_for(data)

    def delete_object(self, uri: str, *, if_match: str | None = None) -> None:
        path = self._to_path(uri)
        if not if_match:
            path.unlink(missing_ok=True)
            return

        # Only the moved-aside file is ever removed; a racing put recreates the path.
        aside = self._staging / uuid.uuid4().hex
        try:
            os.replace(path, aside)
        except FileNotFoundError:
            return
        try:
            if _etag_for(aside.read_bytes()) == if_match:
                return
            try:
                os.link(aside, path)
            except FileExistsError:
                # A newer write already took the name.
                pass
            raise PreconditionFailed(uri)
        finally:
            aside.unlink(missing_ok=True)

    def delete_objects(self, uris: list[str]) -> None:
        for uri in uris:
            self.delete_object(uri)
