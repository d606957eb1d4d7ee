from __future__ import annotations


def parse_s3_uri(uri: str) -> tuple[str, str]:
    """Split an ``s3://`` URI into bucket and key components.

    The key is returned verbatim: note titles may contain characters such as ``#`` or
    ``?`` that a generic URL parser would treat as delimiters, so no URL parsing or
    percent-decoding is applied.
    """

    if not uri:
        raise ValueError("uri is required")
    scheme, sep, rest = uri.partition("://")
    if not sep or scheme != "s3":
        raise ValueError(f"Invalid S3 URI: {uri}")
    bucket, _, key = rest.partition("/")
    if not bucket or not key:
        raise ValueError(f"S3 URI missing bucket or key: {uri}")
    return bucket, key


def build_s3_uri(bucket: str, key: str) -> str:
    bucket = (bucket or "").strip()
    if not bucket:
        raise ValueError("bucket is required")
    if not key:
        raise ValueError("key is required")
    return f"s3://{bucket}/{key}"


def normalize_bucket(store_namespace: str) -> str:
    """Accept either an ``s3://bucket`` URI or a bare bucket name."""

    value = (store_namespace or "").strip()
    if "://" in value:
        scheme, _, rest = value.partition("://")
        if scheme != "s3":
            raise ValueError(f"Invalid S3 URI: {store_namespace}")
        value = rest
    value = value.strip("/")
    if not value:
        raise ValueError("bucket is required")
    if "/" in value:
        raise ValueError(f"bucket must not contain a key path: {store_namespace}")
    return value
