from __future__ import annotations

import logging
from collections.abc import Mapping


def _kv_pairs(fields: Mapping[str, object]) -> str:
    parts: list[str] = []
    for key, value in fields.items():
        if value is None:
            continue
        text = str(value).strip()
        if not text:
            continue
        parts.append(f"{key}={text}")
    return " ".join(parts)


def log_event(
    logger: logging.Logger, message: str, *, level: int = logging.INFO, **fields: object
) -> None:
    """Emit a stable, grep-friendly structured log line.

    Key fields are rendered as ``k=v`` tokens after the event name; ``None`` and empty
    values are skipped.
    """

    suffix = _kv_pairs(fields)
    if suffix:
        logger.log(level, "%s %s", message, suffix)
    else:
        logger.log(level, "%s", message)


def error_log_fields(exc: BaseException) -> dict[str, object]:
    """Extract standard fields from an exception raised by a store call."""

    response = getattr(exc, "response", None) or {}
    error = response.get("Error") if isinstance(response, Mapping) else None
    code = (error or {}).get("Code") if isinstance(error, Mapping) else None
    return {
        "error": type(exc).__name__,
        "code": code,
        "detail": str(exc),
    }
