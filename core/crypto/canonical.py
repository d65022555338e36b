"""
Canonical JSON encoding.

The canonical form is what gets hashed and signed, so it must be
byte-for-byte reproducible by any client: mapping keys are sorted
recursively, arrays keep their order, separators carry no whitespace
and non-ASCII characters are emitted as UTF-8.
"""

import json
import math
from datetime import datetime, timezone
from typing import Any


def _normalize(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float):
        # JSON numbers have no integer/float distinction on the client side
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return int(value)
        return value
    return value


def canonicalize(value: Any) -> str:
    """
    Serialize ``value`` to its canonical JSON text.

    Args:
        value: JSON-compatible structure (dicts, lists, str, numbers, bool, None)

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        _normalize(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def canonical_bytes(value: Any) -> bytes:
    """Return the UTF-8 bytes of :func:`canonicalize`."""
    return canonicalize(value).encode("utf-8")


def to_iso8601(value: datetime) -> str:
    """
    Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
