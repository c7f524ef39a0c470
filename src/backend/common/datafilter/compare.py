from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any


def _is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def as_utc(value: datetime) -> datetime:
    # Naive timestamps are read as UTC so every comparison is between instants.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return as_utc(datetime.fromisoformat(raw.strip()))
    except ValueError:
        return None


def deep_equal(a: Any, b: Any) -> bool:
    """
    Structural equality over JSON-like trees.

    Differs from ``==`` in that booleans never equal numbers, lists and tuples
    are both arrays, and datetimes compare by instant.
    """
    if a is b:
        return True
    if a is None or b is None:
        return False

    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b

    if isinstance(a, datetime) and isinstance(b, datetime):
        return as_utc(a) == as_utc(b)

    if _is_array(a) or _is_array(b):
        if not (_is_array(a) and _is_array(b)):
            return False
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    if isinstance(a, Mapping) or isinstance(b, Mapping):
        if not (isinstance(a, Mapping) and isinstance(b, Mapping)):
            return False
        if set(a.keys()) != set(b.keys()):
            return False
        return all(deep_equal(a[key], b[key]) for key in a)

    return bool(a == b)
