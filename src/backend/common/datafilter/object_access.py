from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterable, Tuple

from .models import PathStep

_INDEX_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class AccessResult:
    """Outcome of walking a path through a tree.

    `resolved_prefix` is the longest prefix of the path that did resolve, kept
    for diagnostics when `found` is False.
    """

    value: Any
    found: bool
    error: str | None = None
    resolved_prefix: Tuple[PathStep, ...] = ()


def _is_array(node: Any) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray))


def _array_index(step: PathStep) -> int | None:
    if isinstance(step, bool):
        return None
    if isinstance(step, int):
        return step
    if isinstance(step, str) and _INDEX_RE.match(step):
        return int(step)
    return None


def get_value_from_path(tree: Any, path: Iterable[PathStep]) -> AccessResult:
    """
    Resolve `path` (object keys and array indices) against `tree`.

    Example:
        >>> tree = {"data": {"stations": [{"name": "Berlin"}, {"name": "Munich"}]}}
        >>> get_value_from_path(tree, ["data", "stations", 1, "name"]).value
        'Munich'
    """
    resolved: list[PathStep] = []
    current = tree

    for step in path:
        if current is None:
            return AccessResult(
                value=None,
                found=False,
                error=f"Cannot read '{step}' of None",
                resolved_prefix=tuple(resolved),
            )

        if _is_array(current):
            index = _array_index(step)
            if index is None:
                return AccessResult(
                    value=None,
                    found=False,
                    error=f"Array index must be a non-negative integer, got '{step}'",
                    resolved_prefix=tuple(resolved),
                )
            if index < 0 or index >= len(current):
                return AccessResult(
                    value=None,
                    found=False,
                    error=f"Array index {index} out of bounds (length: {len(current)})",
                    resolved_prefix=tuple(resolved),
                )
            resolved.append(index)
            current = current[index]
            continue

        if isinstance(current, Mapping):
            key = step if step in current else str(step)
            if key not in current:
                return AccessResult(
                    value=None,
                    found=False,
                    error=f"Property '{step}' does not exist",
                    resolved_prefix=tuple(resolved),
                )
            resolved.append(key)
            current = current[key]
            continue

        return AccessResult(
            value=None,
            found=False,
            error=f"Cannot access '{step}' of scalar type {type(current).__name__}",
            resolved_prefix=tuple(resolved),
        )

    return AccessResult(value=current, found=True, resolved_prefix=tuple(resolved))


def path_exists(tree: Any, path: Iterable[PathStep]) -> bool:
    # No undefined sentinel in Python: a key holding None exists.
    return get_value_from_path(tree, path).found


def get_value_or(tree: Any, path: Iterable[PathStep], default: Any) -> Any:
    result = get_value_from_path(tree, path)
    return result.value if result.found else default
