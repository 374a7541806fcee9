"""Bounded-depth flattening of nested values."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Iterator

SEQUENCE_TYPES = (list, tuple)
COLLECTION_TYPES = (list, tuple, set, frozenset)


def is_array(value: Any) -> bool:
    """Arrays are the values expanded by ``[]`` path segments."""
    return isinstance(value, SEQUENCE_TYPES)


def is_container(value: Any) -> bool:
    """Return True for values whose children are searched."""
    if isinstance(value, (Mapping, *COLLECTION_TYPES)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def iter_children(value: Any) -> Iterator[Any]:
    """Yield the direct child values of a container."""
    if isinstance(value, Mapping):
        yield from value.values()
    elif isinstance(value, COLLECTION_TYPES):
        yield from value
    elif is_container(value):
        for field in dataclasses.fields(value):
            yield getattr(value, field.name)


def iter_leaves(value: Any, depth: int, _ancestors: set[int] | None = None) -> Iterator[Any]:
    """Yield leaf values nested under ``value``.

    Recursion stops once ``depth`` reaches zero; the value is then yielded
    as-is even when it is a container. A container already on the current
    traversal path yields nothing.
    """
    if depth <= 0 or not is_container(value):
        yield value
        return

    ancestors = _ancestors if _ancestors is not None else set()
    marker = id(value)
    if marker in ancestors:
        return
    ancestors.add(marker)
    try:
        for child in iter_children(value):
            yield from iter_leaves(child, depth - 1, ancestors)
    finally:
        ancestors.discard(marker)


def flatten_item(item: Any, depth: int) -> Iterator[Any]:
    """Yield every leaf reachable from the item's own values within ``depth``."""
    ancestors = {id(item)}
    for child in iter_children(item):
        yield from iter_leaves(child, depth, ancestors)
