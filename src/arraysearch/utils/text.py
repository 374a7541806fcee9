"""Text helpers shared by the matchers."""

from __future__ import annotations

from typing import Any

from arraysearch.traversal.flatten import is_container


def to_text(value: Any) -> str | None:
    """Return the textual form used for matching, or None for containers.

    ``None`` renders as ``"null"`` and booleans as lowercase words so that
    searching for ``"true"`` or ``"null"`` behaves the way users type it.
    Integral floats drop the ``.0``, so ``1.0`` loaded from JSON reads ``"1"``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if is_container(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fold(text: str) -> str:
    """Lower-case text for case-insensitive comparison."""
    return text.lower()
