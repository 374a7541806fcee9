"""Core arraysearch data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

EXPAND_MARKER = "[]"


@dataclass(slots=True, frozen=True)
class Segment:
    """One step of a path: a key, optionally expanded element-wise."""

    key: str
    expand: bool = False

    def __str__(self) -> str:
        return f"{self.key}{EXPAND_MARKER}" if self.expand else self.key


@dataclass(slots=True, frozen=True)
class PathPlan:
    """Parsed traversal plan for a dot-delimited path."""

    path: str
    segments: Tuple[Segment, ...]
