"""Search configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from arraysearch.matchers import MatchFunction, default_matcher
from arraysearch.traversal.paths import PathCache

DEFAULT_MAX_DEPTH = 10
DEFAULT_PARALLEL_THRESHOLD = 1000
DEFAULT_CHUNK_COUNT = 4


def _normalize_keys(keys: Optional[Sequence[str]]) -> Optional[Tuple[str, ...]]:
    if keys is None:
        return None
    if isinstance(keys, str):
        raise TypeError("keys must be a sequence of paths, not a single string")
    normalized = tuple(keys)
    for key in normalized:
        if not isinstance(key, str):
            raise TypeError(f"Search paths must be strings, got {type(key).__name__}")
        if not key.strip():
            raise ValueError("Search paths must not be empty")
    return normalized or None


@dataclass(slots=True, frozen=True)
class SearchOptions:
    keys: Optional[Tuple[str, ...]] = None
    custom_match: MatchFunction = default_matcher
    max_depth: int = DEFAULT_MAX_DEPTH
    enable_path_cache: bool = True
    parallel: bool = False
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD
    chunk_count: int = DEFAULT_CHUNK_COUNT
    path_cache: Optional[PathCache] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", _normalize_keys(self.keys))
        if not callable(self.custom_match):
            raise TypeError("custom_match must be callable")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.parallel_threshold < 0:
            raise ValueError(
                f"parallel_threshold must be >= 0, got {self.parallel_threshold}"
            )
        if self.chunk_count < 1:
            raise ValueError(f"chunk_count must be >= 1, got {self.chunk_count}")

    def use_parallel(self, size: int) -> bool:
        return self.parallel and size > self.parallel_threshold
