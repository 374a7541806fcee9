"""Dot-path resolution with array expansion, plus the plan cache."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List

from arraysearch.models import EXPAND_MARKER, PathPlan, Segment
from arraysearch.traversal.flatten import is_array

LOGGER = logging.getLogger(__name__)


class _Missing:
    """Sentinel for a child that does not exist."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def parse_path(path: str) -> PathPlan:
    """Split a dot-delimited path into segments.

    Whitespace around segments is ignored and empty segments are dropped, so
    ``"a..b"`` and ``" a . b "`` both resolve like ``"a.b"``.
    """
    segments: List[Segment] = []
    for raw in path.split("."):
        part = raw.strip()
        if not part:
            continue
        if part.endswith(EXPAND_MARKER):
            segments.append(Segment(part[: -len(EXPAND_MARKER)], expand=True))
        else:
            segments.append(Segment(part))
    return PathPlan(path=path, segments=tuple(segments))


class PathCache:
    """Caller-owned cache of parsed path plans.

    Entries are never evicted; call :meth:`clear` to reset. Concurrent
    writers store identical plans, so no locking is needed.
    """

    def __init__(self) -> None:
        self._plans: Dict[str, PathPlan] = {}
        self.hits = 0
        self.misses = 0

    def get(self, path: str) -> PathPlan:
        plan = self._plans.get(path)
        if plan is not None:
            self.hits += 1
            return plan
        self.misses += 1
        LOGGER.debug("Path cache miss for %r", path)
        plan = parse_path(path)
        self._plans[path] = plan
        return plan

    def clear(self) -> None:
        self._plans.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, path: object) -> bool:
        return path in self._plans

    def __len__(self) -> int:
        return len(self._plans)


def get_child(value: Any, key: str) -> Any:
    """Return ``value[key]`` for mappings, arrays and dataclasses, else MISSING."""
    if isinstance(value, Mapping):
        return value.get(key, MISSING)
    if is_array(value):
        if key.isdigit() and int(key) < len(value):
            return value[int(key)]
        return MISSING
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        names = {field.name for field in dataclasses.fields(value)}
        return getattr(value, key) if key in names else MISSING
    return MISSING


def _spread(value: Any) -> Iterator[Any]:
    """Yield array elements (one level) or the value itself."""
    if is_array(value):
        yield from value
    else:
        yield value


def _flatten_array(value: Any, depth: int, ancestors: set[int]) -> Iterator[Any]:
    if depth < 0 or not is_array(value):
        yield value
        return
    marker = id(value)
    if marker in ancestors:
        return
    ancestors.add(marker)
    try:
        for element in value:
            if is_array(element) and depth > 0:
                yield from _flatten_array(element, depth - 1, ancestors)
            else:
                yield element
    finally:
        ancestors.discard(marker)


def _step(frontier: List[Any], segment: Segment) -> List[Any]:
    following: List[Any] = []
    for current in frontier:
        if segment.expand:
            if is_array(current):
                for element in current:
                    following.extend(_spread(get_child(element, segment.key)))
            else:
                child = get_child(current, segment.key)
                if is_array(child):
                    following.extend(child)
        else:
            following.extend(_spread(get_child(current, segment.key)))
    return [value for value in following if value is not MISSING]


def resolve_path(root: Any, plan: PathPlan | str, max_depth: int) -> List[Any]:
    """Return every value reachable from ``root`` along ``plan``.

    Arrays met on plain segments are flattened one level; arrays left at the
    end are flattened up to ``max_depth`` levels, counting the level already
    spread by a trailing ``[]`` segment. Traversal errors resolve to an empty
    list.
    """
    if isinstance(plan, str):
        plan = parse_path(plan)

    try:
        frontier: List[Any] = [root]
        for segment in plan.segments:
            frontier = _step(frontier, segment)
            if not frontier:
                LOGGER.debug("Path %r resolved to nothing at %s", plan.path, segment)
                return []

        budget = max_depth
        if plan.segments and plan.segments[-1].expand:
            budget -= 1
        results: List[Any] = []
        for value in frontier:
            results.extend(_flatten_array(value, budget, set()))
    except Exception as exc:
        LOGGER.debug("Failed to resolve %r: %s", plan.path, exc)
        return []

    return [value for value in results if value is not MISSING]
