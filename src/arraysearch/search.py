"""Filter collections of records against a search term."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Sequence, TypeVar

from arraysearch.config import SearchOptions
from arraysearch.models import PathPlan
from arraysearch.traversal.flatten import flatten_item, is_container
from arraysearch.traversal.paths import PathCache, parse_path, resolve_path

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _validate_collection(collection: Any) -> None:
    if isinstance(collection, (str, bytes, bytearray, Mapping)) or not isinstance(
        collection, Sequence
    ):
        raise TypeError(
            f"Expected a sequence of items to search, got {type(collection).__name__}"
        )


def chunk(collection: Sequence[T], chunk_count: int) -> List[Sequence[T]]:
    """Split a sequence into at most ``chunk_count`` contiguous slices.

    Every slice but the last has ``ceil(len / chunk_count)`` items.
    """
    if not collection:
        return []
    size = math.ceil(len(collection) / chunk_count)
    return [collection[start : start + size] for start in range(0, len(collection), size)]


def match_item(
    item: Any,
    term: Any,
    options: SearchOptions,
    plans: Optional[Sequence[PathPlan]] = None,
) -> bool:
    """Decide whether a single item matches ``term``."""
    matcher = options.custom_match
    if not is_container(item):
        return matcher(item, term)

    if not options.keys:
        return any(matcher(value, term) for value in flatten_item(item, options.max_depth))

    if plans is None:
        plans = [parse_path(path) for path in options.keys]
    for plan in plans:
        values = resolve_path(item, plan, options.max_depth)
        if any(matcher(value, term) for value in values):
            return True
    return False


class Searcher:
    """Search entry point owning its options and path cache."""

    def __init__(self, options: Optional[SearchOptions] = None) -> None:
        self.options = options if options is not None else SearchOptions()
        if self.options.path_cache is not None:
            self.path_cache = self.options.path_cache
        else:
            self.path_cache = PathCache()

    def _plans(self) -> Optional[List[PathPlan]]:
        keys = self.options.keys
        if not keys:
            return None
        if self.options.enable_path_cache:
            return [self.path_cache.get(path) for path in keys]
        return [parse_path(path) for path in keys]

    def match(self, item: Any, term: Any) -> bool:
        return match_item(item, term, self.options, self._plans())

    def _filter(
        self, items: Sequence[T], term: Any, plans: Optional[List[PathPlan]]
    ) -> List[T]:
        return [item for item in items if match_item(item, term, self.options, plans)]

    def search(self, collection: Sequence[T], term: Any) -> List[T]:
        """Return the items matching ``term`` in their original order."""
        _validate_collection(collection)
        plans = self._plans()
        if not self.options.use_parallel(len(collection)):
            return self._filter(collection, term, plans)

        chunks = chunk(collection, self.options.chunk_count)
        LOGGER.debug("Filtering %d items in %d chunks", len(collection), len(chunks))
        with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
            results = executor.map(lambda part: self._filter(part, term, plans), chunks)
            return [item for part in results for item in part]

    async def search_async(self, collection: Sequence[T], term: Any) -> List[T]:
        """Awaitable variant of :meth:`search`.

        Chunks are filtered in worker threads only in parallel mode; otherwise
        the serial result is returned directly.
        """
        _validate_collection(collection)
        plans = self._plans()
        if not self.options.use_parallel(len(collection)):
            return self._filter(collection, term, plans)

        chunks = chunk(collection, self.options.chunk_count)
        LOGGER.debug("Filtering %d items in %d async chunks", len(collection), len(chunks))
        results = await asyncio.gather(
            *(asyncio.to_thread(self._filter, part, term, plans) for part in chunks)
        )
        return [item for part in results for item in part]

    def clear_cache(self) -> None:
        self.path_cache.clear()


def search(
    collection: Sequence[T], term: Any, options: Optional[SearchOptions] = None
) -> List[T]:
    """Filter ``collection`` synchronously.

    Each call uses a fresh :class:`Searcher`, so parsed paths are cached for
    this call only. Pass ``options.path_cache`` or keep a :class:`Searcher`
    to reuse plans across calls.
    """
    return Searcher(options).search(collection, term)


async def search_async(
    collection: Sequence[T], term: Any, options: Optional[SearchOptions] = None
) -> List[T]:
    """Filter ``collection``, running chunks concurrently in parallel mode.

    Like :func:`search`, plans are only cached across calls through
    ``options.path_cache``.
    """
    return await Searcher(options).search_async(collection, term)
