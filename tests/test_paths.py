"""Tests for path parsing, resolution and caching."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from arraysearch.models import PathPlan, Segment
from arraysearch.traversal.paths import (
    MISSING,
    PathCache,
    get_child,
    parse_path,
    resolve_path,
)


@dataclass
class Customer:
    name: str
    tags: list


class TestParsePath:
    """Test parse_path function."""

    def test_plain_path(self) -> None:
        """Should split on dots."""
        plan = parse_path("user.name")
        assert plan == PathPlan("user.name", (Segment("user"), Segment("name")))

    def test_expansion_marker(self) -> None:
        """Should strip the marker and flag the segment."""
        plan = parse_path("orders[].items[].name")
        assert plan.segments == (
            Segment("orders", expand=True),
            Segment("items", expand=True),
            Segment("name"),
        )

    def test_whitespace_and_empty_segments(self) -> None:
        """Should ignore blank segments and surrounding spaces."""
        assert parse_path(" a .. b ").segments == (Segment("a"), Segment("b"))


class TestGetChild:
    """Test get_child function."""

    def test_mapping(self) -> None:
        assert get_child({"a": 1}, "a") == 1
        assert get_child({"a": 1}, "b") is MISSING

    def test_none_value_is_not_missing(self) -> None:
        """A stored None is a real value."""
        assert get_child({"a": None}, "a") is None

    def test_array_index(self) -> None:
        assert get_child(["x", "y"], "1") == "y"
        assert get_child(["x"], "5") is MISSING
        assert get_child(["x"], "name") is MISSING

    def test_dataclass(self) -> None:
        customer = Customer("ann", [])
        assert get_child(customer, "name") == "ann"
        assert get_child(customer, "missing") is MISSING

    def test_leaf(self) -> None:
        assert get_child("text", "upper") is MISSING
        assert get_child(None, "a") is MISSING


class TestResolvePath:
    """Test resolve_path function."""

    def test_simple_path(self) -> None:
        """Should follow nested mappings."""
        record = {"category": {"main": "electronics", "sub": "phones"}}
        assert resolve_path(record, "category.sub", 10) == ["phones"]

    def test_expansion(self) -> None:
        """Should expand arrays marked with []."""
        record = {"orders": [{"item": "a"}, {"item": "b"}]}
        assert resolve_path(record, "orders[].item", 10) == ["a", "b"]

    def test_nested_expansion(self) -> None:
        """Should expand several levels of arrays."""
        record = {
            "orders": [
                {"items": [{"name": "pen"}, {"name": "ink"}]},
                {"items": [{"name": "pad"}]},
            ]
        }
        assert resolve_path(record, "orders[].items[].name", 10) == ["pen", "ink", "pad"]

    def test_expansion_of_array_root(self) -> None:
        """An array frontier maps the key over its elements."""
        rows = [{"tags": ["a", "b"]}, {"tags": ["c"]}, {"other": 1}]
        assert resolve_path(rows, "tags[]", 10) == ["a", "b", "c"]

    def test_expansion_of_non_array(self) -> None:
        """Expanding a non-array value resolves to nothing."""
        assert resolve_path({"orders": "none"}, "orders[].item", 10) == []

    def test_trailing_array_is_flattened(self) -> None:
        """Arrays at the end of a path yield their elements."""
        record = {"specs": {"features": ["Face ID", "iOS 15"]}}
        assert resolve_path(record, "specs.features", 10) == ["Face ID", "iOS 15"]

    def test_nested_arrays_respect_depth(self) -> None:
        """Nested arrays flatten only as deep as the budget allows."""
        record = {"grid": [[1, [2, [3]]]]}
        assert resolve_path(record, "grid", 10) == [1, 2, 3]
        assert resolve_path(record, "grid", 0) == [1, [2, [3]]]

    def test_missing_path(self) -> None:
        """Unknown paths resolve to an empty list."""
        assert resolve_path({"a": 1}, "invalid.path", 10) == []
        assert resolve_path({"a": 1}, "a.b.c", 10) == []

    def test_none_values_are_kept(self) -> None:
        """Explicit None values are returned."""
        assert resolve_path({"a": None}, "a", 10) == [None]

    def test_array_index_segment(self) -> None:
        """Digit segments index into an array root."""
        assert resolve_path([{"phone": "1"}, {"phone": "2"}], "1.phone", 10) == ["2"]

    def test_dataclass_record(self) -> None:
        """Dataclass fields are reachable by name."""
        assert resolve_path(Customer("ann", ["vip"]), "tags", 10) == ["vip"]

    def test_accepts_plan(self) -> None:
        """Should accept a parsed plan."""
        assert resolve_path({"a": {"b": 1}}, parse_path("a.b"), 10) == [1]

    def test_traversal_errors_are_swallowed(self) -> None:
        """Errors raised by exotic mappings resolve to nothing."""

        class Exploding(dict):
            def get(self, key, default=None):
                raise RuntimeError("boom")

        assert resolve_path(Exploding(a=1), "a", 10) == []

    def test_trailing_expansion_counts_against_depth(self) -> None:
        """A trailing [] spreads one level of the depth budget."""
        assert resolve_path({"t": [[1]]}, "t[]", 0) == [[1]]
        assert resolve_path([{"t": [[1]]}], "t[]", 0) == [[1]]
        assert resolve_path({"t": [[1]]}, "t[]", 1) == [1]
        assert resolve_path({"t": [[1]]}, "t", 0) == [1]

    def test_logs_failing_segment(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should name the segment where resolution stopped."""
        with caplog.at_level(logging.DEBUG, logger="arraysearch.traversal.paths"):
            assert resolve_path({"a": {"c": 1}}, "a.b[]", 10) == []
        assert "at b[]" in caplog.text

    def test_self_referencing_array(self) -> None:
        """An array that contains itself should terminate."""
        items: list = ["x"]
        items.append(items)
        assert resolve_path({"items": [items]}, "items", 10) == ["x"]


class TestPathCache:
    """Test PathCache class."""

    def test_populates_lazily(self) -> None:
        """Should parse on first use and reuse afterwards."""
        cache = PathCache()
        assert "a.b" not in cache
        first = cache.get("a.b")
        second = cache.get("a.b")
        assert first is second
        assert "a.b" in cache
        assert len(cache) == 1
        assert (cache.hits, cache.misses) == (1, 1)

    def test_clear(self) -> None:
        """Should drop all entries and counters."""
        cache = PathCache()
        cache.get("a")
        cache.get("b")
        cache.clear()
        assert len(cache) == 0
        assert (cache.hits, cache.misses) == (0, 0)

    def test_cached_plan_resolves_like_fresh_parse(self) -> None:
        """Cached plans should give the same values as fresh ones."""
        cache = PathCache()
        record = {"orders": [{"item": "a"}, {"item": "b"}]}
        cache.get("orders[].item")
        assert resolve_path(record, cache.get("orders[].item"), 10) == resolve_path(
            record, "orders[].item", 10
        )
