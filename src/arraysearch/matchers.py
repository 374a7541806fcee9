"""Built-in matchers deciding whether a value satisfies a search term."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict

from arraysearch.traversal.flatten import is_container
from arraysearch.utils.text import fold, to_text

LOGGER = logging.getLogger(__name__)

MatchFunction = Callable[[Any, Any], bool]

REGEX_FLAGS: Dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "a": re.ASCII,
}
# Accepted for familiarity, no effect on Python patterns.
IGNORED_FLAGS = frozenset("gu")


def default_matcher(value: Any, term: Any) -> bool:
    """Case-insensitive substring match on the textual form of both operands.

    >>> default_matcher("Hello World", "WORLD")
    True
    >>> default_matcher(123, "23")
    True
    """
    text = to_text(value)
    if text is None:
        return False
    needle = to_text(term)
    if needle is None:
        needle = str(term)
    return fold(needle) in fold(text)


def exact_matcher(value: Any, term: Any) -> bool:
    """Strict type-and-value equality; containers compare by identity."""
    if is_container(value) or is_container(term):
        return value is term
    if value is None or term is None:
        return value is term
    if isinstance(value, bool) or isinstance(term, bool):
        return type(value) is type(term) and value == term
    if isinstance(value, (int, float)) and isinstance(term, (int, float)):
        return value == term
    return type(value) is type(term) and value == term


def _parse_flags(flags: str) -> int:
    parsed = 0
    for letter in flags:
        if letter in IGNORED_FLAGS:
            continue
        try:
            parsed |= REGEX_FLAGS[letter]
        except KeyError:
            raise ValueError(f"Unsupported regular expression flag: {letter!r}") from None
    return parsed


def create_regexp_matcher(flags: str = "i") -> MatchFunction:
    """Build a matcher that treats the term as a regular expression.

    The returned matcher never raises: malformed patterns and unknown flag
    letters simply do not match.
    """

    def matcher(value: Any, pattern: Any) -> bool:
        text = to_text(value)
        if text is None:
            return False
        try:
            compiled = re.compile(str(pattern), _parse_flags(flags))
        except (re.error, ValueError) as exc:
            LOGGER.debug("Rejecting pattern %r with flags %r: %s", pattern, flags, exc)
            return False
        return compiled.search(text) is not None

    matcher.__name__ = f"regexp_matcher_{flags or 'noflags'}"
    return matcher


MATCHERS: Dict[str, Callable[[str], MatchFunction]] = {
    "default": lambda flags: default_matcher,
    "exact": lambda flags: exact_matcher,
    "regex": create_regexp_matcher,
}


def get_matcher(name: str, flags: str = "i") -> MatchFunction:
    """Look up a built-in matcher by name."""
    try:
        factory = MATCHERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown matcher {name!r}; choose one of: {', '.join(sorted(MATCHERS))}"
        ) from None
    return factory(flags)
