"""Utility helpers for loading records from disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, List

JSON_SUFFIXES = {".json"}
JSON_LINES_SUFFIXES = {".jsonl", ".ndjson"}


def iter_json_lines(path: Path) -> Iterator[Any]:
    """Yield one decoded value per non-blank line."""
    with path.open("r", encoding="utf-8") as handle:
        for number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{number}: invalid JSON ({exc.msg})") from exc


def load_records(path: Path) -> List[Any]:
    """Load a list of records from a JSON array or a JSON lines file."""
    if not path.is_file():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in JSON_LINES_SUFFIXES:
        return list(iter_json_lines(path))
    if suffix not in JSON_SUFFIXES:
        raise ValueError(f"Unsupported data file type: {path.suffix or '(none)'}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path}: invalid JSON ({exc.msg})") from exc
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of records")
    return data
