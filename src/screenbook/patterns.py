"""Glob matching for relative POSIX paths.

``**/`` matches zero or more directories and ``*`` / ``?`` never cross a
``/``, so ``**/node_modules/**`` also matches a top-level ``node_modules``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(out) + r"\Z")


def matches(path: str, pattern: str) -> bool:
    return glob_to_regex(pattern).match(path) is not None


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(matches(path, p) for p in patterns)


def find_files(base_path: Path, pattern: str, ignore: Iterable[str] = ()) -> list[str]:
    """List files under ``base_path`` matching ``pattern``, as sorted relative POSIX paths."""
    ignore = tuple(ignore)
    found = set()
    for path in base_path.glob(pattern):
        if not path.is_file():
            continue
        rel = path.relative_to(base_path).as_posix()
        if not matches_any(rel, ignore):
            found.add(rel)
    return sorted(found)
