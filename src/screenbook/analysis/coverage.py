"""Screen metadata adoption coverage.

A route file counts as covered when some screen's meta file lives in the same
directory (colocation). Without a route listing, coverage falls back to
counting the screens themselves.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any

from screenbook.patterns import matches_any
from screenbook.screens.registry import ScreenRegistry, as_screen_list
from screenbook.screens.types import Screen

UNASSIGNED_OWNER = "unassigned"


@dataclass(frozen=True)
class MissingRoute:
    route: str
    suggested_path: str

    def to_dict(self) -> dict[str, str]:
        return {"route": self.route, "suggestedPath": self.suggested_path}


@dataclass
class OwnerCoverage:
    count: int = 0
    screens: list[str] = field(default_factory=list)


@dataclass
class CoverageData:
    total: int
    covered: int
    percentage: int
    missing: list[MissingRoute] = field(default_factory=list)
    by_owner: dict[str, OwnerCoverage] = field(default_factory=dict)
    by_tag: dict[str, int] = field(default_factory=dict)
    timestamp: str = ""

    def meets(self, minimum: int) -> bool:
        return self.percentage >= minimum

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "covered": self.covered,
            "percentage": self.percentage,
            "missing": [m.to_dict() for m in self.missing],
            "byOwner": {
                owner: {"count": oc.count, "screens": list(oc.screens)}
                for owner, oc in self.by_owner.items()
            },
            "byTag": dict(self.by_tag),
            "timestamp": self.timestamp,
        }


def coverage_percentage(covered: int, total: int) -> int:
    """Percentage rounded half up; an empty catalog counts as fully covered."""
    if total == 0:
        return 100
    return math.floor(covered / total * 100 + 0.5)


def _directory(path: str) -> str:
    return PurePosixPath(path).parent.as_posix()


def filter_route_files(route_files: Iterable[str], include_patterns: Iterable[str]) -> list[str]:
    """Keep route files matching any include pattern (progressive adoption).

    An empty pattern list keeps everything.
    """
    patterns = tuple(include_patterns)
    if not patterns:
        return list(route_files)
    return [f for f in route_files if matches_any(f, patterns)]


def calculate_coverage(
    screens: ScreenRegistry | Sequence[Screen],
    route_files: Sequence[str] = (),
    *,
    meta_filename: str = "screen.meta.yaml",
    now: datetime | None = None,
) -> CoverageData:
    """Compute coverage of ``route_files`` by the screens' meta files.

    Args:
        screens: Loaded screens; ``source_file`` locates each meta file.
        route_files: Route file paths, relative and POSIX-style like ``source_file``.
        meta_filename: File name used for ``suggested_path`` of missing routes.
        now: Timestamp override, mainly for tests.
    """
    screen_list = as_screen_list(screens)
    meta_dirs = {_directory(s.source_file) for s in screen_list if s.source_file}

    missing: list[MissingRoute] = []
    if route_files:
        covered = 0
        for route in route_files:
            route_dir = _directory(route)
            if route_dir in meta_dirs:
                covered += 1
            else:
                missing.append(
                    MissingRoute(
                        route=route,
                        suggested_path=(PurePosixPath(route_dir) / meta_filename).as_posix(),
                    )
                )
        total = len(route_files)
    else:
        total = covered = len(screen_list)

    by_owner: dict[str, OwnerCoverage] = {}
    by_tag: dict[str, int] = {}
    for screen in screen_list:
        owners = screen.owner if screen.owner is not None else (UNASSIGNED_OWNER,)
        for owner in owners:
            entry = by_owner.setdefault(owner, OwnerCoverage())
            entry.count += 1
            entry.screens.append(screen.id)
        for tag in screen.tags or ():
            by_tag[tag] = by_tag.get(tag, 0) + 1

    return CoverageData(
        total=total,
        covered=covered,
        percentage=coverage_percentage(covered, total),
        missing=missing,
        by_owner=by_owner,
        by_tag=by_tag,
        timestamp=(now or datetime.now(timezone.utc)).isoformat(),
    )
