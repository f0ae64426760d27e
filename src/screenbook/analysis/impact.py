"""API change impact analysis.

Given an API identifier, find the screens that call it directly and the
screens from which users can navigate to those screens.
"""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from screenbook.context import DEFAULT_CONTEXT, RunContext
from screenbook.screens.registry import ScreenRegistry
from screenbook.screens.types import Screen


@dataclass(frozen=True)
class TransitiveDependency:
    """A screen that reaches a direct dependent; ``path`` runs from it to the target."""

    screen: Screen
    path: tuple[str, ...]


@dataclass(frozen=True)
class ImpactResult:
    api: str
    direct: list[Screen] = field(default_factory=list)
    transitive: list[TransitiveDependency] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.direct) + len(self.transitive)

    def to_dict(self) -> dict[str, Any]:
        return {
            "api": self.api,
            "direct": [s.to_dict() for s in self.direct],
            "transitive": [
                {"screen": t.screen.to_dict(), "path": list(t.path)} for t in self.transitive
            ],
            "totalCount": self.total_count,
        }


def matches_dependency(dependency: str, api_name: str) -> bool:
    """``InvoiceAPI`` matches ``InvoiceAPI`` and ``InvoiceAPI.getDetail``."""
    return dependency == api_name or dependency.startswith(f"{api_name}.")


def find_direct_dependents(screens: Sequence[Screen], api_name: str) -> list[Screen]:
    return [
        s for s in screens if any(matches_dependency(d, api_name) for d in s.depends_on or ())
    ]


def build_reverse_navigation_graph(screens: Sequence[Screen]) -> dict[str, list[str]]:
    """Map each screen id to the ids of screens whose ``next`` points at it."""
    reverse: dict[str, list[str]] = {}
    for screen in screens:
        for target in screen.next or ():
            sources = reverse.setdefault(target, [])
            if screen.id not in sources:
                sources.append(screen.id)
    return reverse


def analyze_impact(
    screens: ScreenRegistry | Sequence[Screen],
    api_name: str,
    max_depth: int = 3,
    context: RunContext = DEFAULT_CONTEXT,
) -> ImpactResult:
    """Find direct and transitive dependents of ``api_name``.

    Transitive dependents come from a breadth-first walk over reversed
    ``next`` edges, seeded with every direct dependent at once, going at most
    ``max_depth`` hops. The first path found to a screen is therefore a
    shortest one and is the only one reported. Direct dependents are never
    reported as transitive. Both lists follow the input order of ``screens``.

    Raises:
        ValueError: If ``max_depth`` is negative.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")

    registry = screens if isinstance(screens, ScreenRegistry) else ScreenRegistry(screens)
    screen_list = list(registry)

    direct = find_direct_dependents(screen_list, api_name)
    reverse = build_reverse_navigation_graph(screen_list)

    visited: set[str] = set()
    queue: deque[tuple[str, tuple[str, ...]]] = deque()
    for screen in direct:
        if screen.id not in visited:
            visited.add(screen.id)
            queue.append((screen.id, (screen.id,)))

    transitive: list[TransitiveDependency] = []
    while queue:
        node_id, path = queue.popleft()
        if len(path) - 1 >= max_depth:
            continue
        for source_id in reverse.get(node_id, ()):
            if source_id in visited:
                continue
            visited.add(source_id)
            source_path = (source_id, *path)
            transitive.append(
                TransitiveDependency(screen=registry.get(source_id), path=source_path)
            )
            queue.append((source_id, source_path))

    position: dict[str, int] = {}
    for index, screen in enumerate(screen_list):
        position.setdefault(screen.id, index)
    transitive.sort(key=lambda dep: position[dep.screen.id])

    context.debug(
        "Impact of %s: %d direct, %d transitive", api_name, len(direct), len(transitive)
    )
    return ImpactResult(api=api_name, direct=direct, transitive=transitive)


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def format_impact_text(result: ImpactResult) -> str:
    lines = [f"Impact Analysis: {result.api}", ""]

    if result.direct:
        lines.append(f"Direct ({len(result.direct)} screen{_plural(len(result.direct))}):")
        for screen in result.direct:
            owner = f" [{', '.join(screen.owner)}]" if screen.owner else ""
            lines.append(f"  - {screen.id}  {screen.route}{owner}")
        lines.append("")

    if result.transitive:
        count = len(result.transitive)
        lines.append(f"Transitive ({count} screen{_plural(count)}):")
        for dep in result.transitive:
            lines.append(f"  - {' -> '.join(dep.path)}")
        lines.append("")

    if result.total_count == 0:
        lines.append("No screens depend on this API.")
        lines.append("")
    else:
        lines.append(f"Total: {result.total_count} screen{_plural(result.total_count)} affected")

    return "\n".join(lines)


def format_impact_json(result: ImpactResult) -> str:
    """Summary JSON for tooling (ids and routes, not full screen records)."""
    payload = {
        "api": result.api,
        "summary": {
            "directCount": len(result.direct),
            "transitiveCount": len(result.transitive),
            "totalCount": result.total_count,
        },
        "direct": [
            {"id": s.id, "title": s.title, "route": s.route, "owner": list(s.owner or [])}
            for s in result.direct
        ],
        "transitive": [
            {
                "id": t.screen.id,
                "title": t.screen.title,
                "route": t.screen.route,
                "path": list(t.path),
            }
            for t in result.transitive
        ],
    }
    return json.dumps(payload, indent=2)
