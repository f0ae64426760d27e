"""Circular navigation detection over the ``next`` graph.

Three-colour depth-first search. Every back edge ``u -> v`` (``v`` still on
the current path) closes a cycle ``[v, ..., u, v]`` rebuilt from the DFS
parent links. The traversal keeps its own stack of ``(node, next-neighbour
index)`` frames, so very deep catalogs cannot hit the interpreter's recursion
limit, while the visiting order stays that of the plain recursive version:
roots in input order, neighbours in declaration order.

Only cycles closed by a back edge are listed. With ``a -> [b, c]``,
``b -> c`` and ``c -> a`` the result is ``a -> b -> c -> a``; ``a -> c -> a``
reuses the finished node ``c`` and is not reported on its own. A graph with
any cycle always yields at least one.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from screenbook.context import DEFAULT_CONTEXT, RunContext
from screenbook.screens.registry import ScreenRegistry, as_screen_list
from screenbook.screens.types import Screen


class Color(Enum):
    WHITE = 0  # unvisited
    GRAY = 1  # on the current path
    BLACK = 2  # finished


@dataclass(frozen=True)
class Cycle:
    """Screen ids forming a loop; the first id is repeated at the end."""

    ids: tuple[str, ...]
    allowed: bool = False

    @property
    def members(self) -> frozenset[str]:
        return frozenset(self.ids[:-1])

    def __str__(self) -> str:
        return " → ".join(self.ids)


@dataclass(frozen=True)
class CycleResult:
    cycles: list[Cycle] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def disallowed_cycles(self) -> list[Cycle]:
        return [c for c in self.cycles if not c.allowed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasCycles": self.has_cycles,
            "cycles": [list(c.ids) for c in self.cycles],
            "disallowedCycles": [list(c.ids) for c in self.disallowed_cycles],
        }


def _reconstruct(parent: dict[str, str | None], start: str, end: str) -> tuple[str, ...]:
    """Tree path ``start .. end`` closed back to ``start``."""
    path = [end]
    current = parent.get(end)
    while path[-1] != start and current is not None:
        path.append(current)
        current = parent.get(current)
    path.reverse()
    path.append(start)
    return tuple(path)


def detect_cycles(
    screens: ScreenRegistry | Sequence[Screen],
    *,
    allow_all: bool = False,
    allowed_ids: Collection[str] | None = None,
    context: RunContext = DEFAULT_CONTEXT,
) -> CycleResult:
    """Find circular navigation in the ``next`` graph.

    Edges to unknown ids are skipped. A cycle is allowed when ``allow_all``
    is set, or when any participating screen has ``allow_cycles`` or appears
    in ``allowed_ids``; every other cycle is disallowed.
    """
    registry = screens if isinstance(screens, ScreenRegistry) else ScreenRegistry(screens)
    allowed_ids = frozenset(allowed_ids or ())

    color: dict[str, Color] = {s.id: Color.WHITE for s in registry}
    parent: dict[str, str | None] = {}
    cycles: list[Cycle] = []
    seen: set[frozenset[str]] = set()

    def _neighbours(node_id: str) -> tuple[str, ...]:
        node = registry.get(node_id)
        return (node.next or ()) if node else ()

    def _record(from_id: str, to_id: str) -> None:
        ids = _reconstruct(parent, to_id, from_id)
        members = frozenset(ids[:-1])
        if members in seen:
            return
        seen.add(members)
        cycles.append(Cycle(ids=ids, allowed=_is_allowed(members)))

    def _is_allowed(members: frozenset[str]) -> bool:
        if allow_all or members & allowed_ids:
            return True
        return any(
            (screen := registry.get(sid)) is not None and screen.allow_cycles
            for sid in members
        )

    for root in registry:
        if color[root.id] is not Color.WHITE:
            continue
        color[root.id] = Color.GRAY
        parent[root.id] = None
        stack: list[tuple[str, int]] = [(root.id, 0)]

        while stack:
            node_id, index = stack[-1]
            neighbours = _neighbours(node_id)
            if index >= len(neighbours):
                color[node_id] = Color.BLACK
                stack.pop()
                continue
            stack[-1] = (node_id, index + 1)

            neighbour = neighbours[index]
            state = color.get(neighbour)
            if state is Color.GRAY:
                _record(node_id, neighbour)
            elif state is Color.WHITE:
                color[neighbour] = Color.GRAY
                parent[neighbour] = node_id
                stack.append((neighbour, 0))

    context.debug("Cycle detection found %d cycle(s)", len(cycles))
    return CycleResult(cycles=cycles)


def format_cycle_warnings(cycles: list[Cycle]) -> str:
    lines = []
    for i, cycle in enumerate(cycles, start=1):
        suffix = " (allowed)" if cycle.allowed else ""
        lines.append(f"  Cycle {i}{suffix}: {cycle}")
    return "\n".join(lines)


def cycle_summary(result: CycleResult) -> str:
    if not result.has_cycles:
        return "No circular navigation detected"

    total = len(result.cycles)
    disallowed = len(result.disallowed_cycles)
    allowed = total - disallowed
    noun = f"{total} circular navigation{'s' if total > 1 else ''} detected"

    if disallowed == 0:
        return f"{noun} (all allowed)"
    if allowed == 0:
        return noun
    return f"{noun} ({disallowed} not allowed, {allowed} allowed)"
