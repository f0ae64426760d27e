"""Mermaid flowchart of the navigation graph."""

from __future__ import annotations

from collections.abc import Sequence

from screenbook.screens.types import Screen


def sanitize_id(screen_id: str) -> str:
    return screen_id.replace(".", "_")


def generate_mermaid_graph(screens: Sequence[Screen]) -> str:
    lines = ["flowchart TD"]

    for screen in screens:
        label = screen.title.replace('"', "'")
        lines.append(f'    {sanitize_id(screen.id)}["{label}"]')

    lines.append("")

    for screen in screens:
        for next_id in screen.next or ():
            lines.append(f"    {sanitize_id(screen.id)} --> {sanitize_id(next_id)}")

    return "\n".join(lines)
