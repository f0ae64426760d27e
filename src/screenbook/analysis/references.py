"""Reference integrity checks for ``next`` and ``entryPoints``.

Dangling references are reported as values; nothing here raises for bad
graph data. Whether errors are fatal is decided by the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from screenbook.analysis.suggestions import find_best_match
from screenbook.context import DEFAULT_CONTEXT, RunContext
from screenbook.screens.registry import ScreenRegistry, as_screen_list
from screenbook.screens.types import Screen


@dataclass(frozen=True)
class ValidationError:
    """A ``next`` or ``entryPoints`` entry that names no known screen."""

    screen_id: str
    field: str  # "next" | "entryPoints"
    invalid_ref: str
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "screenId": self.screen_id,
            "field": self.field,
            "invalidRef": self.invalid_ref,
        }
        if self.suggestion is not None:
            d["suggestion"] = self.suggestion
        return d


@dataclass(frozen=True)
class ValidationResult:
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": [e.to_dict() for e in self.errors]}


def validate_references(
    screens: ScreenRegistry | Sequence[Screen],
    context: RunContext = DEFAULT_CONTEXT,
) -> ValidationResult:
    """Check that every ``next`` and ``entryPoints`` id exists.

    Errors are ordered by screen (input order), then ``next`` before
    ``entryPoints``, then declaration order.
    """
    screen_list = as_screen_list(screens)
    known = {s.id for s in screen_list}
    errors: list[ValidationError] = []

    for screen in screen_list:
        for field_name, refs in (("next", screen.next), ("entryPoints", screen.entry_points)):
            for ref in refs or ():
                if ref in known:
                    continue
                errors.append(
                    ValidationError(
                        screen_id=screen.id,
                        field=field_name,
                        invalid_ref=ref,
                        suggestion=find_best_match(ref, known),
                    )
                )

    context.debug("Validated %d screens, %d reference errors", len(screen_list), len(errors))
    return ValidationResult(errors=errors)


def format_validation_errors(errors: list[ValidationError]) -> str:
    lines: list[str] = []
    for error in errors:
        lines.append(f'  Screen "{error.screen_id}"')
        lines.append(
            f'    → {error.field} references non-existent screen "{error.invalid_ref}"'
        )
        if error.suggestion:
            lines.append(f'    Did you mean "{error.suggestion}"?')
        lines.append("")
    return "\n".join(lines)


def find_orphan_screens(screens: ScreenRegistry | Sequence[Screen]) -> list[Screen]:
    """Screens nobody can reach: no ``entryPoints`` and not in any ``next``."""
    screen_list = as_screen_list(screens)
    referenced = {ref for s in screen_list for ref in (s.next or ())}
    return [s for s in screen_list if not s.entry_points and s.id not in referenced]
