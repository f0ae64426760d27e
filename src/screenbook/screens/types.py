"""Screen metadata types and explicit parsing.

Screens arrive as plain mappings (YAML meta files or a ``screens.json``
catalog). ``parse_screen`` turns one mapping into either a ``Screen`` or a
``ScreenParseFailure`` describing every problem found, so loaders can report
all bad files in one pass instead of stopping at the first.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse


@dataclass(frozen=True)
class ScreenLink:
    """External resource link (Figma, Storybook, docs...)."""

    label: str
    url: str
    type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"label": self.label, "url": self.url}
        if self.type is not None:
            d["type"] = self.type
        return d


@dataclass(frozen=True)
class Screen:
    """A single screen in the catalog.

    ``next`` is the authoritative outbound edge set. ``entry_points`` is
    declared independently and is only cross-checked, never derived.
    """

    id: str
    title: str
    route: str
    owner: tuple[str, ...] | None = None
    tags: tuple[str, ...] | None = None
    depends_on: tuple[str, ...] | None = None
    entry_points: tuple[str, ...] | None = None
    next: tuple[str, ...] | None = None
    allow_cycles: bool = False
    description: str | None = None
    links: tuple[ScreenLink, ...] | None = None
    source_file: str | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the catalog JSON shape (camelCase, absent optionals omitted)."""
        d: dict[str, Any] = {"id": self.id, "title": self.title, "route": self.route}
        for key, value in (
            ("owner", self.owner),
            ("tags", self.tags),
            ("dependsOn", self.depends_on),
            ("entryPoints", self.entry_points),
            ("next", self.next),
        ):
            if value is not None:
                d[key] = list(value)
        if self.allow_cycles:
            d["allowCycles"] = True
        if self.description is not None:
            d["description"] = self.description
        if self.links is not None:
            d["links"] = [link.to_dict() for link in self.links]
        return d


@dataclass(frozen=True)
class FieldIssue:
    """One problem with one field of a screen mapping."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


@dataclass(frozen=True)
class ScreenParseFailure:
    """Parsing outcome for a mapping that is not a valid screen."""

    issues: tuple[FieldIssue, ...]
    source_file: str | None = None

    def __str__(self) -> str:
        where = f"{self.source_file}: " if self.source_file else ""
        return where + "; ".join(str(i) for i in self.issues)


# Optional string-list fields: JSON key -> Screen attribute
_LIST_FIELDS: dict[str, str] = {
    "owner": "owner",
    "tags": "tags",
    "dependsOn": "depends_on",
    "entryPoints": "entry_points",
    "next": "next",
}


def _is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


def _required_str(data: Mapping[str, Any], key: str, issues: list[FieldIssue]) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        issues.append(FieldIssue(key, "required string"))
        return ""
    if not value:
        issues.append(FieldIssue(key, "must not be empty"))
    return value


def _string_list(
    data: Mapping[str, Any], key: str, issues: list[FieldIssue]
) -> tuple[str, ...] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        issues.append(FieldIssue(key, "expected a list of strings"))
        return None
    for i, item in enumerate(value):
        if not isinstance(item, str):
            issues.append(FieldIssue(f"{key}[{i}]", "expected a string"))
    return tuple(item for item in value if isinstance(item, str))


def _links(data: Mapping[str, Any], issues: list[FieldIssue]) -> tuple[ScreenLink, ...] | None:
    value = data.get("links")
    if value is None:
        return None
    if not isinstance(value, list):
        issues.append(FieldIssue("links", "expected a list of links"))
        return None

    links: list[ScreenLink] = []
    for i, item in enumerate(value):
        path = f"links[{i}]"
        if not isinstance(item, Mapping):
            issues.append(FieldIssue(path, "expected an object with label and url"))
            continue
        label = item.get("label")
        url = item.get("url")
        link_type = item.get("type")
        ok = True
        if not isinstance(label, str):
            issues.append(FieldIssue(f"{path}.label", "required string"))
            ok = False
        if not isinstance(url, str) or not _is_valid_url(url):
            issues.append(FieldIssue(f"{path}.url", "must be an absolute URL"))
            ok = False
        if link_type is not None and not isinstance(link_type, str):
            issues.append(FieldIssue(f"{path}.type", "expected a string"))
            ok = False
        if ok:
            links.append(ScreenLink(label=label, url=url, type=link_type))
    return tuple(links)


def parse_screen(
    data: Mapping[str, Any], source_file: str | None = None
) -> Screen | ScreenParseFailure:
    """Build a ``Screen`` from a catalog/meta mapping.

    Returns a ``ScreenParseFailure`` listing every invalid field instead of
    raising. Only a non-mapping ``data`` argument raises (``TypeError``).
    """
    if not isinstance(data, Mapping):
        raise TypeError(f"screen data must be a mapping, got {type(data).__name__}")

    issues: list[FieldIssue] = []
    screen_id = _required_str(data, "id", issues)
    title = _required_str(data, "title", issues)
    route = _required_str(data, "route", issues)

    lists = {attr: _string_list(data, key, issues) for key, attr in _LIST_FIELDS.items()}

    allow_cycles = data.get("allowCycles", False)
    if not isinstance(allow_cycles, bool):
        issues.append(FieldIssue("allowCycles", "expected a boolean"))
        allow_cycles = False

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        issues.append(FieldIssue("description", "expected a string"))
        description = None

    links = _links(data, issues)

    if issues:
        return ScreenParseFailure(issues=tuple(issues), source_file=source_file)

    return Screen(
        id=screen_id,
        title=title,
        route=route,
        allow_cycles=allow_cycles,
        description=description,
        links=links,
        source_file=source_file,
        **lists,
    )
