"""
metadata/validator.py — JSON Schema lint for screen metadata files.

Checks ``screen.meta.yaml`` files against ``schemas/screen.schema.json``
before they are loaded, so misspelled keys (``dependOn``, ``entrypoints``)
show up as errors instead of being dropped silently.

Usage:
    from screenbook.metadata.validator import validate_meta_files

    for issue in validate_meta_files(Path("."), ["src/pages/home/screen.meta.yaml"]):
        print(issue)
"""
from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError
from referencing import Registry
from referencing.jsonschema import DRAFT202012

SCHEMA_DIR = Path(__file__).parent / "schemas"
SCHEMA_FILES = ("_defs.schema.json", "screen.schema.json")
SCREEN_SCHEMA_ID = "https://screenbook.dev/schemas/screen.schema.json"

_WRAPPER_KEY = "screen"


@dataclass(frozen=True)
class ValidationIssue:
    """One schema finding in one metadata file."""

    file: Path
    message: str
    path: str = ""  # dotted location, e.g. "screen.links[0].url"
    severity: str = "error"  # "error" | "warning"

    def __str__(self) -> str:
        where = f"{self.file}:{self.path}" if self.path else str(self.file)
        return f"{where}: {self.severity}: {self.message}"


@lru_cache(maxsize=1)
def load_registry() -> Registry:
    """Registry holding every bundled schema, keyed by its ``$id``."""
    resources = []
    for name in SCHEMA_FILES:
        contents: dict[str, Any] = json.loads((SCHEMA_DIR / name).read_text())
        resources.append((contents["$id"], DRAFT202012.create_resource(contents)))
    return Registry().with_resources(resources)


def _screen_validator(registry: Registry) -> Draft202012Validator:
    schema = registry.contents(SCREEN_SCHEMA_ID)
    return Draft202012Validator(schema, registry=registry)


def _location(prefix: str, error: ValidationError) -> str:
    """``$.next[1]`` -> ``screen.next[1]`` (or ``next[1]`` without a prefix)."""
    rest = error.json_path[1:]  # drop the leading "$"
    if prefix:
        return prefix + rest
    return rest.lstrip(".")


def _unwrap(raw: Any) -> tuple[str, Any, str | None]:
    """Split a document into (path prefix, screen mapping, problem)."""
    if not isinstance(raw, dict) or _WRAPPER_KEY not in raw:
        return "", raw, None
    extra = sorted(str(k) for k in raw if k != _WRAPPER_KEY)
    if extra:
        return "", None, f"Unexpected top-level key(s) next to 'screen': {', '.join(extra)}"
    return _WRAPPER_KEY, raw[_WRAPPER_KEY], None


def validate_meta_file(
    meta_path: Path,
    *,
    registry: Registry | None = None,
) -> list[ValidationIssue]:
    """
    Lint one meta file.

    The screen mapping may sit under a top-level ``screen`` key or make up
    the whole document.

    Args:
        meta_path: YAML (or JSON) file to check.
        registry:  Schema registry to reuse across files. Defaults to the
                   bundled schemas.

    Returns:
        Issues ordered by location; empty when the file is valid.
    """
    try:
        raw = yaml.safe_load(meta_path.read_text())
    except yaml.YAMLError as exc:
        return [ValidationIssue(meta_path, f"YAML parse error: {exc}")]
    except OSError as exc:
        return [ValidationIssue(meta_path, f"Cannot read file: {exc}")]

    if raw is None:
        return [ValidationIssue(meta_path, "File is empty")]

    prefix, document, problem = _unwrap(raw)
    if problem:
        return [ValidationIssue(meta_path, problem)]

    validator = _screen_validator(registry or load_registry())
    errors = sorted(validator.iter_errors(document), key=lambda e: e.json_path)
    return [ValidationIssue(meta_path, e.message, _location(prefix, e)) for e in errors]


def validate_meta_files(base_path: Path, rel_paths: Iterable[str]) -> list[ValidationIssue]:
    """Lint every listed file below *base_path*, flattening the issues."""
    registry = load_registry()
    issues: list[ValidationIssue] = []
    for rel in rel_paths:
        issues.extend(validate_meta_file(base_path / rel, registry=registry))
    return issues
