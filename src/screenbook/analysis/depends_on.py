"""Validate ``dependsOn`` entries against OpenAPI documents.

Entries may be operationIds (``getInvoiceById``) or HTTP endpoints
(``GET /invoices/{id}``). Documents are local YAML or JSON files.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from screenbook.analysis.suggestions import find_best_match
from screenbook.screens.registry import ScreenRegistry, as_screen_list
from screenbook.screens.types import Screen

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head")

_HTTP_PREFIX = re.compile(r"^(GET|POST|PUT|DELETE|PATCH|OPTIONS|HEAD)\s+", re.IGNORECASE)

# API names vary more than screen ids, so suggestions are more tolerant
API_SUGGESTION_RATIO = 0.5


@dataclass(frozen=True)
class ApiCatalog:
    """Identifiers declared by one OpenAPI document."""

    source: str
    operation_ids: frozenset[str] = frozenset()
    http_endpoints: frozenset[str] = frozenset()

    @property
    def lowercase_index(self) -> frozenset[str]:
        return frozenset(i.lower() for i in self.operation_ids | self.http_endpoints)


@dataclass(frozen=True)
class OpenApiLoadError:
    source: str
    message: str


@dataclass
class OpenApiLoadResult:
    catalogs: list[ApiCatalog] = field(default_factory=list)
    errors: list[OpenApiLoadError] = field(default_factory=list)


@dataclass(frozen=True)
class DependsOnError:
    screen_id: str
    invalid_api: str
    suggestion: str | None = None


def catalog_from_document(document: dict, source: str) -> ApiCatalog:
    operation_ids: set[str] = set()
    endpoints: set[str] = set()
    for path, item in (document.get("paths") or {}).items():
        if not isinstance(item, dict):
            continue
        for method in HTTP_METHODS:
            operation = item.get(method)
            if not isinstance(operation, dict):
                continue
            op_id = operation.get("operationId")
            if isinstance(op_id, str) and op_id:
                operation_ids.add(op_id)
            endpoints.add(f"{method.upper()} {path}")
    return ApiCatalog(
        source=source,
        operation_ids=frozenset(operation_ids),
        http_endpoints=frozenset(endpoints),
    )


def load_openapi_specs(sources: Sequence[str], base_path: Path) -> OpenApiLoadResult:
    """Parse each OpenAPI source; failures are collected, not raised."""
    result = OpenApiLoadResult()
    for source in sources:
        path = base_path / source
        try:
            with path.open() as fh:
                document = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as exc:
            result.errors.append(OpenApiLoadError(source, str(exc)))
            continue
        if not isinstance(document, dict) or not (
            "openapi" in document or "swagger" in document
        ):
            result.errors.append(OpenApiLoadError(source, "Not an OpenAPI document"))
            continue
        result.catalogs.append(catalog_from_document(document, source))
    return result


def _matches(value: str, catalogs: Sequence[ApiCatalog]) -> bool:
    http = _HTTP_PREFIX.match(value)
    if http:
        normalized = f"{http.group(1).lower()} {value[http.end():]}"
        return any(normalized in c.lowercase_index for c in catalogs)
    return any(
        value in c.operation_ids or value.lower() in c.lowercase_index for c in catalogs
    )


def validate_depends_on(
    screens: ScreenRegistry | Sequence[Screen],
    catalogs: Sequence[ApiCatalog],
) -> list[DependsOnError]:
    """Report ``dependsOn`` entries that no catalog declares."""
    identifiers = sorted(
        {i for c in catalogs for i in (c.operation_ids | c.http_endpoints)}
    )
    errors: list[DependsOnError] = []
    for screen in as_screen_list(screens):
        for dep in screen.depends_on or ():
            if _matches(dep, catalogs):
                continue
            suggestion = (
                find_best_match(dep, identifiers, API_SUGGESTION_RATIO) if identifiers else None
            )
            errors.append(DependsOnError(screen.id, dep, suggestion))
    return errors
