"""Screenbook configuration.

Resolution order:
1. Explicit ``--config`` path
2. ``screenbook.config.yaml`` / ``.yml`` / ``.json`` in the base directory
3. Built-in defaults

Environment variables override individual keys after the file is read:
``SCREENBOOK_OUT_DIR``, ``SCREENBOOK_META_PATTERN``, ``SCREENBOOK_ROUTES_PATTERN``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from screenbook.errors import config_invalid, config_not_found

CONFIG_FILES = (
    "screenbook.config.yaml",
    "screenbook.config.yml",
    "screenbook.config.json",
)

DEFAULT_IGNORE = ("**/node_modules/**", "**/.git/**")

_ENV_OVERRIDES = {
    "SCREENBOOK_OUT_DIR": "out_dir",
    "SCREENBOOK_META_PATTERN": "meta_pattern",
    "SCREENBOOK_ROUTES_PATTERN": "routes_pattern",
}


@dataclass(frozen=True)
class AdoptionConfig:
    """Progressive adoption settings for gradual rollout."""

    mode: str = "full"  # "full" | "progressive"
    include_patterns: tuple[str, ...] = ()
    minimum_coverage: int | None = None

    @property
    def is_progressive(self) -> bool:
        return self.mode == "progressive"


@dataclass(frozen=True)
class ScreenbookConfig:
    out_dir: str = ".screenbook"
    meta_pattern: str = "src/**/screen.meta.yaml"
    routes_pattern: str | None = None
    ignore: tuple[str, ...] = DEFAULT_IGNORE
    adoption: AdoptionConfig = field(default_factory=AdoptionConfig)
    openapi_sources: tuple[str, ...] = ()
    source: Path | None = None  # file the config was read from, None for defaults

    @property
    def meta_filename(self) -> str:
        """File name part of ``meta_pattern`` (e.g. ``screen.meta.yaml``)."""
        return PurePosixPath(self.meta_pattern).name

    def with_env(self, environ: dict[str, str] | None = None) -> ScreenbookConfig:
        env = os.environ if environ is None else environ
        changes = {attr: env[var] for var, attr in _ENV_OVERRIDES.items() if env.get(var)}
        return replace(self, **changes) if changes else self


def _str_list(value: Any, key: str, problems: list[str]) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        problems.append(f"{key}: expected a list of strings")
        return ()
    return tuple(value)


def _parse_adoption(data: Any, problems: list[str]) -> AdoptionConfig:
    if data is None:
        return AdoptionConfig()
    if not isinstance(data, dict):
        problems.append("adoption: expected a mapping")
        return AdoptionConfig()

    mode = data.get("mode", "full")
    if mode not in ("full", "progressive"):
        problems.append(f"adoption.mode: must be 'full' or 'progressive', got {mode!r}")
        mode = "full"

    patterns: tuple[str, ...] = ()
    if "includePatterns" in data:
        patterns = _str_list(data["includePatterns"], "adoption.includePatterns", problems)

    minimum = data.get("minimumCoverage")
    if minimum is not None:
        if isinstance(minimum, bool) or not isinstance(minimum, (int, float)):
            problems.append("adoption.minimumCoverage: expected a number")
            minimum = None
        elif not 0 <= minimum <= 100:
            problems.append("adoption.minimumCoverage: must be between 0 and 100")
            minimum = None
        else:
            minimum = int(minimum)

    return AdoptionConfig(mode=mode, include_patterns=patterns, minimum_coverage=minimum)


def parse_config(data: dict[str, Any], source: Path | None = None) -> ScreenbookConfig:
    """Build a config from a parsed mapping.

    Raises:
        ConfigError: If any key has an invalid value.
    """
    problems: list[str] = []
    defaults = ScreenbookConfig()

    def _string(key: str, default: str | None) -> str | None:
        value = data.get(key, default)
        if value is not None and not isinstance(value, str):
            problems.append(f"{key}: expected a string")
            return default
        return value

    out_dir = _string("outDir", defaults.out_dir)
    meta_pattern = _string("metaPattern", defaults.meta_pattern)
    routes_pattern = _string("routesPattern", None)

    ignore = defaults.ignore
    if "ignore" in data:
        ignore = _str_list(data["ignore"], "ignore", problems)

    adoption = _parse_adoption(data.get("adoption"), problems)

    openapi: tuple[str, ...] = ()
    integration = data.get("apiIntegration")
    if integration is not None:
        if isinstance(integration, dict) and "openapi" in integration:
            openapi = _str_list(integration["openapi"], "apiIntegration.openapi", problems)
        elif not isinstance(integration, dict):
            problems.append("apiIntegration: expected a mapping")

    if problems:
        raise config_invalid(str(source or "<config>"), problems)

    return ScreenbookConfig(
        out_dir=out_dir or defaults.out_dir,
        meta_pattern=meta_pattern or defaults.meta_pattern,
        routes_pattern=routes_pattern,
        ignore=ignore,
        adoption=adoption,
        openapi_sources=openapi,
        source=source,
    )


def _read_config_file(path: Path) -> ScreenbookConfig:
    try:
        with path.open() as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise config_invalid(str(path), [f"parse error: {exc}"]) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise config_invalid(str(path), ["top level must be a mapping"])
    return parse_config(data, source=path)


def load_config(
    config_path: str | Path | None = None,
    base_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> ScreenbookConfig:
    """Load configuration for one invocation.

    Args:
        config_path: Explicit config file (relative to ``base_path``).
        base_path: Directory searched for a config file; defaults to cwd.
        environ: Environment mapping for overrides; defaults to ``os.environ``.

    Raises:
        ConfigError: If ``config_path`` does not exist or the file is invalid.
    """
    base = base_path or Path.cwd()

    if config_path is not None:
        path = base / config_path
        if not path.is_file():
            raise config_not_found(str(config_path))
        return _read_config_file(path).with_env(environ)

    for name in CONFIG_FILES:
        candidate = base / name
        if candidate.is_file():
            return _read_config_file(candidate).with_env(environ)

    return ScreenbookConfig().with_env(environ)
