"""Load screen metadata from meta files and screens.json catalogs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from screenbook.config import DEFAULT_IGNORE
from screenbook.context import DEFAULT_CONTEXT, RunContext
from screenbook.errors import screens_not_found, screens_parse_error
from screenbook.patterns import find_files
from screenbook.screens.types import Screen, ScreenParseFailure, parse_screen

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadFailure:
    """A meta file that could not be turned into a screen."""

    file: str
    message: str

    def __str__(self) -> str:
        return f"{self.file}: {self.message}"


class ScreenLoader:
    """Loads screens from ``screen.meta.yaml`` files below a base directory.

    A meta file holds either a top-level ``screen:`` mapping or the screen
    mapping itself. JSON files work too since they are valid YAML.
    """

    def __init__(
        self,
        base_path: Path,
        meta_pattern: str = "src/**/screen.meta.yaml",
        ignore: tuple[str, ...] = DEFAULT_IGNORE,
        context: RunContext = DEFAULT_CONTEXT,
    ):
        self.base_path = base_path
        self.meta_pattern = meta_pattern
        self.ignore = ignore
        self.context = context
        self.screens: list[Screen] = []
        self.failures: list[LoadFailure] = []

    def discover(self) -> list[str]:
        """Relative paths of all meta files, sorted."""
        return find_files(self.base_path, self.meta_pattern, self.ignore)

    def load_all(self) -> None:
        """Load every discovered meta file, collecting failures instead of raising."""
        self.screens = []
        self.failures = []
        for rel_path in self.discover():
            result = self.load_file(rel_path)
            if isinstance(result, LoadFailure):
                self.failures.append(result)
                logger.warning("Skipping %s", result)
            else:
                self.screens.append(result)
                self.context.debug("Loaded %s from %s", result.id, rel_path)

    def load_file(self, rel_path: str) -> Screen | LoadFailure:
        try:
            with (self.base_path / rel_path).open() as fh:
                data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            return LoadFailure(rel_path, f"YAML parse error: {exc}")
        except OSError as exc:
            return LoadFailure(rel_path, str(exc))

        if data is None:
            return LoadFailure(rel_path, "File is empty")
        if isinstance(data, dict) and "screen" in data:
            data = data["screen"]
        if not isinstance(data, dict):
            return LoadFailure(rel_path, "Expected a 'screen' mapping")

        parsed = parse_screen(data, source_file=rel_path)
        if isinstance(parsed, ScreenParseFailure):
            return LoadFailure(rel_path, "; ".join(str(i) for i in parsed.issues))
        return parsed

    def get_screen(self, screen_id: str) -> Screen | None:
        """Get a loaded screen by id (last wins on duplicates)."""
        for screen in reversed(self.screens):
            if screen.id == screen_id:
                return screen
        return None

    def list_screens(self) -> list[Screen]:
        return list(self.screens)


# ---------------------------------------------------------------------------
# screens.json catalog
# ---------------------------------------------------------------------------


def dump_catalog(screens: list[Screen], path: Path) -> None:
    """Write screens to ``path`` as a JSON array, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([s.to_dict() for s in screens], indent=2) + "\n")


def load_catalog(path: Path) -> list[Screen]:
    """Read a screens.json catalog produced by ``screenbook build``.

    Raises:
        CatalogNotFoundError: If the file does not exist.
        CatalogParseError: If the file is not a JSON array of valid screens.
    """
    if not path.exists():
        raise screens_not_found(str(path))

    try:
        raw = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise screens_parse_error(str(exc)) from exc

    if not isinstance(raw, list):
        raise screens_parse_error("Expected a JSON array of screens")

    screens: list[Screen] = []
    problems: list[str] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            problems.append(f"[{i}]: expected an object")
            continue
        parsed = parse_screen(item)
        if isinstance(parsed, ScreenParseFailure):
            problems.append(f"[{i}]: {parsed}")
        else:
            screens.append(parsed)

    if problems:
        raise screens_parse_error("\n".join(problems))
    return screens
