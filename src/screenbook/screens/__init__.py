"""Screen metadata — types, registry and loading."""

from screenbook.screens.types import (
    FieldIssue,
    Screen,
    ScreenLink,
    ScreenParseFailure,
    parse_screen,
)
from screenbook.screens.registry import ScreenRegistry, as_screen_list
from screenbook.screens.loader import LoadFailure, ScreenLoader, dump_catalog, load_catalog

__all__ = [
    "FieldIssue",
    "LoadFailure",
    "Screen",
    "ScreenLink",
    "ScreenLoader",
    "ScreenParseFailure",
    "ScreenRegistry",
    "as_screen_list",
    "dump_catalog",
    "load_catalog",
    "parse_screen",
]
