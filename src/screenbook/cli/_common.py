"""Shared helpers for CLI commands."""

from __future__ import annotations

import functools
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from screenbook.config import ScreenbookConfig
from screenbook.context import DEFAULT_CONTEXT, RunContext
from screenbook.errors import ScreenbookError
from screenbook.output.writer import SCREENS_FILE
from screenbook.screens.loader import ScreenLoader, load_catalog
from screenbook.screens.types import Screen

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    help="Path to config file (default: screenbook.config.yaml in cwd).",
)


def run_context() -> RunContext:
    """The RunContext created by the root group for this invocation."""
    ctx = click.get_current_context(silent=True)
    found = ctx.find_object(RunContext) if ctx else None
    return found or DEFAULT_CONTEXT


def echo_error(error: ScreenbookError) -> None:
    """Render a ScreenbookError with its details to stderr."""
    click.echo(err=True)
    click.echo(click.style(f"✗ Error: {error.title}", fg="red"), err=True)
    if error.message:
        click.echo(err=True)
        for line in error.message.splitlines():
            click.echo(f"  {line}", err=True)
    if error.suggestion:
        click.echo(err=True)
        click.echo(f"  {click.style('Suggestion:', fg='cyan')} {error.suggestion}", err=True)
    if error.example:
        click.echo(err=True)
        click.echo(click.style("  Example:", dim=True), err=True)
        for line in error.example.splitlines():
            click.echo(click.style(f"  {line}", dim=True), err=True)
    click.echo(err=True)


def handles_errors(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Turn ScreenbookError into rendered output and exit status 1."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except ScreenbookError as error:
            echo_error(error)
            raise SystemExit(1) from error

    return wrapper


def warn(message: str) -> None:
    click.echo(click.style(f"⚠ Warning: {message}", fg="yellow"))


def make_loader(config: ScreenbookConfig, base_path: Path) -> ScreenLoader:
    return ScreenLoader(
        base_path,
        meta_pattern=config.meta_pattern,
        ignore=config.ignore,
        context=run_context(),
    )


def load_built_screens(config: ScreenbookConfig, base_path: Path) -> list[Screen]:
    """Read screens.json from the configured output directory."""
    return load_catalog(base_path / config.out_dir / SCREENS_FILE)
