"""Validate command — schema and reference checks on screen metadata."""

from pathlib import Path

import click

from screenbook.analysis.references import format_validation_errors, validate_references
from screenbook.cli._common import config_option, handles_errors, make_loader, run_context
from screenbook.config import load_config
from screenbook.metadata.validator import validate_meta_file, validate_meta_files


@click.command()
@config_option
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Validate a single meta file instead of every discovered one.",
)
@handles_errors
def validate(config_path: str | None, target_path: Path | None):
    """Validate screen metadata files against the JSON Schema and each other."""
    base_path = Path.cwd()
    config = load_config(config_path, base_path)
    loader = make_loader(config, base_path)

    # ── Schema (JSON Schema) validation ─────────────────────────────────────
    if target_path is not None:
        schema_issues = validate_meta_file(target_path)
    else:
        meta_files = loader.discover()
        if not meta_files:
            click.echo(f"No screen metadata files found matching: {config.meta_pattern}")
            return
        schema_issues = validate_meta_files(base_path, meta_files)

    for issue in schema_issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    errors = [i for i in schema_issues if i.severity == "error"]
    if errors:
        click.echo(click.style(f"\n{len(errors)} schema error(s) found", fg="red", bold=True))
        raise SystemExit(1)

    # ── Reference validation ────────────────────────────────────────────────
    # Only meaningful across the whole catalog
    if target_path is None:
        loader.load_all()
        result = validate_references(loader.screens, run_context())
        if not result.valid:
            click.echo(format_validation_errors(result.errors))
            click.echo(
                click.style(
                    f"{len(result.errors)} invalid screen reference(s) found",
                    fg="red",
                    bold=True,
                )
            )
            raise SystemExit(1)
        click.echo(f"\nValidated {len(loader.screens)} screens.")

    click.echo(click.style("\nAll metadata is valid.", fg="green", bold=True))
