"""Build command — load metadata, check the graph, write artifacts."""

from pathlib import Path

import click

from screenbook.analysis.coverage import calculate_coverage
from screenbook.analysis.cycles import cycle_summary, detect_cycles, format_cycle_warnings
from screenbook.analysis.depends_on import load_openapi_specs, validate_depends_on
from screenbook.analysis.references import format_validation_errors, validate_references
from screenbook.cli._common import config_option, handles_errors, make_loader, run_context, warn
from screenbook.config import load_config
from screenbook.errors import (
    cycles_detected,
    depends_on_invalid,
    meta_file_load_error,
    openapi_parse_error,
    validation_failed,
)
from screenbook.output.writer import write_artifacts
from screenbook.patterns import find_files


def _display(path: Path, base_path: Path) -> Path:
    try:
        return path.relative_to(base_path)
    except ValueError:
        return path


@click.command()
@config_option
@click.option("--out-dir", "-o", default=None, help="Output directory (overrides outDir).")
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Fail on invalid references, disallowed cycles and unknown dependsOn APIs.",
)
@click.option(
    "--allow-cycles",
    is_flag=True,
    default=False,
    help="Treat every circular navigation as allowed.",
)
@handles_errors
def build(config_path: str | None, out_dir: str | None, strict: bool, allow_cycles: bool):
    """Build screens.json, graph.mmd and coverage.json from screen metadata."""
    base_path = Path.cwd()
    config = load_config(config_path, base_path)
    run = run_context()

    click.echo("Building screen metadata...")

    loader = make_loader(config, base_path)
    if not loader.discover():
        click.echo(f"No screen metadata files found matching: {config.meta_pattern}")
        return

    loader.load_all()
    click.echo(f"Found {len(loader.screens) + len(loader.failures)} screen files")
    for screen in loader.screens:
        click.echo(f"  {click.style('✓', fg='green')} {screen.id}")
    for failure in loader.failures:
        click.echo(f"  {click.style('✗', fg='red')} Failed to load {failure}", err=True)
    if strict and loader.failures:
        first = loader.failures[0]
        raise meta_file_load_error(first.file, first.message)

    screens = loader.screens

    # ── Reference validation ────────────────────────────────────────────────
    validation = validate_references(screens, run)
    if not validation.valid:
        click.echo()
        warn(f"{len(validation.errors)} invalid screen reference(s):")
        click.echo(format_validation_errors(validation.errors))
        if strict:
            raise validation_failed(len(validation.errors))

    # ── Cycle detection ─────────────────────────────────────────────────────
    cycles = detect_cycles(screens, allow_all=allow_cycles, context=run)
    if cycles.has_cycles:
        click.echo()
        if cycles.disallowed_cycles:
            warn(cycle_summary(cycles))
        else:
            click.echo(cycle_summary(cycles))
        click.echo(format_cycle_warnings(cycles.cycles))
        if strict and cycles.disallowed_cycles:
            raise cycles_detected(len(cycles.disallowed_cycles))

    # ── dependsOn vs OpenAPI ────────────────────────────────────────────────
    if config.openapi_sources:
        specs = load_openapi_specs(config.openapi_sources, base_path)
        for error in specs.errors:
            if strict:
                raise openapi_parse_error(error.source, error.message)
            warn(f"Failed to parse OpenAPI document {error.source}: {error.message}")
        api_errors = validate_depends_on(screens, specs.catalogs)
        if api_errors:
            click.echo()
            warn(f"{len(api_errors)} dependsOn reference(s) not found in OpenAPI specs:")
            for api_error in api_errors:
                hint = f' (did you mean "{api_error.suggestion}"?)' if api_error.suggestion else ""
                click.echo(f'  {api_error.screen_id}: "{api_error.invalid_api}"{hint}')
            if strict:
                raise depends_on_invalid(len(api_errors))

    # ── Artifacts ───────────────────────────────────────────────────────────
    route_files = (
        find_files(base_path, config.routes_pattern, config.ignore)
        if config.routes_pattern
        else []
    )
    coverage = calculate_coverage(screens, route_files, meta_filename=config.meta_filename)
    artifacts = write_artifacts(base_path / (out_dir or config.out_dir), screens, coverage)

    click.echo()
    for path in (artifacts.screens, artifacts.graph, artifacts.coverage):
        click.echo(f"Generated {_display(path, base_path)}")
    click.echo(f"\nCoverage: {coverage.covered}/{coverage.total} ({coverage.percentage}%)")
