"""Lint command — route coverage and orphan screens."""

from pathlib import Path

import click

from screenbook.analysis.coverage import calculate_coverage, filter_route_files
from screenbook.analysis.references import find_orphan_screens
from screenbook.cli._common import config_option, handles_errors, make_loader
from screenbook.config import load_config
from screenbook.errors import (
    coverage_below_minimum,
    lint_missing_meta,
    routes_pattern_missing,
)
from screenbook.patterns import find_files


@click.command()
@config_option
@handles_errors
def lint(config_path: str | None):
    """Detect routes without screen metadata and unreachable screens."""
    base_path = Path.cwd()
    config = load_config(config_path, base_path)
    adoption = config.adoption

    if not config.routes_pattern:
        raise routes_pattern_missing()

    click.echo("Linting screen metadata coverage...")
    if adoption.is_progressive:
        click.echo("Mode: Progressive adoption")
        if adoption.include_patterns:
            click.echo(f"Checking: {', '.join(adoption.include_patterns)}")
        if adoption.minimum_coverage is not None:
            click.echo(f"Minimum coverage: {adoption.minimum_coverage}%")
    click.echo()

    route_files = find_files(base_path, config.routes_pattern, config.ignore)
    if adoption.is_progressive:
        route_files = filter_route_files(route_files, adoption.include_patterns)

    if not route_files:
        click.echo(f"No route files found matching: {config.routes_pattern}")
        if adoption.is_progressive and adoption.include_patterns:
            click.echo(f"(filtered by includePatterns: {', '.join(adoption.include_patterns)})")
        return

    loader = make_loader(config, base_path)
    loader.load_all()
    for failure in loader.failures:
        click.echo(click.style(f"  ✗ Failed to load {failure}", fg="red"), err=True)

    coverage = calculate_coverage(
        loader.screens, route_files, meta_filename=config.meta_filename
    )

    click.echo(f"Found {coverage.total} route files")
    click.echo(f"Coverage: {coverage.covered}/{coverage.total} ({coverage.percentage}%)")
    click.echo()

    if coverage.missing:
        click.echo(f"Missing screen metadata ({len(coverage.missing)} files):")
        click.echo()
        for missing in coverage.missing:
            click.echo(f"  {click.style('✗', fg='red')} {missing.route}")
            click.echo(f"    → {missing.suggested_path}")
        click.echo()

    if not adoption.is_progressive and coverage.missing:
        raise lint_missing_meta(len(coverage.missing), coverage.total)

    minimum = adoption.minimum_coverage if adoption.minimum_coverage is not None else 100
    if not coverage.meets(minimum):
        raise coverage_below_minimum(coverage.percentage, minimum)

    if coverage.missing:
        click.echo(
            click.style(f"✓ Coverage {coverage.percentage}% meets minimum {minimum}%", fg="green")
        )
        if adoption.is_progressive:
            click.echo("  Tip: Increase minimumCoverage in config to gradually improve coverage")
    else:
        click.echo(click.style("✓ All routes have screen metadata", fg="green"))

    orphans = find_orphan_screens(loader.screens)
    if orphans:
        click.echo()
        click.echo(click.style(f"⚠ Orphan screens detected ({len(orphans)}):", fg="yellow"))
        click.echo()
        click.echo("  These screens have no entryPoints and are not")
        click.echo("  referenced in any other screen's 'next' array.")
        click.echo()
        for orphan in orphans:
            click.echo(f"  ⚠ {orphan.id}  {orphan.route}")
        click.echo()
        click.echo("  Consider adding entryPoints or removing these screens.")
        click.echo()
        click.echo("Lint completed with warnings.")
