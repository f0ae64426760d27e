"""Impact commands — single API and pull request."""

import json
from pathlib import Path

import click

from screenbook.analysis.impact import analyze_impact, format_impact_json, format_impact_text
from screenbook.analysis.pr_impact import changed_files, extract_api_names, format_pr_markdown
from screenbook.cli._common import (
    config_option,
    handles_errors,
    load_built_screens,
    run_context,
    warn,
)
from screenbook.config import load_config
from screenbook.errors import api_name_required

depth_option = click.option(
    "--depth",
    "-d",
    default=3,
    show_default=True,
    type=click.IntRange(min=0),
    help="Maximum navigation hops for transitive dependents.",
)


@click.command()
@click.argument("api_name", required=False)
@config_option
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
)
@depth_option
@handles_errors
def impact(api_name: str | None, config_path: str | None, output_format: str, depth: int):
    """Analyze which screens depend on an API or service (e.g. InvoiceAPI.getDetail)."""
    if not api_name:
        raise api_name_required()

    base_path = Path.cwd()
    config = load_config(config_path, base_path)
    screens = load_built_screens(config, base_path)

    if not screens:
        warn("No screens found in the catalog.")
        click.echo("Add screen.meta.yaml files, then run 'screenbook build'.")
        return

    result = analyze_impact(screens, api_name, depth, run_context())
    if output_format == "json":
        click.echo(format_impact_json(result))
    else:
        click.echo(format_impact_text(result))


@click.command("pr-impact")
@click.option("--base", "-b", "base_branch", default="main", show_default=True)
@config_option
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["markdown", "json"]),
    default="markdown",
    show_default=True,
)
@depth_option
@handles_errors
def pr_impact(base_branch: str, config_path: str | None, output_format: str, depth: int):
    """Analyze the screen impact of API changes on the current branch."""
    base_path = Path.cwd()
    config = load_config(config_path, base_path)

    files = changed_files(base_branch, cwd=str(base_path))
    if not files:
        click.echo("No changed files found.")
        return

    apis = extract_api_names(files)
    if not apis:
        click.echo("No API-related changes detected.")
        return

    screens = load_built_screens(config, base_path)
    run = run_context()
    results = [r for r in (analyze_impact(screens, api, depth, run) for api in apis) if r.total_count]

    if output_format == "json":
        payload = {
            "changedFiles": files,
            "detectedApis": apis,
            "results": [r.to_dict() for r in results],
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(format_pr_markdown(files, apis, results))
