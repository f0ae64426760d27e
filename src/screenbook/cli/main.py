"""Screenbook CLI entry point."""

import logging

import click

from screenbook import __version__
from screenbook.context import RunContext


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug output.")
@click.version_option(__version__, prog_name="screenbook")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Screenbook — screen catalog and navigation graph CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = RunContext(verbose=verbose, logger=logging.getLogger("screenbook"))


# Register subcommands
from screenbook.cli.build_cmd import build  # noqa: E402
from screenbook.cli.impact_cmd import impact, pr_impact  # noqa: E402
from screenbook.cli.lint_cmd import lint  # noqa: E402
from screenbook.cli.validate_cmd import validate  # noqa: E402

cli.add_command(build)
cli.add_command(lint)
cli.add_command(impact)
cli.add_command(pr_impact)
cli.add_command(validate)
