"""Coverlay CLI - coverlay command."""

import click

from coverlay import __version__
from coverlay.cli.show import show_command
from coverlay.cli.summary import summary_command
from coverlay.cli.watch import watch_command
from coverlay.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="coverlay")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Coverlay - merge coverage reports and show per-line coverage."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(show_command, name="show")
cli.add_command(summary_command, name="summary")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
