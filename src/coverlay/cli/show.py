"""coverlay show - print a source file with its coverage gutter."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from coverlay.cli.utils import build_session, coverage_option, rebuild, resolve_config, root_option
from coverlay.core.progress import status
from coverlay.render.ranges import compress_lines
from coverlay.render.renderer import DecorationChannel
from coverlay.render.terminal import TerminalEditor


@click.command()
@click.argument(
    "sources",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@root_option
@coverage_option
@click.option("--lines-only", is_flag=True, help="Print line lists instead of the source.")
@click.pass_context
def show_command(
    ctx: click.Context,
    sources: tuple[Path, ...],
    roots: tuple[Path, ...],
    coverage_files: tuple[Path, ...],
    lines_only: bool,
) -> None:
    """Show SOURCES with full/partial/none coverage markers."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    config = resolve_config(roots, coverage_files, verbose=verbose)
    session = build_session(config, roots)
    rebuild(session)

    editors = [TerminalEditor(source, config.render) for source in sources]
    session.render(editors)

    console = Console()
    for editor in editors:
        covered = any(editor.decorations[channel] for channel in DecorationChannel)
        if not covered:
            status(f"No coverage found for {editor.path}", style="warning")
            continue

        if lines_only:
            console.print(f"[bold]{editor.path}[/bold]", highlight=False)
            for channel in DecorationChannel:
                # Print 1-based numbers, as editors show them
                numbers = compress_lines(line + 1 for line in editor.lines(channel))
                console.print(f"  {channel.value}: {numbers or '-'}", highlight=False)
            continue

        console.rule(str(editor.path))
        editor.print(console)
