"""coverlay watch - re-render coverage whenever reports change."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Mapping
from pathlib import Path

import click
from rich.console import Console

from coverlay.cli.summary import print_summary
from coverlay.cli.utils import build_session, coverage_option, resolve_config, root_option
from coverlay.core.progress import status
from coverlay.coverage.models import Section
from coverlay.daemon.watcher import CoverageWatcher
from coverlay.render.terminal import TerminalEditor


@click.command()
@click.argument(
    "sources",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@root_option
@coverage_option
@click.pass_context
def watch_command(
    ctx: click.Context,
    sources: tuple[Path, ...],
    roots: tuple[Path, ...],
    coverage_files: tuple[Path, ...],
) -> None:
    """Watch coverage reports and re-render SOURCES (or a summary) on change."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    config = resolve_config(roots, coverage_files, verbose=verbose)
    session = build_session(config, roots)
    console = Console()
    editors = [TerminalEditor(source, config.render) for source in sources]

    def on_rebuild(sections: Mapping[str, Section]) -> None:
        if not editors:
            print_summary(sections, console)
            return
        session.render(editors)
        for editor in editors:
            console.rule(str(editor.path))
            editor.print(console)

    async def run() -> None:
        watcher = CoverageWatcher(
            session=session,
            config=config.coverage,
            roots=[p.resolve() for p in roots] or [Path.cwd()],
            on_rebuild=on_rebuild,
            debounce_window=config.watch.debounce_sec,
        )
        await watcher.rebuild()
        await watcher.start()
        status("Watching coverage reports (Ctrl+C to stop)")
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run())
