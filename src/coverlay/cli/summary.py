"""coverlay summary - per-section totals of the merged coverage."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from coverlay.cli.utils import build_session, coverage_option, rebuild, resolve_config, root_option
from coverlay.core.progress import pluralize, status
from coverlay.coverage.models import Section


def _percent(hit: int, found: int) -> str:
    return f"{hit / found * 100:.1f}%" if found else "-"


def section_summary(section: Section) -> dict:
    lines = section.lines
    branches = section.branches
    return {
        "title": section.title,
        "file": section.file,
        "lines": {"found": lines.found, "hit": lines.hit} if lines else None,
        "branches": {"found": branches.found, "hit": branches.hit} if branches else None,
    }


def build_table(sections: Mapping[str, Section]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Title", style="dim")
    table.add_column("Lines", justify="right")
    table.add_column("Branches", justify="right")

    for key in sorted(sections):
        section = sections[key]
        lines = section.lines
        branches = section.branches
        table.add_row(
            section.file,
            section.title,
            f"{lines.hit}/{lines.found} {_percent(lines.hit, lines.found)}" if lines else "-",
            (
                f"{branches.hit}/{branches.found} {_percent(branches.hit, branches.found)}"
                if branches and branches.found
                else "-"
            ),
        )
    return table


def print_summary(sections: Mapping[str, Section], console: Console) -> None:
    console.print(build_table(sections))


@click.command()
@root_option
@coverage_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def summary_command(
    ctx: click.Context,
    roots: tuple[Path, ...],
    coverage_files: tuple[Path, ...],
    as_json: bool,
) -> None:
    """Summarize merged coverage per file."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    config = resolve_config(roots, coverage_files, verbose=verbose)
    session = build_session(config, roots)
    rebuild(session)
    sections = session.sections

    if as_json:
        click.echo(
            json.dumps(
                {
                    "coverage_files": session.coverage_files,
                    "sections": [section_summary(sections[k]) for k in sorted(sections)],
                },
                indent=2,
            )
        )
        return

    if not sections:
        status("No coverage sections found", style="warning")
        return

    status(
        f"Merged {pluralize(len(sections), 'section')} from "
        f"{pluralize(len(session.coverage_files), 'coverage file')}",
        style="success",
    )
    print_summary(sections, Console())
