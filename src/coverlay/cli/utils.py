"""CLI utilities."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

import click

from coverlay.config.loader import load_config
from coverlay.config.models import CoverlayConfig
from coverlay.core.errors import ConfigError
from coverlay.core.logging import configure_logging
from coverlay.core.progress import warn
from coverlay.session import CoverageSession

root_option = click.option(
    "--root",
    "roots",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Workspace folder to search for coverage (repeatable, default: current directory).",
)
coverage_option = click.option(
    "--coverage",
    "coverage_files",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Coverage report to use instead of searching (repeatable).",
)


def resolve_config(
    roots: Sequence[Path],
    coverage_files: Sequence[Path],
    *,
    verbose: bool = False,
) -> CoverlayConfig:
    """Load config for the first workspace folder and apply CLI overrides.

    Raises:
        click.ClickException: On invalid configuration.
    """
    overrides: dict = {}
    if coverage_files:
        overrides["coverage"] = {
            "manual_coverage_file_paths": [str(p.resolve()) for p in coverage_files]
        }
    try:
        config = load_config(roots[0] if roots else Path.cwd(), **overrides)
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    return config


def build_session(config: CoverlayConfig, roots: Sequence[Path]) -> CoverageSession:
    folders = [p.resolve() for p in roots] or [Path.cwd()]
    return CoverageSession(config, folders, notify=warn)


def rebuild(session: CoverageSession) -> None:
    asyncio.run(session.rebuild())
