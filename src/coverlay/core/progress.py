"""User-facing console feedback for CLI operations.

Usage::

    from coverlay.core.progress import status, warn

    status("Merged 3 sections", style="success")
    warn("Could not find a Coverage file!")

Messages go to stderr so `--json` output on stdout stays parseable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
}


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from coverlay.core.logging import get_logger

    return get_logger("progress")


def status(message: str, *, style: str = "info") -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    _console.print(f"{prefix}{message}", highlight=False)

    _get_logger().debug("status", message=message, style=style)


def warn(message: str) -> None:
    """Surface a non-fatal problem to the user."""
    status(message, style="warning")


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" / "3 files" style counts."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"
