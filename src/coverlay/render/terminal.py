"""In-memory editor that prints decorated source to a Rich console."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.text import Text

from coverlay.config.models import RenderConfig
from coverlay.render.ranges import Range
from coverlay.render.renderer import DecorationChannel


class TerminalEditor:
    """A TextEditor backed by a file on disk and a terminal."""

    def __init__(self, path: Path, config: RenderConfig | None = None) -> None:
        self._path = Path(path).resolve()
        self._config = config or RenderConfig()
        self.decorations: dict[DecorationChannel, list[Range]] = {
            channel: [] for channel in DecorationChannel
        }

    @property
    def path(self) -> Path:
        return self._path

    def set_decorations(self, channel: DecorationChannel, ranges: list[Range]) -> None:
        self.decorations[channel] = list(ranges)

    def lines(self, channel: DecorationChannel) -> set[int]:
        """0-based lines currently decorated on a channel."""
        return {r.start_line for r in self.decorations[channel]}

    def render(self) -> Text:
        """Source text with a coverage gutter."""
        cfg = self._config
        markers = {
            DecorationChannel.FULL: (cfg.full_marker, cfg.full_style),
            DecorationChannel.PARTIAL: (cfg.partial_marker, cfg.partial_style),
            DecorationChannel.NONE: (cfg.none_marker, cfg.none_style),
        }
        by_line = {
            line: channel for channel in DecorationChannel for line in self.lines(channel)
        }

        source = self._path.read_text(encoding="utf-8", errors="replace").splitlines()
        width = len(str(len(source)))

        out = Text()
        for index, content in enumerate(source):
            channel = by_line.get(index)
            if channel is None:
                out.append(" ")
            else:
                marker, style = markers[channel]
                out.append(marker, style=style)
            if cfg.show_line_numbers:
                out.append(f" {index + 1:>{width}} ", style="dim")
            else:
                out.append(" ")
            out.append(content)
            out.append("\n")
        return out

    def print(self, console: Console) -> None:
        console.print(self.render(), end="", highlight=False, soft_wrap=True)
