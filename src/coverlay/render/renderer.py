"""Render coordinator and the decoration boundary.

For each visible editor: clear its three decoration channels, find the
sections describing its file, classify their lines, turn the three line sets
into ranges and apply them together.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from coverlay.coverage.models import Section
from coverlay.render.classifier import CoverageSets, classify
from coverlay.render.finder import SectionFinder
from coverlay.render.ranges import Range, lines_to_ranges

logger = structlog.get_logger()


class DecorationChannel(Enum):
    FULL = "full"
    PARTIAL = "partial"
    NONE = "none"


@runtime_checkable
class TextEditor(Protocol):
    """What the renderer needs from a host editor."""

    @property
    def path(self) -> Path: ...

    def set_decorations(self, channel: DecorationChannel, ranges: list[Range]) -> None:
        """Replace every range previously applied on `channel`."""
        ...


@dataclass(frozen=True)
class CoverageLines:
    full: list[Range] = field(default_factory=list)
    partial: list[Range] = field(default_factory=list)
    none: list[Range] = field(default_factory=list)

    @classmethod
    def from_sets(cls, sets: CoverageSets) -> CoverageLines:
        return cls(
            full=lines_to_ranges(sets.full),
            partial=lines_to_ranges(sets.partial),
            none=lines_to_ranges(sets.none),
        )


class RenderGeneration:
    """Monotonic counter identifying the newest render cycle."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._value

    def advance(self) -> int:
        """Start a new cycle; results of earlier cycles become stale."""
        with self._lock:
            self._value += 1
            return self._value

    def is_current(self, token: int) -> bool:
        return token == self._value


class Renderer:
    """Applies coverage decorations to visible editors."""

    def __init__(
        self,
        section_finder: SectionFinder,
        generation: RenderGeneration | None = None,
    ) -> None:
        self._section_finder = section_finder
        self._generation = generation or RenderGeneration()

    @property
    def generation(self) -> RenderGeneration:
        return self._generation

    def render_coverage(
        self,
        sections: Mapping[str, Section],
        editors: Iterable[TextEditor],
        token: int | None = None,
    ) -> int:
        """Render coverage onto every editor.

        Args:
            sections: merged section map, read-only here.
            editors: currently visible editors.
            token: generation the caller's cycle belongs to. Defaults to the
                current one. Once a newer cycle starts, remaining editors of
                this cycle are left alone.

        Returns:
            Number of editors that received coverage decorations.
        """
        if token is None:
            token = self._generation.current

        rendered = 0
        for editor in editors:
            if not self._generation.is_current(token):
                logger.debug("render_cycle_superseded", token=token, current=self._generation.current)
                break

            self.remove_decorations_for_editor(editor)

            found = self._section_finder.find_sections_for_file(editor.path, sections)
            if not found:
                continue

            coverage = CoverageLines.from_sets(classify(found))

            if not self._generation.is_current(token):
                logger.debug("render_cycle_superseded", token=token, current=self._generation.current)
                break

            self.set_decorations_for_editor(editor, coverage)
            rendered += 1
            logger.debug(
                "editor_rendered",
                path=str(editor.path),
                sections=len(found),
                full=len(coverage.full),
                partial=len(coverage.partial),
                none=len(coverage.none),
            )

        return rendered

    def remove_decorations_for_editor(self, editor: TextEditor) -> None:
        for channel in DecorationChannel:
            editor.set_decorations(channel, [])

    def set_decorations_for_editor(self, editor: TextEditor, coverage: CoverageLines) -> None:
        editor.set_decorations(DecorationChannel.FULL, coverage.full)
        editor.set_decorations(DecorationChannel.NONE, coverage.none)
        editor.set_decorations(DecorationChannel.PARTIAL, coverage.partial)
