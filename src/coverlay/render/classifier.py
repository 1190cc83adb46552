"""Per-line coverage classification.

Each source line moves through a small state machine while the sections of
one file are processed in order:

    UNKNOWN --hit>0--> FULL      UNKNOWN --hit==0--> NONE
    NONE    --hit>0--> FULL      NONE    --hit==0--> NONE
    FULL    --hit>0--> FULL      FULL    --hit==0--> FULL
    FULL    --untaken branch--> PARTIAL
    PARTIAL (terminal)

Every other (state, event) pair leaves the state unchanged. A line one run
covered is never reported as uncovered, and a line with an untaken branch is
never reported as fully covered.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from coverlay.coverage.models import Section


class LineState(Enum):
    UNKNOWN = "unknown"
    NONE = "none"
    FULL = "full"
    PARTIAL = "partial"


def on_line_hit(state: LineState) -> LineState:
    if state is LineState.PARTIAL:
        return state
    return LineState.FULL


def on_line_missed(state: LineState) -> LineState:
    if state is LineState.UNKNOWN:
        return LineState.NONE
    return state


def on_branch_untaken(state: LineState) -> LineState:
    if state is LineState.FULL:
        return LineState.PARTIAL
    return state


@dataclass
class CoverageSets:
    """0-based line numbers per classification; pairwise disjoint."""

    full: set[int] = field(default_factory=set)
    partial: set[int] = field(default_factory=set)
    none: set[int] = field(default_factory=set)


class LineClassifier:
    """Accumulates line states across the sections of one file."""

    def __init__(self) -> None:
        self._states: dict[int, LineState] = {}

    def state(self, line: int) -> LineState:
        """State of a 0-based line."""
        return self._states.get(line, LineState.UNKNOWN)

    def add_section(self, section: Section) -> None:
        """Run the line pass, then the branch pass, for one section."""
        self._line_pass(section)
        self._branch_pass(section)

    def _line_pass(self, section: Section) -> None:
        if section.lines is None:
            return
        for detail in section.lines.details:
            if detail.line <= 0:
                continue
            line = detail.line - 1
            event = on_line_hit if detail.hit > 0 else on_line_missed
            self._states[line] = event(self.state(line))

    def _branch_pass(self, section: Section) -> None:
        if section.branches is None:
            return
        for detail in section.branches.details:
            if detail.taken != 0 or detail.line <= 0:
                continue
            line = detail.line - 1
            if line in self._states:
                self._states[line] = on_branch_untaken(self._states[line])

    def sets(self) -> CoverageSets:
        result = CoverageSets()
        buckets = {
            LineState.FULL: result.full,
            LineState.PARTIAL: result.partial,
            LineState.NONE: result.none,
        }
        for line, state in self._states.items():
            bucket = buckets.get(state)
            if bucket is not None:
                bucket.add(line)
        return result


def classify(sections: Iterable[Section]) -> CoverageSets:
    """Classify the lines of one file from all of its sections, in order."""
    classifier = LineClassifier()
    for section in sections:
        classifier.add_section(section)
    return classifier.sets()
