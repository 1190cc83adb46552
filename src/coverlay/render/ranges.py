"""Line sets -> editor ranges."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Range:
    """Editor range with 0-based line and character positions."""

    start_line: int
    start_character: int
    end_line: int
    end_character: int


def line_range(line: int) -> Range:
    """Zero-width marker at the start of a line."""
    return Range(line, 0, line, 0)


def lines_to_ranges(lines: Iterable[int]) -> list[Range]:
    """One zero-width range per line, ascending."""
    return [line_range(line) for line in sorted(lines)]


def compress_lines(lines: Iterable[int]) -> str:
    """Render line numbers as "1-3, 7, 9-10"."""
    ordered = sorted(set(lines))
    if not ordered:
        return ""

    ranges: list[str] = []
    start = prev = ordered[0]
    for line in ordered[1:]:
        if line == prev + 1:
            prev = line
            continue
        ranges.append(f"{start}-{prev}" if prev > start else str(start))
        start = prev = line
    ranges.append(f"{start}-{prev}" if prev > start else str(start))
    return ", ".join(ranges)
