"""LCOV trace file parser.

Records understood:
- TN:<test name>           title of the next record only
- SF:<path>                section file
- DA:<line>,<hits>[,<md5>] line data
- BRDA:<line>,<block>,<branch>,<taken|->
- FN:<line>,<name> / FNDA:<hits>,<name>
- end_of_record

LF/LH/BRF/BRH/FNF/FNH totals are ignored; totals are recomputed from the
details so they always agree with them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from coverlay.core.errors import CoverageParseError
from coverlay.coverage.models import (
    BranchDetail,
    FunctionDetail,
    LineDetail,
    Section,
    make_section,
)

SYSTEM = "lcov-parse"


@dataclass
class _Record:
    title: str
    file: str = ""
    lines: list[LineDetail] = field(default_factory=list)
    branches: list[BranchDetail] = field(default_factory=list)
    function_lines: dict[str, int] = field(default_factory=dict)
    function_hits: dict[str, int] = field(default_factory=dict)

    def to_section(self) -> Section:
        functions = [
            FunctionDetail(name=name, line=line, hit=self.function_hits.get(name, 0))
            for name, line in self.function_lines.items()
        ]
        return make_section(
            self.title,
            self.file,
            lines=self.lines,
            branches=self.branches,
            functions=functions,
        )


def _int(value: str, lineno: int, record: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise CoverageParseError.malformed(
            SYSTEM, f"line {lineno}: invalid number {value!r} in {record} record"
        ) from None


def parse_lcov(content: str) -> list[Section]:
    """Parse LCOV text into one Section per SF...end_of_record block."""
    sections: list[Section] = []
    title = ""
    current: _Record | None = None

    for lineno, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue

        tag, _, payload = line.partition(":")

        if line == "end_of_record":
            if current is not None:
                sections.append(current.to_section())
            current = None
            title = ""
            continue

        if tag == "TN":
            title = payload.strip()
            continue

        if tag == "SF":
            current = _Record(title=title, file=payload.strip())
            continue

        if current is None:
            # Totals and unknown records outside a file block carry nothing.
            continue

        parts = payload.split(",")

        if tag == "DA":
            if len(parts) < 2:
                raise CoverageParseError.malformed(SYSTEM, f"line {lineno}: truncated DA record")
            current.lines.append(
                LineDetail(line=_int(parts[0], lineno, tag), hit=_int(parts[1], lineno, tag))
            )
        elif tag == "BRDA":
            if len(parts) < 4:
                raise CoverageParseError.malformed(SYSTEM, f"line {lineno}: truncated BRDA record")
            taken = 0 if parts[3].strip() == "-" else _int(parts[3], lineno, tag)
            current.branches.append(
                BranchDetail(
                    line=_int(parts[0], lineno, tag),
                    block=_int(parts[1], lineno, tag),
                    branch=_int(parts[2], lineno, tag),
                    taken=taken,
                )
            )
        elif tag == "FN":
            if len(parts) < 2:
                raise CoverageParseError.malformed(SYSTEM, f"line {lineno}: truncated FN record")
            # FN:<line>[,<end line>],<name>
            current.function_lines[parts[-1]] = _int(parts[0], lineno, tag)
        elif tag == "FNDA":
            if len(parts) < 2:
                raise CoverageParseError.malformed(SYSTEM, f"line {lineno}: truncated FNDA record")
            current.function_hits[parts[-1]] = _int(parts[0], lineno, tag)

    if current is not None:
        # Report cut off before end_of_record
        sections.append(current.to_section())

    return sections
