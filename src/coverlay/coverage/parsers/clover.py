"""Clover XML parser.

Structure::

    <coverage generated="..." clover="4.4.1">
        <project>
            <package name="app">
                <file name="util.php" path="/abs/src/util.php">
                    <line num="3" type="method" name="run" count="2"/>
                    <line num="4" type="stmt" count="2"/>
                    <line num="5" type="cond" truecount="1" falsecount="0"/>
                </file>
            </package>
        </project>
    </coverage>

One Section per <file>. A "cond" line counts as hit when either outcome was
seen and contributes two branches (true, false).
"""

from __future__ import annotations

from coverlay.core.errors import CoverageParseError
from coverlay.coverage.models import BranchDetail, FunctionDetail, LineDetail, Section, make_section
from coverlay.coverage.parsers._xml import int_attr, parse_xml

SYSTEM = "clover-parse"


def parse_clover(content: str) -> list[Section]:
    """Parse Clover XML into one Section per file."""
    root = parse_xml(content, SYSTEM)
    if root.tag != "coverage":
        raise CoverageParseError.malformed(SYSTEM, f"unexpected root element <{root.tag}>")

    sections: list[Section] = []
    for file_elem in root.iter("file"):
        name = file_elem.get("name", "")
        path = file_elem.get("path") or name
        if not path:
            continue

        lines: list[LineDetail] = []
        branches: list[BranchDetail] = []
        functions: list[FunctionDetail] = []

        for line_elem in file_elem.findall("./line"):
            number = int_attr(line_elem, "num", SYSTEM, default=None)
            kind = line_elem.get("type", "stmt")

            if kind == "cond":
                true_count = int_attr(line_elem, "truecount", SYSTEM)
                false_count = int_attr(line_elem, "falsecount", SYSTEM)
                lines.append(
                    LineDetail(line=number, hit=1 if true_count > 0 or false_count > 0 else 0)
                )
                branches.append(BranchDetail(line=number, block=0, branch=0, taken=true_count))
                branches.append(BranchDetail(line=number, block=0, branch=1, taken=false_count))
                continue

            count = int_attr(line_elem, "count", SYSTEM)
            lines.append(LineDetail(line=number, hit=count))
            if kind == "method":
                functions.append(
                    FunctionDetail(name=line_elem.get("name", ""), line=number, hit=count)
                )

        sections.append(
            make_section(name, path, lines=lines, branches=branches, functions=functions)
        )

    return sections
