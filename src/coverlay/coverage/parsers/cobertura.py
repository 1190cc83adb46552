"""Cobertura XML parser.

Structure::

    <coverage line-rate="0.85" branch-rate="0.5">
        <sources><source>/abs/project</source></sources>
        <packages><package name="pkg"><classes>
            <class name="Mod" filename="pkg/mod.py">
                <lines>
                    <line number="3" hits="1"/>
                    <line number="4" hits="2" branch="true" condition-coverage="50% (1/2)"/>
                </lines>
            </class>
        </classes></package></packages>
    </coverage>

One Section per <class>. Branch lines are expanded into one branch detail per
condition; the first `covered` conditions count as taken.
"""

from __future__ import annotations

import posixpath
import re

from coverlay.core.errors import CoverageParseError
from coverlay.coverage.models import BranchDetail, FunctionDetail, LineDetail, Section, make_section
from coverlay.coverage.parsers._xml import int_attr, parse_xml

SYSTEM = "cobertura-parse"

_CONDITION_COVERAGE = re.compile(r"\((\d+)/(\d+)\)")


def _join_source(source: str | None, filename: str) -> str:
    if not source or posixpath.isabs(filename.replace("\\", "/")):
        return filename
    return posixpath.join(source.replace("\\", "/").rstrip("/"), filename)


def _branches_for(line: int, condition_coverage: str | None) -> list[BranchDetail]:
    if not condition_coverage:
        return []
    match = _CONDITION_COVERAGE.search(condition_coverage)
    if match is None:
        raise CoverageParseError.malformed(
            SYSTEM, f"line {line}: unreadable condition-coverage {condition_coverage!r}"
        )
    covered, total = int(match.group(1)), int(match.group(2))
    return [
        BranchDetail(line=line, block=0, branch=i, taken=1 if i < covered else 0)
        for i in range(total)
    ]


def parse_cobertura(content: str, absolute_paths: bool = True) -> list[Section]:
    """Parse Cobertura XML into one Section per class.

    With absolute_paths, class filenames are joined onto the first <source>.
    """
    root = parse_xml(content, SYSTEM)
    if root.tag != "coverage":
        raise CoverageParseError.malformed(SYSTEM, f"unexpected root element <{root.tag}>")

    source_elem = root.find("./sources/source")
    source = source_elem.text.strip() if source_elem is not None and source_elem.text else None

    sections: list[Section] = []
    for class_elem in root.iter("class"):
        filename = (class_elem.get("filename") or "").strip()
        if not filename:
            continue

        lines: list[LineDetail] = []
        branches: list[BranchDetail] = []
        # Method bodies repeat their lines under <methods>; only class-level
        # <lines> are authoritative.
        for line_elem in class_elem.findall("./lines/line"):
            number = int_attr(line_elem, "number", SYSTEM, default=None)
            lines.append(LineDetail(line=number, hit=int_attr(line_elem, "hits", SYSTEM)))
            if line_elem.get("branch", "").lower() == "true":
                branches.extend(_branches_for(number, line_elem.get("condition-coverage")))

        functions: list[FunctionDetail] = []
        for method in class_elem.findall("./methods/method"):
            method_lines = method.findall("./lines/line")
            if not method_lines:
                continue
            first = method_lines[0]
            functions.append(
                FunctionDetail(
                    name=method.get("name", ""),
                    line=int_attr(first, "number", SYSTEM, default=None),
                    hit=int_attr(first, "hits", SYSTEM),
                )
            )

        sections.append(
            make_section(
                class_elem.get("name", ""),
                _join_source(source, filename) if absolute_paths else filename,
                lines=lines,
                branches=branches,
                functions=functions,
            )
        )

    return sections
