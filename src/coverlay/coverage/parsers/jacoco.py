"""JaCoCo XML parser.

Structure::

    <report name="app">
        <package name="com/acme">
            <class name="com/acme/Util" sourcefilename="Util.java">
                <method name="run" line="7">
                    <counter type="METHOD" missed="0" covered="1"/>
                </method>
            </class>
            <sourcefile name="Util.java">
                <line nr="7" mi="0" ci="3" mb="1" cb="1"/>
            </sourcefile>
        </package>
    </report>

One Section per <sourcefile>, identified as "<package>/<sourcefile>". A line
is hit when it has covered instructions; its `mb + cb` branches are expanded
with the first `cb` marked taken.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from coverlay.core.errors import CoverageParseError
from coverlay.coverage.models import BranchDetail, FunctionDetail, LineDetail, Section, make_section
from coverlay.coverage.parsers._xml import int_attr, parse_xml

SYSTEM = "jacoco-parse"


def _methods_by_source(package: ET.Element) -> dict[str, list[FunctionDetail]]:
    methods: dict[str, list[FunctionDetail]] = {}
    for class_elem in package.findall("./class"):
        source = class_elem.get("sourcefilename")
        if not source:
            continue
        for method in class_elem.findall("./method"):
            line = int_attr(method, "line", SYSTEM)
            if line <= 0:
                continue
            covered = 0
            for counter in method.findall("./counter"):
                if counter.get("type") == "METHOD":
                    covered = int_attr(counter, "covered", SYSTEM)
            methods.setdefault(source, []).append(
                FunctionDetail(name=method.get("name", ""), line=line, hit=covered)
            )
    return methods


def parse_jacoco(content: str) -> list[Section]:
    """Parse JaCoCo XML into one Section per source file."""
    root = parse_xml(content, SYSTEM)
    if root.tag != "report":
        raise CoverageParseError.malformed(SYSTEM, f"unexpected root element <{root.tag}>")

    sections: list[Section] = []
    for package in root.iter("package"):
        package_name = package.get("name", "")
        methods = _methods_by_source(package)

        for source in package.findall("./sourcefile"):
            name = source.get("name", "")
            if not name:
                continue

            lines: list[LineDetail] = []
            branches: list[BranchDetail] = []
            for line_elem in source.findall("./line"):
                number = int_attr(line_elem, "nr", SYSTEM, default=None)
                lines.append(LineDetail(line=number, hit=int_attr(line_elem, "ci", SYSTEM)))

                covered_branches = int_attr(line_elem, "cb", SYSTEM)
                total_branches = covered_branches + int_attr(line_elem, "mb", SYSTEM)
                branches.extend(
                    BranchDetail(
                        line=number, block=0, branch=i, taken=1 if i < covered_branches else 0
                    )
                    for i in range(total_branches)
                )

            file = f"{package_name}/{name}" if package_name else name
            sections.append(
                make_section(
                    name,
                    file,
                    lines=lines,
                    branches=branches,
                    functions=methods.get(name, []),
                )
            )

    return sections
