"""Shared helpers for the XML report parsers."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from coverlay.core.errors import CoverageParseError


def parse_xml(content: str, system: str) -> ET.Element:
    """Parse report XML and strip namespaces from every tag."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise CoverageParseError.malformed(system, str(e)) from e

    # Some generators emit namespaced tags
    for elem in root.iter():
        if isinstance(elem.tag, str) and "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]
    return root


def int_attr(elem: ET.Element, name: str, system: str, default: int | None = 0) -> int:
    """Read an integer attribute, raising a parse error when it is not a number."""
    value = elem.get(name)
    if value is None or value == "":
        if default is None:
            raise CoverageParseError.malformed(system, f"<{elem.tag}> is missing '{name}'")
        return default
    try:
        return int(value)
    except ValueError:
        try:
            return int(float(value))
        except ValueError:
            raise CoverageParseError.malformed(
                system, f"<{elem.tag}> has non-numeric {name}={value!r}"
            ) from None
