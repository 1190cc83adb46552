"""Format-specific report parsers.

One pure function per CoverageType variant, each `(text) -> list[Section]`
and raising CoverageParseError on malformed input.
"""

from __future__ import annotations

from collections.abc import Callable

from coverlay.coverage.formats import CoverageType
from coverlay.coverage.models import Section
from coverlay.coverage.parsers.clover import parse_clover
from coverlay.coverage.parsers.cobertura import parse_cobertura
from coverlay.coverage.parsers.jacoco import parse_jacoco
from coverlay.coverage.parsers.lcov import parse_lcov

Parser = Callable[[str], list[Section]]

PARSER_REGISTRY: dict[CoverageType, Parser] = {
    CoverageType.LCOV: parse_lcov,
    CoverageType.COBERTURA: parse_cobertura,
    CoverageType.CLOVER: parse_clover,
    CoverageType.JACOCO: parse_jacoco,
}


def get_parser(coverage_type: CoverageType) -> Parser | None:
    """Parser for a format, or None for CoverageType.NONE."""
    return PARSER_REGISTRY.get(coverage_type)


__all__ = [
    "PARSER_REGISTRY",
    "Parser",
    "get_parser",
    "parse_clover",
    "parse_cobertura",
    "parse_jacoco",
    "parse_lcov",
]
