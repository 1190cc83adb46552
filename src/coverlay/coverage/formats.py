"""Coverage report format detection by content signature."""

from __future__ import annotations

import re
from enum import Enum

# Only the head of a report is inspected; every signature appears early.
_SNIFF_BYTES = 4096

_JACOCO_DOCTYPE = "-//JACOCO//DTD"
_REPORT_ROOT = re.compile(r"<report[\s>]")
_COVERAGE_ROOT = re.compile(r"<coverage[\s>]")
_CLOVER_ATTR = re.compile(r"<coverage[^>]*\bclover=")
_CLOVER_PROJECT = re.compile(r"<project[\s>]")
_COBERTURA_ATTR = re.compile(r"<coverage[^>]*\bline-rate=")
_COBERTURA_PACKAGES = re.compile(r"<packages[\s/>]")


class CoverageType(Enum):
    """Closed set of report formats understood by the aggregator."""

    LCOV = "lcov"
    COBERTURA = "cobertura"
    CLOVER = "clover"
    JACOCO = "jacoco"
    NONE = "none"

    @property
    def parser_system(self) -> str:
        """Name used to tag log lines and errors from this format's parser."""
        return f"{self.value}-parse"


def _is_xml(head: str) -> bool:
    stripped = head.lstrip("﻿ \t\r\n")
    return stripped.startswith("<?xml") or stripped.startswith("<")


def detect_format(content: str) -> CoverageType:
    """Classify raw report text into one of the known formats.

    Returns CoverageType.NONE for anything unrecognized; callers treat that
    as "not a coverage report" rather than an error.
    """
    head = content[:_SNIFF_BYTES]

    if _is_xml(head):
        if _JACOCO_DOCTYPE in head or _REPORT_ROOT.search(head):
            return CoverageType.JACOCO
        if _COVERAGE_ROOT.search(head):
            if _CLOVER_ATTR.search(head) or _CLOVER_PROJECT.search(head):
                return CoverageType.CLOVER
            if _COBERTURA_ATTR.search(head) or _COBERTURA_PACKAGES.search(head):
                return CoverageType.COBERTURA
        return CoverageType.NONE

    if "SF:" in content and "end_of_record" in content:
        return CoverageType.LCOV

    return CoverageType.NONE
