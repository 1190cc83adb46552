"""Report text -> merged section map.

Every report is detected and parsed in its own task (fan-out), all tasks are
joined, and only then are the results folded sequentially in input order
(fan-in). Parsing is the only step that runs concurrently; the fold never
interleaves with a running parse.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

import structlog

from coverlay.core.errors import CoverageParseError
from coverlay.coverage.formats import CoverageType, detect_format
from coverlay.coverage.merge import add_sections
from coverlay.coverage.models import Section
from coverlay.coverage.parsers import get_parser

logger = structlog.get_logger()


class CoverageParser:
    """Turns loaded coverage files into a map of merged sections."""

    def __init__(self, concurrency: int = 8) -> None:
        self._concurrency = max(1, concurrency)

    async def files_to_sections(self, files: Mapping[str, str]) -> dict[str, Section]:
        """Parse every file and fold all sections into a fresh identity map.

        Args:
            files: coverage file name -> raw text, in the order to fold.

        Returns:
            `title::file` -> merged Section. Files that fail to parse or are
            not coverage reports contribute nothing.
        """
        semaphore = asyncio.Semaphore(self._concurrency)

        async def bounded(name: str, content: str) -> list[Section]:
            async with semaphore:
                return await self._extract(name, content)

        results = await asyncio.gather(
            *(bounded(name, content) for name, content in files.items())
        )

        coverages: dict[str, Section] = {}
        for sections in results:
            add_sections(coverages, sections)

        logger.info(
            "coverage_parsed",
            files=len(files),
            sections=sum(len(r) for r in results),
            merged_sections=len(coverages),
        )
        return coverages

    async def _extract(self, name: str, content: str) -> list[Section]:
        coverage_type = detect_format(content)
        parser = get_parser(coverage_type)
        if parser is None:
            logger.debug("coverage_format_unrecognized", file=name)
            return []

        try:
            return await asyncio.to_thread(parser, content)
        except CoverageParseError as e:
            self._handle_error(coverage_type, e.with_filename(name))
            return []
        except (ValueError, KeyError) as e:
            self._handle_error(
                coverage_type,
                CoverageParseError.malformed(coverage_type.parser_system, str(e), name),
            )
            return []

    def _handle_error(self, coverage_type: CoverageType, error: CoverageParseError) -> None:
        logger.error(
            "coverage_parse_failed",
            system=coverage_type.parser_system,
            file=error.details.get("filename"),
            error=error.message,
        )
