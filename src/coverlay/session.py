"""Coverage session: discovery -> load -> parse/merge -> render.

The session owns the merged section map. A rebuild replaces it wholesale
once every report has been parsed and folded; renders only ever see a
complete map.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

import structlog

from coverlay.config.models import CoverlayConfig
from coverlay.core.logging import clear_cycle_id, set_cycle_id
from coverlay.coverage.loader import FilesLoader, Notifier
from coverlay.coverage.models import Section
from coverlay.coverage.parser import CoverageParser
from coverlay.render.finder import SectionFinder
from coverlay.render.renderer import Renderer, TextEditor

logger = structlog.get_logger()


class CoverageSession:
    """Aggregates coverage for a set of workspace folders and renders it."""

    def __init__(
        self,
        config: CoverlayConfig,
        workspace_folders: Iterable[Path],
        notify: Notifier | None = None,
    ) -> None:
        folders = [Path(p) for p in workspace_folders]
        self._config = config
        self._loader = FilesLoader(config.coverage, folders, notify)
        self._parser = CoverageParser(concurrency=config.coverage.parse_concurrency)
        self._renderer = Renderer(SectionFinder(folders))
        self._sections: dict[str, Section] = {}
        self._coverage_files: list[str] = []
        self._map_token = 0

    @property
    def sections(self) -> Mapping[str, Section]:
        return MappingProxyType(self._sections)

    @property
    def coverage_files(self) -> list[str]:
        return list(self._coverage_files)

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    async def rebuild(self) -> Mapping[str, Section]:
        """Re-scan coverage files and rebuild the merged map from scratch.

        Starts a new render generation, so renders of the previous map that
        are still in flight drop their results. If another rebuild starts
        before this one finishes, this one's map is discarded and the
        current map is returned unchanged.
        """
        set_cycle_id()
        token = self._renderer.generation.advance()
        try:
            files = await self._loader.find_coverage_files()
            data = await self._loader.load_data_files(files)
            sections = await self._parser.files_to_sections(data)

            if not self._renderer.generation.is_current(token):
                logger.debug(
                    "rebuild_superseded",
                    token=token,
                    current=self._renderer.generation.current,
                )
                return self.sections

            self._coverage_files = list(data)
            self._sections = sections
            self._map_token = token
            logger.info("coverage_rebuilt", files=len(data), sections=len(sections))
            return self.sections
        finally:
            clear_cycle_id()

    def render(self, editors: Iterable[TextEditor]) -> int:
        """Render the current map onto the given editors.

        Nothing is drawn while a newer rebuild is still running; that
        rebuild's map replaces this one before the next render.
        """
        return self._renderer.render_coverage(self._sections, editors, token=self._map_token)
