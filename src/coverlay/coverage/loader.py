"""Coverage file discovery and loading.

Discovery is either manual (configured absolute paths, existence-checked) or a
glob of `{coverage_base_dir}/{file_name}` under every workspace folder. All
problems are reported through `notify` as user-visible warnings; nothing here
raises past its caller.
"""

from __future__ import annotations

import asyncio
import fnmatch
from collections.abc import Callable, Iterable
from pathlib import Path

import structlog

from coverlay.config.models import CoverageConfig
from coverlay.core.errors import DiscoveryError

logger = structlog.get_logger()

Notifier = Callable[[str], None]


def _log_notifier(message: str) -> None:
    logger.warning("coverage_discovery_warning", message=message)


def is_ignored(rel_path: str, patterns: Iterable[str]) -> bool:
    """Check a workspace-relative POSIX path against ignore globs."""
    rel_posix = rel_path.replace("\\", "/")
    for pattern in patterns:
        if fnmatch.fnmatch(rel_posix, pattern):
            return True
        # "**/x/**" should also match a top-level "x/..."
        if pattern.startswith("**/") and fnmatch.fnmatch(rel_posix, pattern[3:]):
            return True
    return False


class FilesLoader:
    """Finds coverage reports and reads their contents."""

    def __init__(
        self,
        config: CoverageConfig,
        workspace_folders: Iterable[Path],
        notify: Notifier | None = None,
    ) -> None:
        self._config = config
        self._workspace_folders = [Path(p) for p in workspace_folders]
        self._notify = notify or _log_notifier

    def _warn(self, error: DiscoveryError) -> None:
        logger.debug("discovery_error", error=error.error_name, **error.details)
        self._notify(error.message)

    async def find_coverage_files(self) -> set[str]:
        """Find all coverage files, honoring manual path overrides."""
        manual = self._config.manual_coverage_file_paths
        if manual:
            existing: set[str] = set()
            for file in manual:
                if not Path(file).exists():
                    self._warn(DiscoveryError.path_missing(file))
                    continue
                existing.add(file)
            return existing

        file_names = self._config.coverage_file_names
        files = await self._find_coverage_in_workspace(file_names)
        if not files:
            self._warn(DiscoveryError.nothing_found(file_names))
            return set()
        return files

    async def load_data_files(self, files: Iterable[str]) -> dict[str, str]:
        """Read every file concurrently; returns path -> text sorted by path."""
        ordered = sorted(set(files))
        contents = await asyncio.gather(*(self._load(f) for f in ordered))
        return {path: text for path, text in zip(ordered, contents, strict=True) if text is not None}

    async def _load(self, path: str) -> str | None:
        try:
            return await asyncio.to_thread(Path(path).read_text, encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error("coverage_file_unreadable", path=path, error=str(e))
            return None

    async def _find_coverage_in_workspace(self, file_names: Iterable[str]) -> set[str]:
        files: set[str] = set()
        for file_name in file_names:
            found = await asyncio.gather(
                *(
                    asyncio.to_thread(self._glob_find, folder, file_name)
                    for folder in self._workspace_folders
                )
            )
            for matches in found:
                files.update(matches)
        return files

    def _glob_find(self, workspace_folder: Path, file_name: str) -> set[str]:
        pattern = f"{self._config.coverage_base_dir}/{file_name}".lstrip("/")
        try:
            root = workspace_folder.resolve()
            matches: set[str] = set()
            for candidate in root.glob(pattern):
                if not candidate.is_file():
                    continue
                rel = candidate.relative_to(root).as_posix()
                if is_ignored(rel, self._config.ignored_path_globs):
                    continue
                matches.add(str(candidate.resolve()))
            return matches
        except (OSError, ValueError) as e:
            self._warn(DiscoveryError.glob_failed(pattern, str(e)))
            return set()
