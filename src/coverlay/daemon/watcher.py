"""Coverage report watcher.

Watches the workspace folders with watchfiles and, once report changes have
been quiet for the debounce window, rebuilds the session and notifies the
caller. Only paths whose name matches a configured coverage file name (or a
manual coverage path) count as changes.

Each rebuild advances the render generation, so a render still working from
the previous map drops its results instead of painting stale decorations.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from coverlay.config.models import CoverageConfig
from coverlay.coverage.loader import is_ignored
from coverlay.coverage.models import Section
from coverlay.session import CoverageSession

logger = structlog.get_logger()

MAX_DEBOUNCE_WAIT_SEC = 2.0

OnRebuild = Callable[[Mapping[str, Section]], Awaitable[None] | None]


def is_coverage_path(path: Path, config: CoverageConfig, roots: Iterable[Path]) -> bool:
    """Check whether a changed path is a report this workspace would load."""
    if config.manual_coverage_file_paths:
        return str(path) in config.manual_coverage_file_paths
    if path.name not in config.coverage_file_names:
        return False
    for root in roots:
        try:
            rel = path.relative_to(root).as_posix()
        except ValueError:
            continue
        return not is_ignored(rel, config.ignored_path_globs)
    return True


@dataclass
class CoverageWatcher:
    """Rebuilds a CoverageSession whenever coverage reports change."""

    session: CoverageSession
    config: CoverageConfig
    roots: list[Path]
    on_rebuild: OnRebuild
    debounce_window: float = 0.3
    max_debounce_wait: float = MAX_DEBOUNCE_WAIT_SEC

    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _debounce_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _pending_changes: set[Path] = field(default_factory=set, init=False)
    _first_change_time: float = field(default=0.0, init=False)
    _last_change_time: float = field(default=0.0, init=False)
    _rebuild_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    def __post_init__(self) -> None:
        self.roots = [Path(r).resolve() for r in self.roots]

    async def start(self) -> None:
        """Start watching for coverage report changes."""
        if self._watch_task is not None:
            return
        self._stop_event.clear()
        self._debounce_task = asyncio.create_task(self._debounce_flush_loop())
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "coverage_watcher_started",
            roots=[str(r) for r in self.roots],
            debounce_window=self.debounce_window,
        )

    async def stop(self) -> None:
        """Stop watching; pending changes are dropped."""
        self._stop_event.set()

        for task in (self._debounce_task, self._watch_task):
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                    await asyncio.wait_for(task, timeout=2.0)

        self._debounce_task = None
        self._watch_task = None
        self._pending_changes.clear()
        logger.info("coverage_watcher_stopped")

    async def wait(self) -> None:
        """Block until the watcher is stopped."""
        await self._stop_event.wait()

    def handle_changes(self, changes: Iterable[tuple[Change, str]]) -> int:
        """Queue the coverage-relevant subset of a change batch.

        Returns the number of queued paths.
        """
        queued = 0
        for _change, raw_path in changes:
            path = Path(raw_path)
            if is_coverage_path(path, self.config, self.roots):
                self._queue_change(path)
                queued += 1
        return queued

    def _queue_change(self, path: Path) -> None:
        now = time.monotonic()
        if not self._pending_changes:
            self._first_change_time = now
        self._pending_changes.add(path)
        self._last_change_time = now

    def _should_flush(self) -> bool:
        if not self._pending_changes:
            return False
        now = time.monotonic()
        return (
            now - self._last_change_time >= self.debounce_window
            or now - self._first_change_time >= self.max_debounce_wait
        )

    async def flush(self) -> None:
        """Rebuild now if any change is pending."""
        if not self._pending_changes:
            return
        paths = sorted(self._pending_changes)
        self._pending_changes.clear()
        logger.info("coverage_reports_changed", count=len(paths))
        await self.rebuild()

    async def rebuild(self) -> None:
        """Rebuild the session and hand the fresh map to on_rebuild."""
        async with self._rebuild_lock:
            sections = await self.session.rebuild()
            result = self.on_rebuild(sections)
            if asyncio.iscoroutine(result):
                await result

    async def _debounce_flush_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(0.1)
                if self._should_flush():
                    try:
                        await self.flush()
                    except Exception as e:
                        logger.error("coverage_rebuild_failed", error=str(e))
        except asyncio.CancelledError:
            pass

    async def _watch_loop(self) -> None:
        try:
            async for changes in awatch(
                *self.roots,
                stop_event=self._stop_event,
                ignore_permission_denied=True,
            ):
                self.handle_changes(changes)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("coverage_watcher_error", error=str(e))
            self._stop_event.set()
