"""Long-running watch mode."""

from coverlay.daemon.watcher import CoverageWatcher, is_coverage_path

__all__ = ["CoverageWatcher", "is_coverage_path"]
