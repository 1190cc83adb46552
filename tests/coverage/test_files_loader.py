"""Tests for coverage file discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from coverlay.config.models import CoverageConfig
from coverlay.coverage.loader import FilesLoader, is_ignored


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "ws"
    (root / "build").mkdir(parents=True)
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / ".hidden").mkdir()
    (root / "build" / "lcov.info").write_text("SF:a.py\nDA:1,1\nend_of_record\n")
    (root / "node_modules" / "dep" / "lcov.info").write_text("ignored")
    (root / ".hidden" / "coverage.xml").write_text("<coverage/>")
    return root


class TestIsIgnored:
    """Tests for ignore glob matching."""

    def test_nested_match(self) -> None:
        assert is_ignored("a/node_modules/x/lcov.info", ["**/node_modules/**"])

    def test_top_level_match(self) -> None:
        assert is_ignored("node_modules/x/lcov.info", ["**/node_modules/**"])

    def test_no_match(self) -> None:
        assert not is_ignored("build/lcov.info", ["**/node_modules/**"])

    def test_windows_separators(self) -> None:
        assert is_ignored("a\\vendor\\lcov.info", ["**/vendor/**"])


class TestFindCoverageFiles:
    """Tests for FilesLoader.find_coverage_files."""

    @pytest.mark.asyncio
    async def test_glob_search_honors_ignores_and_hidden(self, workspace: Path) -> None:
        loader = FilesLoader(CoverageConfig(), [workspace])
        files = await loader.find_coverage_files()

        assert files == {
            str((workspace / "build" / "lcov.info").resolve()),
            str((workspace / ".hidden" / "coverage.xml").resolve()),
        }

    @pytest.mark.asyncio
    async def test_base_dir_restricts_search(self, workspace: Path) -> None:
        config = CoverageConfig(coverage_base_dir="build")
        files = await FilesLoader(config, [workspace]).find_coverage_files()
        assert files == {str((workspace / "build" / "lcov.info").resolve())}

    @pytest.mark.asyncio
    async def test_multiple_workspace_folders(self, tmp_path: Path) -> None:
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        b.mkdir()
        (a / "lcov.info").write_text("x")
        (b / "lcov.info").write_text("y")

        files = await FilesLoader(CoverageConfig(), [a, b]).find_coverage_files()
        assert len(files) == 2

    @pytest.mark.asyncio
    async def test_nothing_found_warns(self, tmp_path: Path) -> None:
        warnings: list[str] = []
        config = CoverageConfig(coverage_file_names=["lcov.info", "cov.xml"])
        files = await FilesLoader(config, [tmp_path], warnings.append).find_coverage_files()

        assert files == set()
        assert warnings == ["Could not find a Coverage file! Searched for lcov.info, cov.xml"]

    @pytest.mark.asyncio
    async def test_manual_paths_override_search(self, workspace: Path, tmp_path: Path) -> None:
        manual = tmp_path / "manual.info"
        manual.write_text("SF:a\nend_of_record\n")
        missing = tmp_path / "missing.info"
        warnings: list[str] = []

        config = CoverageConfig(manual_coverage_file_paths=[str(manual), str(missing)])
        files = await FilesLoader(config, [workspace], warnings.append).find_coverage_files()

        assert files == {str(manual)}
        assert warnings == [f'manualCoverageFilePaths contains "{missing}" which does not exist!']


class TestLoadDataFiles:
    """Tests for FilesLoader.load_data_files."""

    @pytest.mark.asyncio
    async def test_reads_contents_sorted(self, tmp_path: Path) -> None:
        b = tmp_path / "b.info"
        a = tmp_path / "a.info"
        b.write_text("B")
        a.write_text("A")

        data = await FilesLoader(CoverageConfig(), [tmp_path]).load_data_files({str(b), str(a)})
        assert list(data.items()) == [(str(a), "A"), (str(b), "B")]

    @pytest.mark.asyncio
    async def test_unreadable_file_skipped(self, tmp_path: Path) -> None:
        ok = tmp_path / "ok.info"
        ok.write_text("fine")

        data = await FilesLoader(CoverageConfig(), [tmp_path]).load_data_files(
            [str(ok), str(tmp_path / "gone.info")]
        )
        assert data == {str(ok): "fine"}
