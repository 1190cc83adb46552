"""Tests for matching editor files to sections."""

from pathlib import Path

import pytest

from coverlay.coverage.models import LineDetail, make_section
from coverlay.render.finder import SectionFinder, normalise_path, path_matches


class TestNormalisePath:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("./src/app.py", "src/app.py"),
            ("src\\pkg\\mod.py", "src/pkg/mod.py"),
            ("C:\\work\\app.py", "c:/work/app.py"),
            ("/a//b/", "/a/b"),
            ("", ""),
        ],
    )
    def test_normalise(self, raw: str, expected: str) -> None:
        assert normalise_path(raw) == expected


class TestPathMatches:
    def test_suffix_on_separator_boundary(self) -> None:
        assert path_matches("src/app.py", "/home/me/proj/src/app.py")

    def test_partial_name_does_not_match(self) -> None:
        assert not path_matches("app.py", "/home/me/proj/myapp.py")

    def test_empty_never_matches(self) -> None:
        assert not path_matches("", "/x.py")


class TestSectionFinder:
    """Tests for SectionFinder.find_sections_for_file."""

    def test_relative_section_resolved_against_folder(self, tmp_path: Path) -> None:
        target = tmp_path / "src" / "app.py"
        section = make_section("t", "src/app.py", lines=[LineDetail(1, 1)])
        other = make_section("t", "src/other.py", lines=[LineDetail(1, 1)])

        found = SectionFinder([tmp_path]).find_sections_for_file(
            target, {section.key: section, other.key: other}
        )
        assert found == [section]

    def test_absolute_section(self, tmp_path: Path) -> None:
        target = (tmp_path / "lib.py").resolve()
        section = make_section("t", target.as_posix())
        found = SectionFinder([tmp_path]).find_sections_for_file(target, {section.key: section})
        assert found == [section]

    def test_all_titles_for_one_file_in_map_order(self, tmp_path: Path) -> None:
        target = tmp_path / "app.py"
        unit = make_section("unit", "app.py")
        integration = make_section("integration", "app.py")
        sections = {integration.key: integration, unit.key: unit}

        found = SectionFinder([tmp_path]).find_sections_for_file(target, sections)
        assert found == [integration, unit]

    def test_second_workspace_folder(self, tmp_path: Path) -> None:
        first = tmp_path / "one"
        second = tmp_path / "two"
        section = make_section("t", "pkg/mod.py")

        found = SectionFinder([first, second]).find_sections_for_file(
            second / "pkg" / "mod.py", {section.key: section}
        )
        assert found == [section]

    def test_suffix_fallback_outside_workspace_folders(self, tmp_path: Path) -> None:
        section = make_section("t", "src/app.py")
        found = SectionFinder([tmp_path / "elsewhere"]).find_sections_for_file(
            tmp_path / "src" / "app.py", {section.key: section}
        )
        assert found == [section]

    def test_no_match(self, tmp_path: Path) -> None:
        section = make_section("t", "src/app.py")
        found = SectionFinder([tmp_path]).find_sections_for_file(
            tmp_path / "README.md", {section.key: section}
        )
        assert found == []
