"""Tests for the coverage section model."""

from coverlay.coverage.models import (
    BranchDetail,
    CoverageDetails,
    FunctionDetail,
    LineDetail,
    Section,
    make_section,
    section_key,
)


class TestSectionKey:
    """Tests for section identity."""

    def test_key_joins_title_and_file(self) -> None:
        assert section_key("unit", "src/app.py") == "unit::src/app.py"

    def test_section_key_property(self) -> None:
        section = make_section("unit", "src/app.py")
        assert section.key == "unit::src/app.py"

    def test_empty_title(self) -> None:
        assert make_section("", "a.py").key == "::a.py"


class TestCoverageDetails:
    """Tests for found/hit derivation."""

    def test_found_counts_distinct_lines(self) -> None:
        details = CoverageDetails.from_details(
            [LineDetail(1, 1), LineDetail(2, 0), LineDetail(1, 3)]
        )
        assert details.found == 2
        assert details.hit == 2

    def test_branch_found_uses_composite_key(self) -> None:
        details = CoverageDetails.from_details(
            [
                BranchDetail(3, 0, 0, 1),
                BranchDetail(3, 0, 1, 0),
                BranchDetail(3, 1, 0, 0),
            ]
        )
        assert details.found == 3
        assert details.hit == 1

    def test_empty(self) -> None:
        details = CoverageDetails.from_details([])
        assert details.found == 0
        assert details.hit == 0

    def test_copy_is_independent(self) -> None:
        original = CoverageDetails.from_details([LineDetail(1, 1)])
        copied = original.copy()
        copied.details[0].hit = 9
        assert original.details[0].hit == 1


class TestMakeSection:
    """Tests for make_section."""

    def test_without_branches(self) -> None:
        section = make_section("t", "f", lines=[LineDetail(1, 1)])
        assert section.branches is None
        assert section.functions is None
        assert section.lines is not None
        assert section.lines.found == 1

    def test_with_all_details(self) -> None:
        section = make_section(
            "t",
            "f",
            lines=[LineDetail(1, 1), LineDetail(2, 0)],
            branches=[BranchDetail(1, 0, 0, 0)],
            functions=[FunctionDetail("main", 1, 1)],
        )
        assert section.lines is not None and section.lines.hit == 1
        assert section.branches is not None and section.branches.found == 1
        assert section.branches.hit == 0
        assert section.functions is not None and section.functions.hit == 1

    def test_section_copy(self) -> None:
        section = make_section("t", "f", lines=[LineDetail(1, 1)])
        copied = section.copy()
        assert isinstance(copied, Section)
        assert copied.lines is not None
        copied.lines.details[0].hit = 0
        assert section.lines is not None
        assert section.lines.details[0].hit == 1
