"""Tests for section merging."""

from coverlay.coverage.merge import (
    add_sections,
    merge_branch_coverage,
    merge_line_coverage,
    merge_sections,
)
from coverlay.coverage.models import (
    BranchDetail,
    CoverageDetails,
    FunctionDetail,
    LineDetail,
    Section,
    make_section,
)


def _lines(section: Section) -> dict[int, int]:
    assert section.lines is not None
    return {d.line: d.hit for d in section.lines.details}


def _branches(section: Section) -> dict[tuple[int, int, int], int]:
    assert section.branches is not None
    return {d.key: d.taken for d in section.branches.details}


class TestMergeLineCoverage:
    """Tests for the +1 per observation line fold."""

    def test_incoming_miss_leaves_counter(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(5, 3)])
        b = make_section("t", "f", lines=[LineDetail(5, 0)])
        assert _lines(merge_sections(a, b)) == {5: 3}

    def test_incoming_hit_increments_by_one(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(5, 3)])
        b = make_section("t", "f", lines=[LineDetail(5, 1)])
        assert _lines(merge_sections(a, b)) == {5: 4}

    def test_increment_ignores_incoming_magnitude(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(5, 3)])
        b = make_section("t", "f", lines=[LineDetail(5, 100)])
        assert _lines(merge_sections(a, b)) == {5: 4}

    def test_uncovered_line_becomes_covered(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(1, 0)])
        b = make_section("t", "f", lines=[LineDetail(1, 7)])
        merged = merge_sections(a, b)
        assert _lines(merged) == {1: 1}
        assert merged.lines is not None
        assert merged.lines.hit == 1

    def test_incoming_only_lines_appended(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(1, 1)])
        b = make_section("t", "f", lines=[LineDetail(2, 0), LineDetail(3, 9)])
        merged = merge_sections(a, b)
        assert merged.lines is not None
        assert [(d.line, d.hit) for d in merged.lines.details] == [(1, 1), (2, 0), (3, 9)]

    def test_found_and_hit_recomputed(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(1, 1), LineDetail(2, 0)])
        b = make_section("t", "f", lines=[LineDetail(2, 0), LineDetail(3, 1)])
        merged = merge_sections(a, b)
        assert merged.lines is not None
        assert merged.lines.found == 3
        assert merged.lines.hit == 2

    def test_missing_incoming_lines_keeps_existing(self) -> None:
        existing = CoverageDetails.from_details([LineDetail(1, 1)])
        result = merge_line_coverage(existing, None)
        assert result is not None
        assert [(d.line, d.hit) for d in result.details] == [(1, 1)]


class TestMergeBranchCoverage:
    """Tests for the branch fold keyed by (line, block, branch)."""

    def test_taken_increments_by_one(self) -> None:
        a = make_section("t", "f", branches=[BranchDetail(3, 0, 0, 2), BranchDetail(3, 0, 1, 0)])
        b = make_section("t", "f", branches=[BranchDetail(3, 0, 0, 5), BranchDetail(3, 0, 1, 1)])
        merged = merge_sections(a, b)
        assert _branches(merged) == {(3, 0, 0): 3, (3, 0, 1): 1}
        assert merged.branches is not None
        assert merged.branches.found == 2
        assert merged.branches.hit == 2

    def test_keys_distinguish_block(self) -> None:
        a = make_section("t", "f", branches=[BranchDetail(3, 0, 0, 0)])
        b = make_section("t", "f", branches=[BranchDetail(3, 1, 0, 1)])
        assert _branches(merge_sections(a, b)) == {(3, 0, 0): 0, (3, 1, 0): 1}

    def test_incoming_without_branches_keeps_existing(self) -> None:
        a = make_section("t", "f", branches=[BranchDetail(3, 0, 0, 1)])
        b = make_section("t", "f", lines=[LineDetail(3, 1)])
        assert b.branches is None
        assert _branches(merge_sections(a, b)) == {(3, 0, 0): 1}

    def test_existing_without_branches_adopts_incoming(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(3, 1)])
        b = make_section("t", "f", branches=[BranchDetail(3, 0, 0, 0), BranchDetail(3, 0, 1, 4)])
        assert _branches(merge_sections(a, b)) == {(3, 0, 0): 0, (3, 0, 1): 4}

    def test_both_missing(self) -> None:
        assert merge_branch_coverage(None, None) is None


class TestMergeSections:
    """Tests for merge_sections as a whole."""

    def test_identity_preserved(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(1, 1)])
        b = make_section("t", "f", lines=[LineDetail(2, 1)])
        merged = merge_sections(a, b)
        assert merged.title == "t"
        assert merged.file == "f"
        assert merged.key == a.key

    def test_inputs_not_mutated(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(1, 1)], branches=[BranchDetail(1, 0, 0, 1)])
        b = make_section("t", "f", lines=[LineDetail(1, 1)], branches=[BranchDetail(1, 0, 0, 1)])
        merge_sections(a, b)
        assert _lines(a) == {1: 1}
        assert _branches(a) == {(1, 0, 0): 1}

    def test_functions_come_from_existing(self) -> None:
        a = make_section("t", "f", functions=[FunctionDetail("main", 1, 1)])
        b = make_section("t", "f", functions=[FunctionDetail("other", 2, 1)])
        merged = merge_sections(a, b)
        assert merged.functions is not None
        assert [f.name for f in merged.functions.details] == ["main"]

    def test_order_sensitive(self) -> None:
        a = make_section("t", "f", lines=[LineDetail(1, 5)])
        b = make_section("t", "f", lines=[LineDetail(1, 1)])
        assert _lines(merge_sections(a, b)) == {1: 6}
        assert _lines(merge_sections(b, a)) == {1: 2}


class TestAddSections:
    """Tests for the sequential fold into the identity map."""

    def test_first_section_stored_unchanged(self) -> None:
        section = make_section("t", "f", lines=[LineDetail(1, 3)])
        coverages: dict[str, Section] = {}
        add_sections(coverages, [section])
        assert coverages == {"t::f": section}
        assert coverages["t::f"] is section

    def test_same_key_merged(self) -> None:
        coverages: dict[str, Section] = {}
        add_sections(
            coverages,
            [
                make_section("t", "f", lines=[LineDetail(1, 3)]),
                make_section("t", "f", lines=[LineDetail(1, 2)]),
                make_section("t", "f", lines=[LineDetail(1, 1), LineDetail(2, 0)]),
            ],
        )
        assert list(coverages) == ["t::f"]
        assert _lines(coverages["t::f"]) == {1: 5, 2: 0}
        assert coverages["t::f"].lines is not None
        assert coverages["t::f"].lines.found == 2

    def test_different_titles_not_merged(self) -> None:
        coverages: dict[str, Section] = {}
        add_sections(
            coverages,
            [
                make_section("unit", "f", lines=[LineDetail(1, 1)]),
                make_section("integration", "f", lines=[LineDetail(1, 1)]),
            ],
        )
        assert set(coverages) == {"unit::f", "integration::f"}
