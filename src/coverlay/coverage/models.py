"""Canonical coverage section model.

Every format parser produces these structures; the merger, section finder and
classifier consume nothing else.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field, replace
from typing import Generic, TypeVar

SECTION_KEY_DELIMITER = "::"

# =============================================================================
# Details
# =============================================================================


@dataclass
class LineDetail:
    """Execution record of a single 1-based source line."""

    line: int
    hit: int = 0


@dataclass
class BranchDetail:
    """Taken-or-not record of one conditional branch."""

    line: int
    block: int
    branch: int
    taken: int = 0

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.line, self.block, self.branch)


@dataclass
class FunctionDetail:
    """Function entry record (name, declaring line, call count)."""

    name: str
    line: int
    hit: int = 0


DetailT = TypeVar("DetailT", LineDetail, BranchDetail, FunctionDetail)


def _line_key(detail: LineDetail) -> Hashable:
    return detail.line


def _branch_key(detail: BranchDetail) -> Hashable:
    return detail.key


def _function_key(detail: FunctionDetail) -> Hashable:
    return (detail.name, detail.line)


def _counter(detail: LineDetail | BranchDetail | FunctionDetail) -> int:
    if isinstance(detail, BranchDetail):
        return detail.taken
    return detail.hit


@dataclass
class CoverageDetails(Generic[DetailT]):
    """An ordered list of details with its found/hit totals."""

    details: list[DetailT] = field(default_factory=list)
    found: int = 0
    hit: int = 0

    @classmethod
    def from_details(
        cls,
        details: Iterable[DetailT],
        key: Callable[[DetailT], Hashable] | None = None,
    ) -> CoverageDetails[DetailT]:
        """Build details with found/hit recomputed from the entries.

        found counts distinct keys; hit counts entries with a positive counter.
        """
        items = list(details)
        if key is None:
            key = _key_for(items[0]) if items else _line_key  # type: ignore[assignment]
        found = len({key(d) for d in items})  # type: ignore[misc]
        hit = sum(1 for d in items if _counter(d) > 0)
        return cls(details=items, found=found, hit=hit)

    def copy(self) -> CoverageDetails[DetailT]:
        return CoverageDetails(
            details=[replace(d) for d in self.details],
            found=self.found,
            hit=self.hit,
        )


def _key_for(detail: LineDetail | BranchDetail | FunctionDetail) -> Callable[..., Hashable]:
    if isinstance(detail, BranchDetail):
        return _branch_key
    if isinstance(detail, FunctionDetail):
        return _function_key
    return _line_key


# =============================================================================
# Section
# =============================================================================


@dataclass
class Section:
    """One logical source file's coverage as reported by one parsed input.

    `title` and `file` together form the identity used to merge sections that
    different reports produced for the same file.
    """

    title: str
    file: str
    lines: CoverageDetails[LineDetail] | None = field(default_factory=CoverageDetails)
    branches: CoverageDetails[BranchDetail] | None = None
    functions: CoverageDetails[FunctionDetail] | None = None

    @property
    def key(self) -> str:
        return section_key(self.title, self.file)

    def copy(self) -> Section:
        return Section(
            title=self.title,
            file=self.file,
            lines=self.lines.copy() if self.lines is not None else None,
            branches=self.branches.copy() if self.branches is not None else None,
            functions=self.functions.copy() if self.functions is not None else None,
        )


def section_key(title: str, file: str) -> str:
    """Merge key of a section: `"{title}::{file}"`."""
    return SECTION_KEY_DELIMITER.join((title, file))


def make_section(
    title: str,
    file: str,
    lines: Iterable[LineDetail] = (),
    branches: Iterable[BranchDetail] | None = None,
    functions: Iterable[FunctionDetail] | None = None,
) -> Section:
    """Build a section with all totals derived from its details."""
    return Section(
        title=title,
        file=file,
        lines=CoverageDetails.from_details(lines, _line_key),
        branches=(
            CoverageDetails.from_details(branches, _branch_key) if branches is not None else None
        ),
        functions=(
            CoverageDetails.from_details(functions, _function_key)
            if functions is not None
            else None
        ),
    )
