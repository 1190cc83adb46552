"""Section merging.

Sections sharing a `title::file` identity, coming from different reports, are
folded into one cumulative section. The fold counts observations: for every
line (or branch) already known, each incoming report that saw it executed
adds exactly one to its counter, whatever magnitude that report recorded. A
merged counter therefore means "number of runs that exercised this", not a
sum of raw execution counts.

Because of that rule the fold is order-sensitive; callers must feed sections
in a fixed order.
"""

from __future__ import annotations

from collections.abc import Iterable, MutableMapping
from dataclasses import replace

import structlog

from coverlay.coverage.models import (
    BranchDetail,
    CoverageDetails,
    LineDetail,
    Section,
)

logger = structlog.get_logger()


def merge_line_coverage(
    existing: CoverageDetails[LineDetail] | None,
    incoming: CoverageDetails[LineDetail] | None,
) -> CoverageDetails[LineDetail] | None:
    """Fold incoming line details into existing ones (+1 per observation)."""
    if incoming is None:
        return existing.copy() if existing is not None else None
    if existing is None:
        return incoming.copy()

    hits = {d.line for d in incoming.details if d.hit > 0}
    seen: set[int] = set()
    details: list[LineDetail] = []

    for detail in existing.details:
        merged = replace(detail)
        seen.add(merged.line)
        if merged.line in hits:
            merged.hit += 1
        details.append(merged)

    for detail in incoming.details:
        if detail.line not in seen:
            seen.add(detail.line)
            details.append(replace(detail))

    return CoverageDetails(
        details=details,
        found=len(seen),
        hit=sum(1 for d in details if d.hit > 0),
    )


def merge_branch_coverage(
    existing: CoverageDetails[BranchDetail] | None,
    incoming: CoverageDetails[BranchDetail] | None,
) -> CoverageDetails[BranchDetail] | None:
    """Fold incoming branch details into existing ones, keyed by (line, block, branch).

    Missing incoming branch data never downgrades what is already known;
    missing existing branch data adopts the incoming data wholesale.
    """
    if incoming is None:
        return existing.copy() if existing is not None else None
    if existing is None:
        return incoming.copy()

    taken = {d.key for d in incoming.details if d.taken > 0}
    seen: set[tuple[int, int, int]] = set()
    details: list[BranchDetail] = []

    for detail in existing.details:
        merged = replace(detail)
        seen.add(merged.key)
        if merged.key in taken:
            merged.taken += 1
        details.append(merged)

    for detail in incoming.details:
        if detail.key not in seen:
            seen.add(detail.key)
            details.append(replace(detail))

    return CoverageDetails(
        details=details,
        found=len(seen),
        hit=sum(1 for d in details if d.taken > 0),
    )


def merge_sections(existing: Section, incoming: Section) -> Section:
    """Merge two same-identity sections into a new one.

    Identity (title, file) and function records come from `existing`.
    Neither input is modified.
    """
    return Section(
        title=existing.title,
        file=existing.file,
        lines=merge_line_coverage(existing.lines, incoming.lines),
        branches=merge_branch_coverage(existing.branches, incoming.branches),
        functions=existing.functions.copy() if existing.functions is not None else None,
    )


def add_sections(
    coverages: MutableMapping[str, Section],
    sections: Iterable[Section],
) -> MutableMapping[str, Section]:
    """Sequentially fold sections into a map keyed by section identity.

    The first section seen for a key is stored as-is; later ones are merged
    into the running entry in iteration order.
    """
    merged_count = 0
    for section in sections:
        key = section.key
        current = coverages.get(key)
        if current is None:
            coverages[key] = section
            continue
        coverages[key] = merge_sections(current, section)
        merged_count += 1

    logger.debug("sections_folded", keys=len(coverages), merged=merged_count)
    return coverages
