"""Coverage report aggregation.

- models.py: Section and its line/branch/function details
- formats.py: report format detection
- parsers/: one parser per report format
- merge.py: same-identity section merging
- parser.py: concurrent parse + sequential merge of loaded reports
- loader.py: report discovery and loading
"""

from coverlay.coverage.formats import CoverageType, detect_format
from coverlay.coverage.loader import FilesLoader
from coverlay.coverage.merge import add_sections, merge_sections
from coverlay.coverage.models import (
    BranchDetail,
    CoverageDetails,
    FunctionDetail,
    LineDetail,
    Section,
    make_section,
    section_key,
)
from coverlay.coverage.parser import CoverageParser

__all__ = [
    "BranchDetail",
    "CoverageDetails",
    "CoverageParser",
    "CoverageType",
    "FilesLoader",
    "FunctionDetail",
    "LineDetail",
    "Section",
    "add_sections",
    "detect_format",
    "make_section",
    "merge_sections",
    "section_key",
]
