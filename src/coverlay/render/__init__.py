"""Classification of merged coverage into editor decorations."""

from coverlay.render.classifier import CoverageSets, LineClassifier, LineState, classify
from coverlay.render.finder import SectionFinder
from coverlay.render.ranges import Range, compress_lines, lines_to_ranges
from coverlay.render.renderer import (
    CoverageLines,
    DecorationChannel,
    Renderer,
    RenderGeneration,
    TextEditor,
)
from coverlay.render.terminal import TerminalEditor

__all__ = [
    "CoverageLines",
    "CoverageSets",
    "DecorationChannel",
    "LineClassifier",
    "LineState",
    "Range",
    "RenderGeneration",
    "Renderer",
    "SectionFinder",
    "TerminalEditor",
    "TextEditor",
    "classify",
    "compress_lines",
    "lines_to_ranges",
]
