"""Coverlay - merge coverage reports into per-line coverage decorations."""

__version__ = "0.1.0"
