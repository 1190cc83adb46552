"""Locate the merged sections that describe an editor's file."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Mapping
from pathlib import Path

from coverlay.coverage.models import Section


def normalise_path(path: str) -> str:
    """Normalize report/editor paths into comparable posix-ish strings."""
    norm = (path or "").strip().replace("\\", "/")
    while "//" in norm:
        norm = norm.replace("//", "/")
    if norm.startswith("./"):
        norm = norm[2:]
    if len(norm) >= 2 and norm[1] == ":":
        # Drive letters differ in case between tools
        norm = norm[0].lower() + norm[1:]
    return norm.rstrip("/")


def _is_absolute(path: str) -> bool:
    return posixpath.isabs(path) or (len(path) >= 2 and path[1] == ":")


def path_matches(section_file: str, editor_file: str) -> bool:
    """True when one path equals the other or ends with it on a `/` boundary."""
    a = normalise_path(section_file)
    b = normalise_path(editor_file)
    if not a or not b:
        return False
    if a == b:
        return True
    return a.endswith("/" + b) or b.endswith("/" + a)


class SectionFinder:
    """Matches editor files to sections across every workspace folder."""

    def __init__(self, workspace_folders: Iterable[Path]) -> None:
        self._folders = [Path(p).resolve() for p in workspace_folders]

    def _candidates(self, section_file: str) -> list[str]:
        norm = normalise_path(section_file)
        if _is_absolute(norm):
            return [norm]
        return [
            normalise_path(posixpath.normpath((folder / norm).as_posix())) for folder in self._folders
        ]

    def find_sections_for_file(
        self,
        editor_file: Path | str,
        sections: Mapping[str, Section],
    ) -> list[Section]:
        """Every section describing `editor_file`, in map order.

        Exact matches (absolute, or relative to any workspace folder) win; a
        `/`-anchored suffix match is the fallback for reports generated on
        another machine.
        """
        target = normalise_path(Path(editor_file).resolve().as_posix())

        exact = [
            section
            for section in sections.values()
            if target in self._candidates(section.file)
        ]
        if exact:
            return exact

        return [section for section in sections.values() if path_matches(section.file, target)]
