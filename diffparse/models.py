"""Immutable diff model produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FileMode(str, Enum):
    """Status of a file entry in a diff."""

    MODIFIED = "modified"
    DELETED = "deleted"
    NEW = "new"
    RENAMED = "renamed"


class LineMode(str, Enum):
    """Classification of a content line inside a hunk."""

    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single content line within a diff hunk.

    ``number`` is the line number in the side's file version, ``position`` the
    1-based index of the line within its hunk and ``diff_position`` the offset
    from the file's first hunk header, counting every physical line.
    """

    mode: LineMode
    number: int
    content: str
    position: int
    diff_position: int


@dataclass(frozen=True, slots=True)
class DiffRange:
    """One side of a hunk."""

    start: int
    length: int
    lines: tuple[DiffLine, ...] = ()


@dataclass(frozen=True, slots=True)
class DiffHunk:
    """A contiguous change region with independent old/new numbering."""

    orig_range: DiffRange
    new_range: DiffRange
    whole_range: DiffRange
    section: str = ""

    @property
    def length(self) -> int:
        """Displayed line count, including the ``@@`` header."""
        return len(self.whole_range.lines) + 1


@dataclass(frozen=True, slots=True)
class DiffFile:
    """A parsed file entry."""

    mode: FileMode
    orig_name: str = ""
    new_name: str = ""
    similarity_index: int = 0
    diff_header: str = ""
    hunks: tuple[DiffHunk, ...] = ()
    additions: int = 0
    deletions: int = 0
    binary: bool = False

    @property
    def path(self) -> str:
        """Best-effort canonical path for reporting."""
        if self.new_name:
            return self.new_name
        if self.orig_name:
            return self.orig_name
        return "<unknown>"


@dataclass(frozen=True, slots=True)
class Diff:
    """The parse result: ordered file entries plus the raw input."""

    files: tuple[DiffFile, ...] = ()
    raw: str = field(default="", repr=False)

    @property
    def additions(self) -> int:
        return sum(item.additions for item in self.files)

    @property
    def deletions(self) -> int:
        return sum(item.deletions for item in self.files)

    def changed(self) -> dict[str, list[int]]:
        """Map each new-file name to the line numbers added in it.

        Deleted files are ignored.
        """
        changed: dict[str, list[int]] = {}
        for diff_file in self.files:
            if diff_file.mode is FileMode.DELETED:
                continue
            for hunk in diff_file.hunks:
                for line in hunk.new_range.lines:
                    if line.mode is LineMode.ADDED:
                        changed.setdefault(diff_file.new_name, []).append(line.number)
        return {name: sorted(set(numbers)) for name, numbers in changed.items()}

    def removed(self) -> dict[str, list[int]]:
        """Map each original-file name to the line numbers removed from it.

        New files are ignored.
        """
        removed: dict[str, list[int]] = {}
        for diff_file in self.files:
            if diff_file.mode is FileMode.NEW:
                continue
            for hunk in diff_file.hunks:
                for line in hunk.orig_range.lines:
                    if line.mode is LineMode.REMOVED:
                        removed.setdefault(diff_file.orig_name, []).append(line.number)
        return {name: sorted(set(numbers)) for name, numbers in removed.items()}
