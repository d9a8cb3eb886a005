"""Accumulators that turn classified lines into the immutable model."""

from __future__ import annotations

from dataclasses import dataclass, replace

from diffparse.headers import DEV_NULL, HeaderKind, HeaderLine, HunkHeader
from diffparse.models import DiffFile, DiffHunk, DiffLine, DiffRange, FileMode, LineMode


@dataclass(frozen=True, slots=True)
class LineCursor:
    """Next old/new line numbers and the last hunk-local position handed out."""

    old_number: int
    new_number: int
    position: int = 0

    @classmethod
    def start(cls, header: HunkHeader) -> LineCursor:
        return cls(old_number=header.orig_start, new_number=header.new_start)


class HunkBuilder:
    """Collects the lines of one hunk in appearance order."""

    def __init__(self, header: HunkHeader) -> None:
        self.header = header
        self.orig_lines: list[DiffLine] = []
        self.new_lines: list[DiffLine] = []
        self.whole_lines: list[DiffLine] = []

    @property
    def orig_remaining(self) -> int:
        return self.header.orig_length - len(self.orig_lines)

    @property
    def new_remaining(self) -> int:
        return self.header.new_length - len(self.new_lines)

    def append(
        self, cursor: LineCursor, mode: LineMode, content: str, diff_position: int
    ) -> LineCursor:
        """Record one content line and return the advanced cursor."""
        position = cursor.position + 1

        if mode is LineMode.ADDED:
            line = DiffLine(mode, cursor.new_number, content, position, diff_position)
            self.new_lines.append(line)
            self.whole_lines.append(line)
            return replace(cursor, new_number=cursor.new_number + 1, position=position)

        if mode is LineMode.REMOVED:
            line = DiffLine(mode, cursor.old_number, content, position, diff_position)
            self.orig_lines.append(line)
            self.whole_lines.append(line)
            return replace(cursor, old_number=cursor.old_number + 1, position=position)

        if mode is LineMode.UNCHANGED:
            new_line = DiffLine(mode, cursor.new_number, content, position, diff_position)
            orig_line = DiffLine(mode, cursor.old_number, content, position, diff_position)
            self.new_lines.append(new_line)
            self.orig_lines.append(orig_line)
            self.whole_lines.append(new_line)
            return LineCursor(
                old_number=cursor.old_number + 1,
                new_number=cursor.new_number + 1,
                position=position,
            )

        raise AssertionError(f"unhandled line mode: {mode!r}")

    def build(self) -> DiffHunk:
        header = self.header
        return DiffHunk(
            orig_range=DiffRange(header.orig_start, header.orig_length, tuple(self.orig_lines)),
            new_range=DiffRange(header.new_start, header.new_length, tuple(self.new_lines)),
            # The whole range is numbered in position space: 1..k.
            whole_range=DiffRange(1, len(self.whole_lines), tuple(self.whole_lines)),
            section=header.section,
        )


class FileBuilder:
    """Mutable state of the file entry being parsed."""

    def __init__(self) -> None:
        self.mode = FileMode.MODIFIED
        self.orig_name = ""
        self.new_name = ""
        self.similarity_index = 0
        self.binary = False
        self.renamed = False
        self.header_lines: list[str] = []
        self.hunks: list[HunkBuilder] = []
        self._previous_kind: HeaderKind | None = None
        self._pending_old_line: str | None = None

    def capture_header(self, header: HeaderLine, line: str) -> None:
        """Keep the ``diff`` line, a directly following ``index`` line and the
        ``---``/``+++`` pair as the raw header block."""
        if self.hunks:
            return
        kind = header.kind
        previous, self._previous_kind = self._previous_kind, kind
        pending, self._pending_old_line = self._pending_old_line, None

        if kind is HeaderKind.DIFF:
            self.header_lines.append(line)
        elif kind is HeaderKind.INDEX and previous is HeaderKind.DIFF:
            self.header_lines.append(line)
        elif kind in {HeaderKind.OLD_FILE, HeaderKind.OLD_NULL}:
            self._pending_old_line = line
        elif kind in {HeaderKind.NEW_FILE, HeaderKind.NEW_NULL} and pending is not None:
            self.header_lines.extend([pending, line])

    def apply(self, header: HeaderLine) -> None:
        """Update mode and names from a classified header line."""
        kind = header.kind
        if kind is HeaderKind.DIFF:
            self.orig_name = header.orig_name
            self.new_name = header.new_name
        elif kind is HeaderKind.SIMILARITY:
            self.mode = FileMode.RENAMED
            self.similarity_index = header.similarity_index
        elif kind is HeaderKind.RENAME_FROM:
            self.mode = FileMode.RENAMED
            self.renamed = True
            self.orig_name = header.orig_name
        elif kind is HeaderKind.RENAME_TO:
            self.mode = FileMode.RENAMED
            self.renamed = True
            self.new_name = header.new_name
        elif kind in {HeaderKind.OLD_NULL, HeaderKind.NEW_FILE_MODE}:
            self.mode = FileMode.NEW
            self.orig_name = ""
        elif kind in {HeaderKind.NEW_NULL, HeaderKind.DELETED_FILE_MODE}:
            self.mode = FileMode.DELETED
            self.new_name = ""
        elif kind is HeaderKind.OLD_FILE:
            if not self.renamed:
                self.orig_name = header.orig_name
        elif kind is HeaderKind.NEW_FILE:
            if not self.renamed:
                self.new_name = header.new_name
        elif kind is HeaderKind.BINARY:
            self._apply_binary(header)

    def _apply_binary(self, header: HeaderLine) -> None:
        self.binary = True
        if self.renamed:
            return
        self.mode = FileMode.MODIFIED
        self.orig_name = header.orig_name
        self.new_name = header.new_name
        if self.orig_name == DEV_NULL:
            self.mode = FileMode.NEW
            self.orig_name = ""
        if self.new_name == DEV_NULL:
            self.mode = FileMode.DELETED
            self.new_name = ""

    def build(self) -> DiffFile:
        hunks = tuple(item.build() for item in self.hunks)
        additions = 0
        deletions = 0
        for hunk in hunks:
            for line in hunk.whole_range.lines:
                if line.mode is LineMode.ADDED:
                    additions += 1
                elif line.mode is LineMode.REMOVED:
                    deletions += 1

        # A name on the missing side can come back from a later ---/+++ line.
        orig_name = "" if self.mode is FileMode.NEW else self.orig_name
        new_name = "" if self.mode is FileMode.DELETED else self.new_name

        return DiffFile(
            mode=self.mode,
            orig_name=orig_name,
            new_name=new_name,
            similarity_index=self.similarity_index,
            diff_header="\n".join(self.header_lines),
            hunks=hunks,
            additions=additions,
            deletions=deletions,
            binary=self.binary,
        )
