"""Unified diff parser: a single left-to-right pass over the document."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import structlog

from diffparse.builder import FileBuilder, HunkBuilder, LineCursor
from diffparse.headers import (
    NEW_FILE_PREFIX,
    OLD_FILE_PREFIX,
    HeaderKind,
    HeaderLine,
    breaks_hunk,
    classify_header,
    parse_hunk_header,
)
from diffparse.lines import classify_line, is_no_newline_marker
from diffparse.models import Diff

logger = structlog.get_logger(__name__)

_SECTION_START_KINDS = frozenset({HeaderKind.OLD_FILE, HeaderKind.OLD_NULL, HeaderKind.BINARY})


class ParserState(str, Enum):
    HEADER = "header"
    IN_HUNK = "in_hunk"


def parse_diff(diff_text: str) -> Diff:
    """Parse ``diff -u`` / ``git diff`` text into file/hunk/range/line models.

    Raises a ``DiffParseError`` subclass for the first unparsable structural
    line; there is no partial result.
    """
    assembler = _DiffAssembler()
    lines = diff_text.split("\n")
    for line_number, line in enumerate(lines, start=1):
        assembler.feed(line, line_number)

    diff = Diff(files=tuple(item.build() for item in assembler.files), raw=diff_text)
    logger.debug(
        "diff.parsed",
        files=len(diff.files),
        lines=len(lines),
        additions=diff.additions,
        deletions=diff.deletions,
    )
    return diff


def parse_diff_file(path: Path) -> Diff:
    """Read and parse a UTF-8 diff file."""
    return parse_diff(path.read_text(encoding="utf-8"))


class _DiffAssembler:
    """Per-parse state; never shared between parses."""

    def __init__(self) -> None:
        self.files: list[FileBuilder] = []
        self.state = ParserState.HEADER
        self.current_file: FileBuilder | None = None
        self.current_hunk: HunkBuilder | None = None
        self.cursor = LineCursor(old_number=0, new_number=0)
        # Physical lines since the file's first hunk header; None before it.
        self.file_offset: int | None = None

    def feed(self, line: str, line_number: int) -> None:
        if self.file_offset is not None:
            self.file_offset += 1

        if self.state is ParserState.IN_HUNK:
            if self._consume_hunk_line(line, line_number):
                return
            self.state = ParserState.HEADER
            self.current_hunk = None

        self._consume_header_line(classify_header(line, line_number), line, line_number)

    def _consume_hunk_line(self, line: str, line_number: int) -> bool:
        """Handle a line while a hunk is open; False closes the hunk."""
        hunk = self.current_hunk
        assert hunk is not None and self.file_offset is not None

        if line == "" or is_no_newline_marker(line):
            return True
        if line.startswith(OLD_FILE_PREFIX):
            if hunk.orig_remaining <= 0:
                return False
        elif line.startswith(NEW_FILE_PREFIX):
            if hunk.new_remaining <= 0:
                return False
        elif breaks_hunk(line):
            return False

        mode = classify_line(line, line_number)
        self.cursor = hunk.append(self.cursor, mode, line[1:], self.file_offset)
        return True

    def _consume_header_line(self, header: HeaderLine, line: str, line_number: int) -> None:
        kind = header.kind
        if kind is HeaderKind.HUNK:
            self._start_hunk(line, line_number)
            return

        current = self.current_file
        if kind is HeaderKind.UNKNOWN:
            if current is not None:
                current.capture_header(header, line)
            return

        # A "diff" line always opens an entry. Without one ("diff -r" and plain
        # "diff -u" output), a "---" or "Binary files" line after hunks or
        # after a binary marker starts the next entry.
        if (
            current is None
            or kind is HeaderKind.DIFF
            or (kind in _SECTION_START_KINDS and (current.hunks or current.binary))
        ):
            current = self._start_file()

        current.capture_header(header, line)
        current.apply(header)

    def _start_file(self) -> FileBuilder:
        file_builder = FileBuilder()
        self.files.append(file_builder)
        self.current_file = file_builder
        self.current_hunk = None
        self.file_offset = None
        return file_builder

    def _start_hunk(self, line: str, line_number: int) -> None:
        header = parse_hunk_header(line, line_number)
        current = self.current_file if self.current_file is not None else self._start_file()
        if not current.hunks:
            self.file_offset = 0

        self.current_hunk = HunkBuilder(header)
        current.hunks.append(self.current_hunk)
        self.cursor = LineCursor.start(header)
        self.state = ParserState.IN_HUNK
