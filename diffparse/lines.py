"""Classification of content lines inside a hunk."""

from __future__ import annotations

from diffparse.errors import UnrecognizedLineMode
from diffparse.models import LineMode

NO_NEWLINE_MARKER = "\\ No newline at end of file"

_LINE_MODES = {
    " ": LineMode.UNCHANGED,
    "+": LineMode.ADDED,
    "-": LineMode.REMOVED,
}


def is_no_newline_marker(line: str) -> bool:
    return line == NO_NEWLINE_MARKER


def classify_line(line: str, line_number: int) -> LineMode:
    """Return the mode of a hunk content line from its first character."""
    mode = _LINE_MODES.get(line[:1])
    if mode is None:
        raise UnrecognizedLineMode(line_number=line_number, line=line)
    return mode
