"""Errors raised while parsing unified diff text."""

from __future__ import annotations


class DiffParseError(ValueError):
    """Raised when a structural line of a diff cannot be parsed."""

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        super().__init__(f"{message} at line {line_number}: {line!r}")
        self.line_number = line_number
        self.line = line


class MalformedHunkHeader(DiffParseError):
    """An ``@@`` line whose ranges cannot be parsed."""

    def __init__(self, *, line_number: int, line: str) -> None:
        super().__init__("Invalid hunk header", line_number=line_number, line=line)


class UnrecognizedLineMode(DiffParseError):
    """A line inside a hunk that is not context, addition or removal."""

    def __init__(self, *, line_number: int, line: str) -> None:
        super().__init__("Could not parse line mode", line_number=line_number, line=line)


class MalformedBinaryMarker(DiffParseError):
    """A ``Binary files`` line that does not name exactly two files."""

    def __init__(self, *, line_number: int, line: str) -> None:
        super().__init__("Invalid binary diff", line_number=line_number, line=line)
