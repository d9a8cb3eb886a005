"""Parse unified/git diff text into a structured, queryable model."""

from diffparse.errors import (
    DiffParseError,
    MalformedBinaryMarker,
    MalformedHunkHeader,
    UnrecognizedLineMode,
)
from diffparse.models import Diff, DiffFile, DiffHunk, DiffLine, DiffRange, FileMode, LineMode
from diffparse.parser import parse_diff, parse_diff_file

__version__ = "0.1.0"

__all__ = [
    "Diff",
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffParseError",
    "DiffRange",
    "FileMode",
    "LineMode",
    "MalformedBinaryMarker",
    "MalformedHunkHeader",
    "UnrecognizedLineMode",
    "__version__",
    "parse_diff",
    "parse_diff_file",
]
