"""Recognition of file headers and hunk headers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from re import Match, compile

from diffparse.errors import MalformedBinaryMarker, MalformedHunkHeader
from diffparse.filenames import decode_filename, strip_ab_prefix

DEV_NULL = "/dev/null"

HUNK_HEADER_RE = compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))? "
    r"\+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@(?P<section>.*)$"
)
SIMILARITY_RE = compile(r"^similarity index (?P<value>\d+)%$")
_QUOTED_OR_BARE = r'"(?:[^"\\]|\\.)*"|\S+'
DIFF_GIT_RE = compile(rf"^diff --git (?P<old>{_QUOTED_OR_BARE}) (?P<new>{_QUOTED_OR_BARE})$")

DIFF_PREFIX = "diff "
DIFF_GIT_PREFIX = "diff --git "
INDEX_PREFIX = "index "
OLD_FILE_PREFIX = "--- "
NEW_FILE_PREFIX = "+++ "
SIMILARITY_PREFIX = "similarity index "
RENAME_FROM_PREFIX = "rename from "
RENAME_TO_PREFIX = "rename to "
BINARY_PREFIX = "Binary files "
BINARY_SUFFIX = " differ"
NEW_FILE_MODE_PREFIX = "new file mode "
DELETED_FILE_MODE_PREFIX = "deleted file mode "
HUNK_PREFIX = "@@"

# Lines with these prefixes end an open hunk; "--- "/"+++ " are decided by
# the hunk's remaining declared lengths instead.
HUNK_BREAK_PREFIXES = (
    DIFF_PREFIX,
    HUNK_PREFIX,
    INDEX_PREFIX,
    SIMILARITY_PREFIX,
    RENAME_FROM_PREFIX,
    RENAME_TO_PREFIX,
    BINARY_PREFIX,
    NEW_FILE_MODE_PREFIX,
    DELETED_FILE_MODE_PREFIX,
)


@dataclass(slots=True)
class HunkHeader:
    """Parsed hunk header values."""

    orig_start: int
    orig_length: int
    new_start: int
    new_length: int
    section: str


class HeaderKind(str, Enum):
    """Variants of the lines that open or annotate a file entry."""

    DIFF = "diff"
    INDEX = "index"
    SIMILARITY = "similarity"
    RENAME_FROM = "rename_from"
    RENAME_TO = "rename_to"
    OLD_NULL = "old_null"
    NEW_NULL = "new_null"
    OLD_FILE = "old_file"
    NEW_FILE = "new_file"
    BINARY = "binary"
    NEW_FILE_MODE = "new_file_mode"
    DELETED_FILE_MODE = "deleted_file_mode"
    HUNK = "hunk"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class HeaderLine:
    """A classified header line with the values it carries.

    Binary markers keep ``/dev/null`` as the name of the missing side.
    """

    kind: HeaderKind
    orig_name: str = ""
    new_name: str = ""
    similarity_index: int = 0


def breaks_hunk(line: str) -> bool:
    return line.startswith(HUNK_BREAK_PREFIXES)


def classify_header(line: str, line_number: int) -> HeaderLine:
    """Classify a line seen outside hunk content; first match wins."""
    if line.startswith(DIFF_PREFIX):
        orig_name, new_name = _parse_diff_git_names(line)
        return HeaderLine(HeaderKind.DIFF, orig_name=orig_name, new_name=new_name)

    if line.startswith(SIMILARITY_PREFIX):
        match = SIMILARITY_RE.match(line)
        if match is None:
            return HeaderLine(HeaderKind.UNKNOWN)
        return HeaderLine(HeaderKind.SIMILARITY, similarity_index=int(match.group("value")))

    if line.startswith(RENAME_FROM_PREFIX):
        name = decode_filename(line[len(RENAME_FROM_PREFIX) :], strip_prefix=False)
        return HeaderLine(HeaderKind.RENAME_FROM, orig_name=name)

    if line.startswith(RENAME_TO_PREFIX):
        name = decode_filename(line[len(RENAME_TO_PREFIX) :], strip_prefix=False)
        return HeaderLine(HeaderKind.RENAME_TO, new_name=name)

    if line.startswith(OLD_FILE_PREFIX):
        name = decode_filename(line[len(OLD_FILE_PREFIX) :])
        if name == DEV_NULL:
            return HeaderLine(HeaderKind.OLD_NULL)
        return HeaderLine(HeaderKind.OLD_FILE, orig_name=name)

    if line.startswith(NEW_FILE_PREFIX):
        name = decode_filename(line[len(NEW_FILE_PREFIX) :])
        if name == DEV_NULL:
            return HeaderLine(HeaderKind.NEW_NULL)
        return HeaderLine(HeaderKind.NEW_FILE, new_name=name)

    if line.startswith(BINARY_PREFIX):
        orig_name, new_name = _parse_binary_names(line, line_number)
        return HeaderLine(HeaderKind.BINARY, orig_name=orig_name, new_name=new_name)

    if line.startswith(HUNK_PREFIX):
        return HeaderLine(HeaderKind.HUNK)
    if line.startswith(INDEX_PREFIX):
        return HeaderLine(HeaderKind.INDEX)
    if line.startswith(NEW_FILE_MODE_PREFIX):
        return HeaderLine(HeaderKind.NEW_FILE_MODE)
    if line.startswith(DELETED_FILE_MODE_PREFIX):
        return HeaderLine(HeaderKind.DELETED_FILE_MODE)
    return HeaderLine(HeaderKind.UNKNOWN)


def parse_hunk_header(header: str, line_number: int) -> HunkHeader:
    """Parse ``@@ -A[,B] +C[,D] @@ [section]``; omitted counts default to 1."""
    match: Match[str] | None = HUNK_HEADER_RE.match(header)
    if match is None:
        raise MalformedHunkHeader(line_number=line_number, line=header)

    orig_length = int(match.group("old_count")) if match.group("old_count") else 1
    new_length = int(match.group("new_count")) if match.group("new_count") else 1

    return HunkHeader(
        orig_start=int(match.group("old_start")),
        orig_length=orig_length,
        new_start=int(match.group("new_start")),
        new_length=new_length,
        section=match.group("section").strip(),
    )


def _parse_diff_git_names(line: str) -> tuple[str, str]:
    if not line.startswith(DIFF_GIT_PREFIX):
        return ("", "")

    match = DIFF_GIT_RE.match(line)
    if match is not None:
        return (decode_filename(match.group("old")), decode_filename(match.group("new")))

    # Unquoted names containing spaces: "a/<name> b/<name>" splits in the middle.
    rest = line[len(DIFF_GIT_PREFIX) :]
    middle = len(rest) // 2
    old_token, new_token = rest[:middle], rest[middle + 1 :]
    if (
        len(rest) % 2 == 1
        and rest[middle] == " "
        and old_token.startswith("a/")
        and new_token.startswith("b/")
        and old_token[2:] == new_token[2:]
    ):
        return (strip_ab_prefix(old_token), strip_ab_prefix(new_token))
    return ("", "")


def _parse_binary_names(line: str, line_number: int) -> tuple[str, str]:
    body = line[len(BINARY_PREFIX) :]
    if body.endswith(BINARY_SUFFIX):
        body = body[: -len(BINARY_SUFFIX)]
    names = body.split(" and ")
    if len(names) != 2:
        raise MalformedBinaryMarker(line_number=line_number, line=line)
    return (decode_filename(names[0]), decode_filename(names[1]))
