"""Tests for header and content-line classification."""

from __future__ import annotations

import pytest

from diffparse.errors import MalformedBinaryMarker, MalformedHunkHeader, UnrecognizedLineMode
from diffparse.headers import HeaderKind, breaks_hunk, classify_header, parse_hunk_header
from diffparse.lines import NO_NEWLINE_MARKER, classify_line, is_no_newline_marker
from diffparse.models import LineMode


def test_parse_hunk_header_full() -> None:
    header = parse_hunk_header("@@ -12,7 +13,9 @@ class Parser:", 1)
    assert (header.orig_start, header.orig_length) == (12, 7)
    assert (header.new_start, header.new_length) == (13, 9)
    assert header.section == "class Parser:"


def test_parse_hunk_header_omitted_counts_default_to_one() -> None:
    header = parse_hunk_header("@@ -1 +1,2 @@", 1)
    assert (header.orig_length, header.new_length) == (1, 2)
    header = parse_hunk_header("@@ -5 +7 @@", 1)
    assert (header.orig_start, header.orig_length, header.new_start, header.new_length) == (
        5,
        1,
        7,
        1,
    )


def test_parse_hunk_header_zero_length() -> None:
    header = parse_hunk_header("@@ -0,0 +1,3 @@", 1)
    assert (header.orig_start, header.orig_length) == (0, 0)


@pytest.mark.parametrize("line", ["@@ -x +1 @@", "@@ -1 @@", "@@ +1,2 -1 @@", "@@@ -1 +1 @@@"])
def test_parse_hunk_header_rejects_malformed(line: str) -> None:
    with pytest.raises(MalformedHunkHeader):
        parse_hunk_header(line, 7)


@pytest.mark.parametrize(
    ("line", "kind"),
    [
        ("diff --git a/x b/x", HeaderKind.DIFF),
        ("diff -u old/x new/x", HeaderKind.DIFF),
        ("index 3f5a0a4..0e3ad28 100644", HeaderKind.INDEX),
        ("similarity index 90%", HeaderKind.SIMILARITY),
        ("similarity index ninety", HeaderKind.UNKNOWN),
        ("rename from a.txt", HeaderKind.RENAME_FROM),
        ("rename to b.txt", HeaderKind.RENAME_TO),
        ("--- /dev/null", HeaderKind.OLD_NULL),
        ("+++ /dev/null", HeaderKind.NEW_NULL),
        ("--- /dev/null\t1970-01-01 00:00:00 +0000", HeaderKind.OLD_NULL),
        ("--- a/x", HeaderKind.OLD_FILE),
        ("+++ b/x", HeaderKind.NEW_FILE),
        ("Binary files a/x and b/x differ", HeaderKind.BINARY),
        ("new file mode 100644", HeaderKind.NEW_FILE_MODE),
        ("deleted file mode 100644", HeaderKind.DELETED_FILE_MODE),
        ("@@ -1 +1 @@", HeaderKind.HUNK),
        ("old mode 100644", HeaderKind.UNKNOWN),
        ("", HeaderKind.UNKNOWN),
    ],
)
def test_classify_header_kinds(line: str, kind: HeaderKind) -> None:
    assert classify_header(line, 1).kind is kind


def test_classify_header_values() -> None:
    assert classify_header("similarity index 42%", 1).similarity_index == 42
    assert classify_header("rename from dir/a b.txt", 1).orig_name == "dir/a b.txt"
    assert classify_header("rename to a/kept.txt", 1).new_name == "a/kept.txt"
    assert classify_header("--- a/src/x.py", 1).orig_name == "src/x.py"
    assert classify_header("+++ b/src/x.py", 1).new_name == "src/x.py"


def test_classify_diff_git_names() -> None:
    header = classify_header("diff --git a/src/x.py b/src/y.py", 1)
    assert (header.orig_name, header.new_name) == ("src/x.py", "src/y.py")

    header = classify_header("diff --git a/with space.txt b/with space.txt", 1)
    assert (header.orig_name, header.new_name) == ("with space.txt", "with space.txt")

    header = classify_header('diff --git "a/caf\\303\\251" "b/caf\\303\\251"', 1)
    assert (header.orig_name, header.new_name) == ("café", "café")

    header = classify_header("diff --git a/one two b/three four", 1)
    assert (header.orig_name, header.new_name) == ("", "")


def test_classify_binary_keeps_dev_null() -> None:
    header = classify_header("Binary files /dev/null and b/img.png differ", 1)
    assert (header.orig_name, header.new_name) == ("/dev/null", "img.png")


def test_classify_binary_rejects_wrong_name_count() -> None:
    with pytest.raises(MalformedBinaryMarker) as exc_info:
        classify_header("Binary files a/x and b/y and c/z differ", 4)
    assert exc_info.value.line_number == 4


def test_breaks_hunk() -> None:
    assert breaks_hunk("diff --git a/x b/x")
    assert breaks_hunk("@@ -1 +1 @@")
    assert breaks_hunk("rename to y")
    assert not breaks_hunk(" context")
    assert not breaks_hunk("--- a/x")


@pytest.mark.parametrize(
    ("line", "mode"),
    [
        (" same", LineMode.UNCHANGED),
        (" ", LineMode.UNCHANGED),
        ("+added", LineMode.ADDED),
        ("-removed", LineMode.REMOVED),
        ("--- not a header here", LineMode.REMOVED),
    ],
)
def test_classify_line(line: str, mode: LineMode) -> None:
    assert classify_line(line, 1) is mode


@pytest.mark.parametrize("line", ["", "*star", "\\ something else", "index 123"])
def test_classify_line_rejects_unknown_prefix(line: str) -> None:
    with pytest.raises(UnrecognizedLineMode):
        classify_line(line, 9)


def test_no_newline_marker() -> None:
    assert is_no_newline_marker(NO_NEWLINE_MARKER)
    assert is_no_newline_marker("\\ No newline at end of file")
    assert not is_no_newline_marker("\\ No newline at end of file ")
