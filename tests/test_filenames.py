"""Tests for header filename decoding."""

from __future__ import annotations

import pytest

from diffparse.filenames import decode_filename, encode_filename


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("a/src/app.py", "src/app.py"),
        ("b/src/app.py", "src/app.py"),
        ("src/app.py", "src/app.py"),
        ("a/old name.md\t", "old name.md"),
        ("old/a.txt\t2024-01-01 10:00:00.000000000 +0000", "old/a.txt"),
        ('"a/caf\\303\\251.txt"', "café.txt"),
        ('"b/with \\"quotes\\".txt"', 'with "quotes".txt'),
        ('"tab\\there"', "tab\there"),
        ('"b/\\346\\227\\245\\346\\234\\254.md"\t2024-01-01', "日本.md"),
    ],
)
def test_decode_filename(token: str, expected: str) -> None:
    assert decode_filename(token) == expected


def test_decode_without_prefix_stripping() -> None:
    assert decode_filename("a/b.txt", strip_prefix=False) == "a/b.txt"
    assert decode_filename('"a/\\303\\251"', strip_prefix=False) == "a/é"


@pytest.mark.parametrize(
    "token",
    [
        '"a/bad\\9.txt"',
        '"a/short\\30"',
        '"a/unknown\\q"',
        '"a/unterminated',
        '"a/not-utf8-\\377"',
    ],
)
def test_malformed_tokens_are_returned_unchanged(token: str) -> None:
    assert decode_filename(token) == token


def test_encode_filename_only_quotes_when_needed() -> None:
    assert encode_filename("src/app.py", "a/") == "a/src/app.py"
    assert encode_filename("old name.md", "b/") == "b/old name.md"
    assert encode_filename("café.txt", "a/") == '"a/caf\\303\\251.txt"'
    assert encode_filename('say "hi"') == '"say \\"hi\\""'


def test_encoded_names_decode_back() -> None:
    for name in ("café.txt", "tab\there", 'q"uote', "back\\slash", "日本.md"):
        assert decode_filename(encode_filename(name, "b/")) == name
