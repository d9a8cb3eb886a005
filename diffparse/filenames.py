"""Filename tokens as written in diff headers.

Git wraps names that contain quotes, backslashes, control or non-ASCII
characters in double quotes and writes their UTF-8 bytes as C-style escapes,
e.g. ``"b/caf\\303\\251.txt"``.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)

_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}
_ESCAPE_NAMES = {value: key for key, value in _ESCAPES.items()}
_OCTAL_DIGITS = frozenset("01234567")


def decode_filename(token: str, *, strip_prefix: bool = True) -> str:
    """Return the filename carried by a header token.

    Malformed quoting never raises: the token is returned unchanged.
    """
    if not token.startswith('"'):
        name = token.split("\t", 1)[0]
        return strip_ab_prefix(name) if strip_prefix else name

    body = _quoted_body(token)
    if body is None:
        logger.warning("filename_decode_failed", token=token, error="unterminated quote")
        return token
    if strip_prefix:
        body = strip_ab_prefix(body)
    try:
        return _unescape(body)
    except ValueError as exc:
        logger.warning("filename_decode_failed", token=token, error=str(exc))
        return token


def encode_filename(name: str, prefix: str = "") -> str:
    """Quote ``prefix + name`` the way git does, only when needed."""
    value = prefix + name
    if not any(_needs_quoting(char) for char in value):
        return value

    parts = ['"']
    for byte in value.encode("utf-8"):
        char = chr(byte)
        if char in _ESCAPE_NAMES:
            parts.append("\\" + _ESCAPE_NAMES[char])
        elif byte < 0x20 or byte >= 0x7F:
            parts.append(f"\\{byte:03o}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def strip_ab_prefix(path: str) -> str:
    if path.startswith("a/") or path.startswith("b/"):
        return path[2:]
    return path


def _needs_quoting(char: str) -> bool:
    return char in {'"', "\\"} or ord(char) < 0x20 or ord(char) >= 0x7F


def _quoted_body(token: str) -> str | None:
    index = 1
    while index < len(token):
        char = token[index]
        if char == "\\":
            index += 2
            continue
        if char == '"':
            return token[1:index]
        index += 1
    return None


def _unescape(body: str) -> str:
    output = bytearray()
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\":
            output += char.encode("utf-8")
            index += 1
            continue

        escape = body[index + 1 : index + 2]
        if escape in _ESCAPES:
            output += _ESCAPES[escape].encode("ascii")
            index += 2
            continue

        digits = body[index + 1 : index + 4]
        if len(digits) != 3 or not set(digits) <= _OCTAL_DIGITS:
            raise ValueError(f"invalid escape sequence at offset {index}")
        value = int(digits, 8)
        if value > 0xFF:
            raise ValueError(f"octal escape out of range at offset {index}")
        output.append(value)
        index += 4

    return output.decode("utf-8")
