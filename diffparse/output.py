"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from diffparse import __version__
from diffparse.models import Diff, DiffFile, DiffHunk, DiffLine, DiffRange, FileMode

_MODE_COLORS = {
    FileMode.MODIFIED: "yellow",
    FileMode.NEW: "green",
    FileMode.DELETED: "red",
    FileMode.RENAMED: "cyan",
}


def render_human(diff: Diff) -> str:
    """Render a compact colorized summary."""
    lines: list[str] = [
        click.style(
            f"{len(diff.files)} files changed, "
            f"{diff.additions} insertions(+), {diff.deletions} deletions(-)",
            bold=True,
        )
    ]
    for diff_file in diff.files:
        label = click.style(f"{diff_file.mode.value:<8}", fg=_MODE_COLORS[diff_file.mode])
        lines.append(f"{label} {_display_name(diff_file)}")
        if diff_file.binary:
            lines.append("   binary content")
            continue
        lines.append(
            f"   {len(diff_file.hunks)} hunks, "
            f"+{diff_file.additions} -{diff_file.deletions}"
        )
    return "\n".join(lines)


def render_json(diff: Diff, *, input_source: str) -> str:
    """Render stable JSON output for CI and automation."""
    return json.dumps(build_json_payload(diff, input_source=input_source), sort_keys=True)


def render_changed_json(diff: Diff) -> str:
    return json.dumps(diff.changed(), sort_keys=True)


def build_json_payload(diff: Diff, *, input_source: str) -> dict[str, Any]:
    """Build stable JSON payload for CI and automation."""
    return {
        "files": [_serialize_file(item) for item in diff.files],
        "totals": {
            "files": len(diff.files),
            "additions": diff.additions,
            "deletions": diff.deletions,
        },
        "meta": {
            "generated_at": datetime.now(tz=UTC)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
            "input_source": input_source,
            "version": __version__,
        },
    }


def _display_name(diff_file: DiffFile) -> str:
    if diff_file.mode is FileMode.RENAMED:
        return (
            f"{diff_file.orig_name} -> {diff_file.new_name} "
            f"({diff_file.similarity_index}% similar)"
        )
    return diff_file.path


def _serialize_file(diff_file: DiffFile) -> dict[str, Any]:
    return {
        "mode": diff_file.mode.value,
        "orig_name": diff_file.orig_name,
        "new_name": diff_file.new_name,
        "similarity_index": diff_file.similarity_index,
        "binary": diff_file.binary,
        "additions": diff_file.additions,
        "deletions": diff_file.deletions,
        "diff_header": diff_file.diff_header,
        "hunks": [_serialize_hunk(item) for item in diff_file.hunks],
    }


def _serialize_hunk(hunk: DiffHunk) -> dict[str, Any]:
    return {
        "section": hunk.section,
        "length": hunk.length,
        "orig_range": _serialize_range(hunk.orig_range),
        "new_range": _serialize_range(hunk.new_range),
    }


def _serialize_range(diff_range: DiffRange) -> dict[str, Any]:
    return {
        "start": diff_range.start,
        "length": diff_range.length,
        "lines": [_serialize_line(item) for item in diff_range.lines],
    }


def _serialize_line(line: DiffLine) -> dict[str, Any]:
    return {
        "mode": line.mode.value,
        "number": line.number,
        "content": line.content,
        "position": line.position,
        "diff_position": line.diff_position,
    }
