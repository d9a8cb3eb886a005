"""Re-serialization of a parsed diff as git-style unified text."""

from __future__ import annotations

from diffparse.filenames import encode_filename
from diffparse.headers import DEV_NULL
from diffparse.models import Diff, DiffFile, DiffHunk, FileMode, LineMode

LINE_PREFIXES = {
    LineMode.ADDED: "+",
    LineMode.REMOVED: "-",
    LineMode.UNCHANGED: " ",
}


def render_unified(diff: Diff) -> str:
    """Render every file entry; re-parsing the result yields the same model."""
    return "".join(render_file(diff_file) for diff_file in diff.files)


def render_file(diff_file: DiffFile) -> str:
    orig_name = diff_file.orig_name or diff_file.new_name
    new_name = diff_file.new_name or diff_file.orig_name
    lines = [f"diff --git {encode_filename(orig_name, 'a/')} {encode_filename(new_name, 'b/')}"]

    if diff_file.mode is FileMode.NEW:
        lines.append("new file mode 100644")
    elif diff_file.mode is FileMode.DELETED:
        lines.append("deleted file mode 100644")
    elif diff_file.mode is FileMode.RENAMED:
        lines.append(f"similarity index {diff_file.similarity_index}%")
        lines.append(f"rename from {encode_filename(diff_file.orig_name)}")
        lines.append(f"rename to {encode_filename(diff_file.new_name)}")

    old_token = DEV_NULL if diff_file.mode is FileMode.NEW else encode_filename(orig_name, "a/")
    new_token = DEV_NULL if diff_file.mode is FileMode.DELETED else encode_filename(new_name, "b/")
    if diff_file.binary:
        lines.append(f"Binary files {old_token} and {new_token} differ")
    elif diff_file.hunks:
        lines.append(f"--- {old_token}")
        lines.append(f"+++ {new_token}")
        for hunk in diff_file.hunks:
            lines.extend(render_hunk(hunk))

    return "\n".join(lines) + "\n"


def render_hunk(hunk: DiffHunk) -> list[str]:
    orig = hunk.orig_range
    new = hunk.new_range
    header = f"@@ -{orig.start},{orig.length} +{new.start},{new.length} @@"
    if hunk.section:
        header = f"{header} {hunk.section}"
    return [header] + [LINE_PREFIXES[line.mode] + line.content for line in hunk.whole_range.lines]
