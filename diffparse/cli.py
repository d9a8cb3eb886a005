"""CLI entrypoint for diffparse."""

from __future__ import annotations

import fnmatch
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from diffparse import __version__
from diffparse.config import AppConfig, default_config_template, load_app_config
from diffparse.errors import DiffParseError
from diffparse.git import GitError, get_diff_between, get_working_tree_diff
from diffparse.logging import LOG_LEVELS, configure_logging
from diffparse.models import Diff, DiffFile
from diffparse.output import render_changed_json, render_human, render_json
from diffparse.parser import parse_diff
from diffparse.render import render_unified

app = typer.Typer(
    name="diffparse",
    no_args_is_help=True,
    help="Parse unified diffs into files, hunks and numbered lines.",
)

DiffFileOption = Annotated[Path | None, typer.Option(help="Path to unified diff file.")]
StdinOption = Annotated[bool, typer.Option(help="Read unified diff from stdin.")]
RepoOption = Annotated[Path, typer.Option(help="Repository path.")]
BaseOption = Annotated[str | None, typer.Option(help="Base git revision.")]
HeadOption = Annotated[str | None, typer.Option(help="Head git revision.")]
IncludeOption = Annotated[list[str] | None, typer.Option(help="Include glob pattern.")]
ExcludeOption = Annotated[list[str] | None, typer.Option(help="Exclude glob pattern.")]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to config TOML file."),
]


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="DEBUG|INFO|WARNING|ERROR|CRITICAL."),
    ] = None,
) -> None:
    """Root command callback."""
    _ = version
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        raise typer.BadParameter(
            f"--log-level must be one of: {', '.join(LOG_LEVELS)}", param_hint="--log-level"
        )
    ctx.obj = {"log_level": log_level.upper() if log_level else None}


@app.command("parse")
def parse_command(
    ctx: typer.Context,
    diff_file: DiffFileOption = None,
    stdin: StdinOption = False,
    repo: RepoOption = Path("."),
    base: BaseOption = None,
    head: HeadOption = None,
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Parse a diff and print its files, hunks and lines."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = (format or app_config.format).lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    diff_ctx = _prepare_diff_context(
        ctx,
        diff_file=diff_file,
        stdin=stdin,
        repo=repo,
        base=base,
        head=head,
        include=include,
        exclude=exclude,
        app_config=app_config,
    )
    if output_format == "json":
        typer.echo(render_json(diff_ctx.diff, input_source=diff_ctx.input_source))
    else:
        typer.echo(render_human(diff_ctx.diff))


@app.command("changed")
def changed_command(
    ctx: typer.Context,
    diff_file: DiffFileOption = None,
    stdin: StdinOption = False,
    repo: RepoOption = Path("."),
    base: BaseOption = None,
    head: HeadOption = None,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Print added line numbers per new file as JSON (deleted files excluded)."""
    app_config = _load_config_or_raise(repo, config_file)
    diff_ctx = _prepare_diff_context(
        ctx,
        diff_file=diff_file,
        stdin=stdin,
        repo=repo,
        base=base,
        head=head,
        include=include,
        exclude=exclude,
        app_config=app_config,
    )
    typer.echo(render_changed_json(diff_ctx.diff))


@app.command("render")
def render_command(
    ctx: typer.Context,
    diff_file: DiffFileOption = None,
    stdin: StdinOption = False,
    repo: RepoOption = Path("."),
    base: BaseOption = None,
    head: HeadOption = None,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Print the parsed diff re-serialized as git-style unified text."""
    app_config = _load_config_or_raise(repo, config_file)
    diff_ctx = _prepare_diff_context(
        ctx,
        diff_file=diff_file,
        stdin=stdin,
        repo=repo,
        base=base,
        head=head,
        include=include,
        exclude=exclude,
        app_config=app_config,
    )
    typer.echo(render_unified(diff_ctx.diff), nl=False)


@app.command("config")
def config_command(
    repo: RepoOption = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: ConfigOption = None,
) -> None:
    """Show resolved configuration."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    payload = _load_config_or_raise(repo, config_file).to_dict()
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- include: {payload['include']}",
        f"- exclude: {payload['exclude']}",
        f"- logging.level: {payload['logging']['level']}",
        f"- logging.format: {payload['logging']['format']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".diffparse.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter repository config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


@app.command("config-validate")
def config_validate_command(
    repo: RepoOption = Path("."),
    config_file: Annotated[
        Path,
        typer.Option("--config", help="Path to config TOML file to validate."),
    ] = Path(".diffparse.toml"),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """Validate a config file."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    app_config = _load_config_or_raise(repo, config_file)
    payload = {"ok": True, "source": app_config.source}
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return
    typer.echo("\n".join(["Config is valid.", f"- source: {payload['source']}"]))


def main() -> None:
    """Console script entrypoint."""
    app()


def _resolve_diff_input(
    *,
    diff_file: Path | None,
    stdin: bool,
    repo: Path,
    base: str | None,
    head: str | None,
) -> tuple[str, str]:
    if diff_file is not None:
        return (diff_file.read_text(encoding="utf-8"), f"diff_file:{diff_file}")

    if stdin:
        return (sys.stdin.read(), "stdin")

    if base is not None and head is not None:
        return (get_diff_between(repo, base, head), "git_range")

    return (get_working_tree_diff(repo), "git_working_tree")


def _filter_files(diff: Diff, *, includes: list[str], excludes: list[str]) -> Diff:
    filtered: list[DiffFile] = []
    for diff_file in diff.files:
        path = diff_file.path
        if includes and not any(fnmatch.fnmatch(path, pattern) for pattern in includes):
            continue
        if excludes and any(fnmatch.fnmatch(path, pattern) for pattern in excludes):
            continue
        filtered.append(diff_file)
    return replace(diff, files=tuple(filtered))


def _load_config_or_raise(repo: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(repo, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


class _DiffContext:
    """Resolved diff input and parse result for shared command flows."""

    def __init__(self, *, diff: Diff, input_source: str) -> None:
        self.diff = diff
        self.input_source = input_source


def _prepare_diff_context(
    ctx: typer.Context,
    *,
    diff_file: Path | None,
    stdin: bool,
    repo: Path,
    base: str | None,
    head: str | None,
    include: list[str] | None,
    exclude: list[str] | None,
    app_config: AppConfig,
) -> _DiffContext:
    if diff_file and stdin:
        raise typer.BadParameter("Use either --diff-file or --stdin, not both.")
    if (base is None) ^ (head is None):
        raise typer.BadParameter("Provide both --base and --head together.")

    options = ctx.obj or {}
    configure_logging(
        options.get("log_level") or app_config.logging.level,
        app_config.logging.format,
    )

    try:
        diff_text, input_source = _resolve_diff_input(
            diff_file=diff_file,
            stdin=stdin,
            repo=repo,
            base=base,
            head=head,
        )
    except GitError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        diff = parse_diff(diff_text)
    except DiffParseError as exc:
        raise typer.BadParameter(str(exc), param_hint="diff") from exc

    include_patterns = include if include is not None else app_config.include
    exclude_patterns = exclude if exclude is not None else app_config.exclude
    return _DiffContext(
        diff=_filter_files(diff, includes=include_patterns, excludes=exclude_patterns),
        input_source=input_source,
    )
