# Command-line interface definition for globscan.
# This file is responsible only for argument parsing, validation,
# and dispatch into core application logic.
#
# No traversal or matching logic should live here.

from __future__ import annotations

from typing import List

import typer
from rich.console import Console

from globscan import __version__
from globscan.core import DEFAULT_PATTERN, run_scan
from globscan.models import MatchOptions
from globscan.pattern import Pattern, PatternError

app = typer.Typer(
    add_completion=False,
    help="Enumerate filesystem paths matching a glob pattern and dump each result.",
)
console = Console(stderr=True, highlight=False, emoji=False)


def _build_options(
    case_insensitive: bool,
    require_literal_separator: bool,
    require_literal_leading_dot: bool,
) -> MatchOptions:
    return MatchOptions(
        case_sensitive=not case_insensitive,
        require_literal_separator=require_literal_separator,
        require_literal_leading_dot=require_literal_leading_dot,
    )


def _pattern_failed(exc: PatternError) -> typer.Exit:
    console.print(f"[red]Pattern error:[/red] {exc}")
    return typer.Exit(code=1)


def _print_version(value: bool) -> None:
    # Handle version early and exit cleanly.
    if value:
        console.print(__version__)
        raise typer.Exit(code=0)


@app.command(help="Walk the filesystem and print every match and entry error.")
def scan(
    pattern: str = typer.Argument(
        DEFAULT_PATTERN,
        envvar="GLOBSCAN_PATTERN",
        help="Glob pattern, e.g. './cli/**/__tests__/**'.",
    ),

    # Matching.
    case_insensitive: bool = typer.Option(
        False, "--case-insensitive",
        help="Match names without regard to case.",
        rich_help_panel="Matching",
    ),
    require_literal_separator: bool = typer.Option(
        False, "--require-literal-separator",
        help="Never let wildcards match a path separator.",
        rich_help_panel="Matching",
    ),
    require_literal_leading_dot: bool = typer.Option(
        False, "--require-literal-leading-dot",
        help="Only match dot-prefixed names when the dot is written literally.",
        rich_help_panel="Matching",
    ),

    version: bool = typer.Option(
        False, "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
):
    opts = _build_options(case_insensitive, require_literal_separator, require_literal_leading_dot)

    try:
        run_scan(pattern=pattern, options=opts)
    except PatternError as exc:
        raise _pattern_failed(exc) from exc


@app.command("match", help="Test path strings against a pattern without touching the filesystem.")
def match_paths(
    pattern: str = typer.Argument(..., help="Glob pattern to test against."),
    paths: List[str] = typer.Argument(..., help="Path strings to test."),

    # Matching.
    case_insensitive: bool = typer.Option(
        False, "--case-insensitive",
        help="Match names without regard to case.",
        rich_help_panel="Matching",
    ),
    require_literal_separator: bool = typer.Option(
        False, "--require-literal-separator",
        help="Never let wildcards match a path separator.",
        rich_help_panel="Matching",
    ),
    require_literal_leading_dot: bool = typer.Option(
        False, "--require-literal-leading-dot",
        help="Only match dot-prefixed names when the dot is written literally.",
        rich_help_panel="Matching",
    ),

    version: bool = typer.Option(
        False, "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
):
    opts = _build_options(case_insensitive, require_literal_separator, require_literal_leading_dot)

    try:
        compiled = Pattern(pattern)
    except PatternError as exc:
        raise _pattern_failed(exc) from exc

    missed = 0
    for p in paths:
        if compiled.matches(p, opts):
            console.print(f"match: {p}", markup=False, emoji=False)
        else:
            missed += 1
            console.print(f"no match: {p}", markup=False, emoji=False)

    # Mirror grep: non-zero when anything failed to match.
    if missed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
