# Core orchestration logic for globscan.
# This file runs the two reporting passes over a glob and prints debug dumps.
#
# It intentionally contains no CLI parsing and no matching logic.

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional

from rich.console import Console
from rich.pretty import pretty_repr

from globscan.models import MatchOptions, MatchResult
from globscan.traverse import glob_with

# Pattern used when none is supplied on the command line or environment.
DEFAULT_PATTERN = "**/__tests__/**"

console = Console(stderr=True, highlight=False, emoji=False)


# Simple counters used for the summary block.
@dataclass
class ScanSummary:
    matched: int = 0
    errors: int = 0
    collected: int = 0


def _dbg(out: Console, label: str, value: Any) -> Any:
    # Print a labelled debug dump and hand the value back, so it can sit
    # inside an expression. Values are printed verbatim: no markup,
    # emoji codes or soft wrapping.
    out.print(f"{label} = {pretty_repr(value)}", markup=False, emoji=False, soft_wrap=True)
    return value


def run_scan(
    pattern: str,
    options: Optional[MatchOptions] = None,
    out: Optional[Console] = None,
) -> ScanSummary:
    # Entry point for a scan. A PatternError escapes before anything is
    # printed; entry errors are reported as values and never abort a pass.
    opts = options or MatchOptions()
    out = out or console
    summary = ScanSummary()

    # Pass 1: every result, errors included, exactly as it arrives.
    paths = glob_with(pattern, opts)
    _dbg(out, "paths", paths)
    for result in paths:
        _dbg(out, "result", result)
        if result.ok:
            summary.matched += 1
        else:
            summary.errors += 1

    # Pass 2: a fresh walk, keeping successes only.
    collected = collect_paths(
        pattern,
        opts,
        on_result=lambda result: _dbg(out, "result", result),
    )
    _dbg(out, "collected", collected)
    summary.collected = len(collected)

    _print_summary(out, summary, pattern)
    return summary


def collect_paths(
    pattern: str,
    options: Optional[MatchOptions] = None,
    on_result: Optional[Callable[[MatchResult], Any]] = None,
) -> List[Path]:
    # Successful matches in arrival order; entry errors are dropped.
    # on_result sees every result, errors included, before filtering.
    collected: List[Path] = []
    for result in glob_with(pattern, options or MatchOptions()):
        if on_result is not None:
            on_result(result)
        if result.ok:
            collected.append(result.path)
    return collected


def _print_summary(out: Console, summary: ScanSummary, pattern: str) -> None:
    out.print()
    out.print("[bold]Summary[/bold]")
    out.print(f"Pattern:   {pattern}", markup=False, emoji=False)
    out.print(f"Matched:   {summary.matched}")
    out.print(f"Errors:    {summary.errors}")
    out.print(f"Collected: {summary.collected}")
