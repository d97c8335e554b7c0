# Unit tests for globscan.core.
# These tests validate the two reporting passes and their summary counters.

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from globscan.core import collect_paths, run_scan
from globscan.pattern import PatternError
from globscan.traverse import glob


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=300, color_system=None), buf


def test_run_scan_reports_every_match_twice(tests_tree: Path) -> None:
    out, buf = _console()

    summary = run_scan("**/__tests__/**", out=out)
    text = buf.getvalue()

    assert summary.matched == 4
    assert summary.errors == 0
    assert summary.collected == 4
    assert "paths = Paths(pattern='**/__tests__/**'" in text
    assert text.count("result = ") == 8
    assert "collected = [" in text
    assert "Collected: 4" in text


def test_run_scan_empty_result_set(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    out, buf = _console()

    summary = run_scan("**/__tests__/**", out=out)

    assert summary.matched == 0
    assert summary.collected == 0
    assert "result = " not in buf.getvalue()
    assert "collected = []" in buf.getvalue()


def test_run_scan_prints_entry_errors_but_does_not_collect_them(
    tests_tree: Path, deny_scandir
) -> None:
    deny_scandir("a/__tests__/sub")
    out, buf = _console()

    summary = run_scan("**/__tests__/**", out=out)

    assert summary.errors == 1
    assert summary.matched == 3
    assert summary.collected == 3
    assert "EntryError" in buf.getvalue()


def test_run_scan_pattern_error_prints_nothing(tests_tree: Path) -> None:
    out, buf = _console()

    with pytest.raises(PatternError):
        run_scan("a/[b", out=out)

    assert buf.getvalue() == ""


def test_collect_paths_matches_direct_iteration_order(tests_tree: Path) -> None:
    direct = [r.path for r in glob("**/__tests__/**") if r.ok]

    assert collect_paths("**/__tests__/**") == direct
    assert len(direct) == 4


def test_run_scan_prints_names_verbatim(tests_tree: Path) -> None:
    (tests_tree / "a" / "__tests__" / "x:cat:y.test").write_text("c", encoding="utf-8")
    long_name = "n" * 120 + ".test"
    (tests_tree / "a" / "__tests__" / long_name).write_text("l", encoding="utf-8")
    buf = io.StringIO()
    out = Console(file=buf, width=80, color_system=None)

    run_scan("**/__tests__/**", out=out)
    text = buf.getvalue()

    assert text.count("x:cat:y.test") == 3
    assert text.count(long_name) == 3


def test_collect_paths_sees_errors_before_dropping_them(tests_tree: Path, deny_scandir) -> None:
    deny_scandir("a/__tests__/sub")
    seen = []

    collected = collect_paths("**/__tests__/**", on_result=seen.append)

    assert len(seen) == 4
    assert len([r for r in seen if not r.ok]) == 1
    assert collected == [r.path for r in seen if r.ok]
