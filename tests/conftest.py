# Shared fixtures for globscan tests.

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def tests_tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    # a/__tests__/x.test, a/__tests__/sub/y.test plus some non-matching noise.
    # The working directory is moved into the tree so patterns stay relative.
    (tmp_path / "a" / "__tests__" / "sub").mkdir(parents=True)
    (tmp_path / "a" / "__tests__" / "x.test").write_text("x", encoding="utf-8")
    (tmp_path / "a" / "__tests__" / "sub" / "y.test").write_text("y", encoding="utf-8")
    (tmp_path / "a" / "other.txt").write_text("o", encoding="utf-8")
    (tmp_path / "b").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def deny_scandir(monkeypatch: pytest.MonkeyPatch) -> Callable[[str], None]:
    # Make listing one directory fail with a permission error.
    # Works regardless of the user the tests run as.
    real = os.scandir

    def install(blocked: str) -> None:
        def fake(path="."):
            if Path(path) == Path(blocked):
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real(path)

        monkeypatch.setattr(os, "scandir", fake)

    return install
