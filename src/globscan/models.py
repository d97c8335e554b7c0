# Shared data models for globscan.
# Lives in its own module to avoid circular imports between pattern, traverse and core.

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class MatchOptions:
    case_sensitive: bool = True

    # `*`, `?` and sets never match a path separator.
    require_literal_separator: bool = False

    # A leading `.` in a path segment must be matched literally.
    require_literal_leading_dot: bool = False


class EntryError(Exception):
    """A filesystem entry that could not be read during traversal.

    Instances are carried as values inside ``MatchResult`` rather than raised
    by the enumerator.
    """

    def __init__(self, path: Path, error: OSError):
        super().__init__(path, error)
        self.path = path
        self.error = error

    def __str__(self) -> str:
        return f"attempting to read `{self.path}` resulted in an error: {self.error}"

    def __repr__(self) -> str:
        return f"EntryError(path={self.path!r}, error={self.error!r})"


@dataclass(frozen=True)
class MatchResult:
    path: Path
    error: Optional[EntryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Path:
        # Return the matched path or raise the captured entry error.
        if self.error is not None:
            raise self.error
        return self.path
