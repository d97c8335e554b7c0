# Filesystem traversal for globscan.
# This module turns a glob pattern into a lazy stream of MatchResult values.
#
# Read-only: directories are listed and entries are stat'ed, nothing else.

from __future__ import annotations

import os
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple

from globscan.models import EntryError, MatchOptions, MatchResult
from globscan.pattern import SEPARATORS, Pattern

# A child discovered while listing a directory: (path, is_dir, error).
_Child = Tuple[Path, bool, Optional[EntryError]]


class Paths:
    """Lazy, single-pass iterator over the results of a glob.

    Each item is a ``MatchResult``. Iterating a second time yields nothing;
    call ``glob`` again to re-walk the filesystem.
    """

    def __init__(
        self,
        pattern: str,
        root: Path,
        components: List[Pattern],
        require_dir: bool,
        include_root: bool,
        options: MatchOptions,
    ):
        self.pattern = pattern
        self.root = root
        self.options = options
        self._results = _walk(root, components, require_dir, include_root, options)

    def __iter__(self) -> Iterator[MatchResult]:
        return self

    def __next__(self) -> MatchResult:
        return next(self._results)

    def __repr__(self) -> str:
        return f"Paths(pattern={self.pattern!r}, root={self.root!r}, options={self.options!r})"


def glob(pattern: str) -> Paths:
    # Enumerate matches using default options.
    return glob_with(pattern, MatchOptions())


def glob_with(pattern: str, options: MatchOptions) -> Paths:
    # Compile the whole pattern up front so syntax errors surface before
    # any filesystem access, with positions relative to the full string.
    Pattern(pattern)

    root, parts, require_dir = _split_root(pattern)
    implicit_root = root == Path(".")

    # Leading literal components are joined directly; no listing needed.
    components = [Pattern(p) for p in parts]
    while components and components[0].is_literal:
        root = root / components.pop(0).source
        implicit_root = False

    include_root = bool(pattern) and (not implicit_root or not components)

    return Paths(
        pattern=pattern,
        root=root,
        components=components,
        require_dir=require_dir,
        include_root=include_root,
        options=options,
    )


def _split_root(pattern: str) -> Tuple[Path, List[str], bool]:
    # Separate the anchor (drive and/or leading separator) from the
    # per-directory components. `.` components are no-ops and are dropped.
    drive = Path(pattern).drive
    rest = pattern[len(drive):]

    if rest[:1] in SEPARATORS:
        root = Path(drive + os.sep)
    elif drive:
        root = Path(drive)
    else:
        root = Path(".")

    parts: List[str] = [""]
    for c in rest:
        if c in SEPARATORS:
            parts.append("")
        else:
            parts[-1] += c

    components = [p for p in parts if p and p != "."]
    require_dir = bool(components) and rest[-1:] in SEPARATORS
    return root, components, require_dir


def _closure(states: Iterable[int], components: List[Pattern]) -> FrozenSet[int]:
    # A `**` component may match zero segments, so it also activates the
    # position after it.
    out = set(states)
    pending = list(out)
    while pending:
        i = pending.pop()
        if i < len(components) and components[i].is_recursive and i + 1 not in out:
            out.add(i + 1)
            pending.append(i + 1)
    return frozenset(out)


def _advance(
    states: FrozenSet[int],
    name: str,
    components: List[Pattern],
    options: MatchOptions,
) -> FrozenSet[int]:
    nxt = set()
    for i in states:
        if i >= len(components):
            continue
        comp = components[i]
        if comp.is_recursive:
            if options.require_literal_leading_dot and name.startswith("."):
                continue
            nxt.add(i)
        elif comp.matches(name, options):
            nxt.add(i + 1)
    return _closure(nxt, components)


def _pending(states: FrozenSet[int], components: List[Pattern]) -> List[Pattern]:
    return [components[i] for i in sorted(states) if i < len(components)]


def _list_children(
    directory: Path,
    pending: List[Pattern],
    options: MatchOptions,
) -> List[_Child]:
    # When every pattern still in play is a plain name, probe for those
    # names instead of listing the whole directory.
    if options.case_sensitive and all(p.is_literal for p in pending):
        children: List[_Child] = []
        seen = set()
        for p in pending:
            if p.source in seen:
                continue
            seen.add(p.source)
            child = directory / p.source
            try:
                os.lstat(child)
            except (FileNotFoundError, NotADirectoryError):
                continue
            children.append((child, os.path.isdir(child), None))
        return children

    children = []
    with os.scandir(directory) as it:
        for entry in it:
            child = directory / entry.name
            try:
                children.append((child, entry.is_dir(), None))
            except OSError as exc:
                children.append((child, False, EntryError(child, exc)))
    return children


def _walk(
    root: Path,
    components: List[Pattern],
    require_dir: bool,
    include_root: bool,
    options: MatchOptions,
) -> Iterator[MatchResult]:
    # Depth-first, pre-order. Each directory is listed once and fully before
    # any of its entries are yielded, so no handle stays open across a yield.
    terminal = len(components)
    start = _closure([0], components)

    if not os.path.lexists(root):
        return

    root_is_dir = os.path.isdir(root)
    if include_root and terminal in start and (root_is_dir or not require_dir):
        yield MatchResult(path=root)

    if not root_is_dir or not _pending(start, components):
        return

    try:
        first = _list_children(root, _pending(start, components), options)
    except OSError as exc:
        yield MatchResult(path=root, error=EntryError(root, exc))
        return

    stack = [(iter(first), start)]
    while stack:
        children, states = stack[-1]
        item = next(children, None)
        if item is None:
            stack.pop()
            continue

        path, is_dir, error = item
        if error is not None:
            yield MatchResult(path=path, error=error)
            continue

        nxt = _advance(states, path.name, components, options)
        if not nxt:
            continue

        if terminal in nxt and (is_dir or not require_dir):
            yield MatchResult(path=path)

        pending = _pending(nxt, components)
        if not is_dir or not pending:
            continue

        try:
            listed = _list_children(path, pending, options)
        except OSError as exc:
            yield MatchResult(path=path, error=EntryError(path, exc))
            continue
        stack.append((iter(listed), nxt))
