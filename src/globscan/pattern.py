# Glob pattern compilation and string matching for globscan.
# This module is pure logic and never touches the filesystem.
#
# Supported syntax: `?`, `*`, `**` (whole path components only),
# `[...]` and `[!...]` sets with `a-z` style ranges.

from __future__ import annotations

import os
from pathlib import PurePath
from typing import List, Optional, Tuple, Union

from globscan.models import MatchOptions

SEPARATORS = frozenset(s for s in (os.sep, os.altsep) if s)

ERROR_WILDCARDS = "wildcards are either regular `*` or recursive `**`"
ERROR_RECURSIVE_WILDCARDS = "recursive wildcards must form a single path component"
ERROR_INVALID_RANGE = "invalid range pattern"


class PatternError(ValueError):
    """Raised when a glob pattern cannot be compiled."""

    def __init__(self, pos: int, msg: str):
        super().__init__(pos, msg)
        self.pos = pos
        self.msg = msg

    def __str__(self) -> str:
        return f"Pattern syntax error near position {self.pos}: {self.msg}"


class _Wildcard:
    # Singleton marker tokens; compared by identity.
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return self.name


ANY_CHAR = _Wildcard("AnyChar")
ANY_SEQUENCE = _Wildcard("AnySequence")
ANY_RECURSIVE_SEQUENCE = _Wildcard("AnyRecursiveSequence")


class CharSet:
    # A `[...]` or `[!...]` token.
    # Members are (low, high) pairs; a single character is (c, c).
    __slots__ = ("members", "negated")

    def __init__(self, members: List[Tuple[str, str]], negated: bool):
        self.members = members
        self.negated = negated

    def __repr__(self) -> str:
        kind = "AnyExcept" if self.negated else "AnyWithin"
        return f"{kind}({self.members!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CharSet):
            return NotImplemented
        return self.members == other.members and self.negated == other.negated

    def contains(self, c: str, case_sensitive: bool) -> bool:
        for low, high in self.members:
            if low == high:
                if _chars_eq(c, low, case_sensitive):
                    return True
                continue
            if low <= c <= high:
                return True
            # Ranges only fold case when both ends are ASCII letters.
            if (
                not case_sensitive
                and c.isascii()
                and _is_ascii_alpha(low)
                and _is_ascii_alpha(high)
                and low.lower() <= c.lower() <= high.lower()
            ):
                return True
        return False


Token = Union[str, _Wildcard, CharSet]

# Result of matching a sub-pattern. "Entire" tells callers higher up the
# recursion to stop trying other split points.
_MATCH = 0
_SUB_PATTERN_DOESNT_MATCH = 1
_ENTIRE_PATTERN_DOESNT_MATCH = 2


def _is_ascii_alpha(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _chars_eq(a: str, b: str, case_sensitive: bool) -> bool:
    if a == b:
        return True
    if case_sensitive:
        return False
    if a.isascii() and b.isascii():
        return a.lower() == b.lower()
    return a.casefold() == b.casefold()


def _parse_char_set(chars: str) -> List[Tuple[str, str]]:
    members: List[Tuple[str, str]] = []
    i = 0
    while i < len(chars):
        if i + 3 <= len(chars) and chars[i + 1] == "-":
            members.append((chars[i], chars[i + 2]))
            i += 3
        else:
            members.append((chars[i], chars[i]))
            i += 1
    return members


def _tokenize(source: str) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if c == "?":
            tokens.append(ANY_CHAR)
            i += 1

        elif c == "*":
            start = i
            while i < n and source[i] == "*":
                i += 1
            count = i - start

            if count > 2:
                raise PatternError(start + 2, ERROR_WILDCARDS)

            if count == 1:
                tokens.append(ANY_SEQUENCE)
                continue

            # `**` must start a component...
            if start > 0 and source[start - 1] not in SEPARATORS:
                raise PatternError(start - 1, ERROR_RECURSIVE_WILDCARDS)
            # ...and end one. A following separator belongs to the token.
            if i < n:
                if source[i] not in SEPARATORS:
                    raise PatternError(i, ERROR_RECURSIVE_WILDCARDS)
                i += 1

            if not tokens or tokens[-1] is not ANY_RECURSIVE_SEQUENCE:
                tokens.append(ANY_RECURSIVE_SEQUENCE)

        elif c == "[":
            if i + 4 <= n and source[i + 1] == "!":
                close = source.find("]", i + 3)
                if close != -1:
                    tokens.append(CharSet(_parse_char_set(source[i + 2:close]), negated=True))
                    i = close + 1
                    continue
            elif i + 3 <= n and source[i + 1] != "!":
                close = source.find("]", i + 2)
                if close != -1:
                    tokens.append(CharSet(_parse_char_set(source[i + 1:close]), negated=False))
                    i = close + 1
                    continue
            raise PatternError(i, ERROR_INVALID_RANGE)

        else:
            tokens.append(c)
            i += 1

    return tokens


class Pattern:
    """A compiled glob pattern.

    Matching is done against plain strings; use the functions in
    ``globscan.traverse`` to match against the filesystem.
    """

    __slots__ = ("source", "tokens", "is_recursive")

    def __init__(self, source: str):
        self.source = source
        self.tokens = _tokenize(source)
        self.is_recursive = any(t is ANY_RECURSIVE_SEQUENCE for t in self.tokens)

    def __repr__(self) -> str:
        return f"Pattern({self.source!r})"

    def __str__(self) -> str:
        return self.source

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return self.source == other.source

    def __hash__(self) -> int:
        return hash(self.source)

    @property
    def is_literal(self) -> bool:
        # True when the pattern contains no wildcard tokens at all.
        return all(isinstance(t, str) for t in self.tokens)

    @staticmethod
    def escape(text: str) -> str:
        # Wrap every metacharacter in a set so it matches itself.
        out = []
        for c in text:
            if c in "?*[]":
                out.append(f"[{c}]")
            else:
                out.append(c)
        return "".join(out)

    def matches(self, text: str, options: Optional[MatchOptions] = None) -> bool:
        opts = options or MatchOptions()
        return self._matches_from(True, text, 0, 0, opts) == _MATCH

    def matches_path(self, path: Union[str, PurePath], options: Optional[MatchOptions] = None) -> bool:
        return self.matches(str(path), options)

    def _matches_from(
        self,
        follows_separator: bool,
        text: str,
        pos: int,
        ti: int,
        opts: MatchOptions,
    ) -> int:
        tokens = self.tokens
        n = len(text)

        while ti < len(tokens):
            token = tokens[ti]

            if token is ANY_SEQUENCE or token is ANY_RECURSIVE_SEQUENCE:
                # Try the empty match first, then grow one character at a time.
                result = self._matches_from(follows_separator, text, pos, ti + 1, opts)
                if result != _SUB_PATTERN_DOESNT_MATCH:
                    return result

                while pos < n:
                    c = text[pos]
                    pos += 1
                    if follows_separator and opts.require_literal_leading_dot and c == ".":
                        return _SUB_PATTERN_DOESNT_MATCH
                    follows_separator = c in SEPARATORS
                    if token is ANY_RECURSIVE_SEQUENCE and not follows_separator:
                        continue
                    if (
                        token is ANY_SEQUENCE
                        and opts.require_literal_separator
                        and follows_separator
                    ):
                        return _SUB_PATTERN_DOESNT_MATCH
                    result = self._matches_from(follows_separator, text, pos, ti + 1, opts)
                    if result != _SUB_PATTERN_DOESNT_MATCH:
                        return result

                # Text is exhausted; only trailing sequences could still match.
                ti += 1
                continue

            if pos >= n:
                return _ENTIRE_PATTERN_DOESNT_MATCH

            c = text[pos]
            pos += 1
            is_sep = c in SEPARATORS

            if isinstance(token, str):
                ok = _chars_eq(c, token, opts.case_sensitive)
            elif (opts.require_literal_separator and is_sep) or (
                follows_separator and opts.require_literal_leading_dot and c == "."
            ):
                ok = False
            elif token is ANY_CHAR:
                ok = True
            else:
                hit = token.contains(c, opts.case_sensitive)
                ok = not hit if token.negated else hit

            if not ok:
                return _SUB_PATTERN_DOESNT_MATCH

            follows_separator = is_sep
            ti += 1

        return _MATCH if pos >= n else _SUB_PATTERN_DOESNT_MATCH
