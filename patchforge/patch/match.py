# patchforge/patch/match.py
"""
Context matcher.

A diff's context (every line that must already exist: context and deletions)
is slid over the file. Each pair of lines is compared with an ordered list of
predicates, cheapest first; the first one that passes accepts the pair.
"""
from __future__ import annotations

import re
from typing import Callable, List, Sequence

from ..models.diff import AmbiguousMatch, MatchLocation, MatchResult, NoMatch, UniqueMatch

LONG_LINE = 40
PARTIAL_RATIO = 0.7

_WS_RE = re.compile(r"\s+")


def positional_ratio(a: str, b: str) -> float:
    """
    Share of character positions that hold the same character.

    Positional, not alignment-based: one inserted character shifts everything
    after it. Both strings empty counts as identical.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    same = sum(1 for x, y in zip(a, b) if x == y)
    return same / longest


def exact(a: str, b: str) -> bool:
    return a == b


def trimmed(a: str, b: str) -> bool:
    return a.strip() == b.strip()


def collapsed(a: str, b: str) -> bool:
    """Equal once every run of whitespace is removed."""
    return _WS_RE.sub("", a) == _WS_RE.sub("", b)


def partial_long_line(a: str, b: str) -> bool:
    a, b = a.strip(), b.strip()
    if len(a) <= LONG_LINE and len(b) <= LONG_LINE:
        return False
    return positional_ratio(a, b) > PARTIAL_RATIO


MATCH_TIERS: Sequence[Callable[[str, str], bool]] = (exact, trimmed, collapsed, partial_long_line)


def context_matches(file_line: str, context_line: str) -> bool:
    return any(tier(file_line, context_line) for tier in MATCH_TIERS)


def window_matches(original: List[str], start: int, context: List[str]) -> bool:
    for j, ctx in enumerate(context):
        if not context_matches(original[start + j], ctx):
            return False
    return True


def find_context(
    original: List[str],
    context: List[str],
    *,
    lo: int = 0,
    hi: int | None = None,
) -> MatchResult:
    """
    Locate ``context`` inside ``original[lo:hi]``.

    Returns NoMatch, UniqueMatch or AmbiguousMatch (every hit, in file order).
    Pure function of its inputs.
    """
    m = len(context)
    hi = len(original) if hi is None else min(hi, len(original))
    if m == 0 or hi - lo < m:
        return NoMatch()

    hits = [
        MatchLocation(i, i + m)
        for i in range(max(0, lo), hi - m + 1)
        if window_matches(original, i, context)
    ]
    if not hits:
        return NoMatch()
    if len(hits) == 1:
        return UniqueMatch(hits[0])
    return AmbiguousMatch(tuple(hits))
