# patchforge/models/diff.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

CONTEXT = " "
ADD = "+"
DELETE = "-"


@dataclass(frozen=True)
class DiffLine:
    """A single diff line with its marker removed."""

    kind: str  # CONTEXT, ADD or DELETE
    text: str

    @property
    def is_change(self) -> bool:
        return self.kind in (ADD, DELETE)


@dataclass(frozen=True)
class MatchLocation:
    """Half-open window [start, end) of 0-based indices into the original lines."""

    start: int
    end: int

    @property
    def line_number(self) -> int:
        return self.start + 1


def _old_side(lines: Tuple[DiffLine, ...]) -> List[str]:
    return [ln.text for ln in lines if ln.kind != ADD]


def _count(lines: Tuple[DiffLine, ...], kind: str) -> int:
    return sum(1 for ln in lines if ln.kind == kind)


@dataclass(frozen=True)
class Segment:
    """Independently located block of a segmented (or simple) diff."""

    lines: Tuple[DiffLine, ...]
    location: Optional[MatchLocation] = None

    @property
    def context_lines(self) -> List[str]:
        """Everything that must already exist in the file (context + deletions)."""
        return _old_side(self.lines)

    @property
    def has_pure_context(self) -> bool:
        return any(ln.kind == CONTEXT for ln in self.lines)

    @property
    def additions(self) -> int:
        return _count(self.lines, ADD)

    @property
    def deletions(self) -> int:
        return _count(self.lines, DELETE)


@dataclass(frozen=True)
class Hunk:
    """A unified-diff hunk; starts are 1-based as written in the header."""

    old_start: int
    old_len: int
    new_start: int
    new_len: int
    lines: Tuple[DiffLine, ...] = field(default_factory=tuple)

    @property
    def old_lines(self) -> List[str]:
        return _old_side(self.lines)

    @property
    def additions(self) -> int:
        return _count(self.lines, ADD)

    @property
    def deletions(self) -> int:
        return _count(self.lines, DELETE)


@dataclass(frozen=True)
class UnifiedDiff:
    hunks: Tuple[Hunk, ...]


@dataclass(frozen=True)
class SegmentedDiff:
    segments: Tuple[Segment, ...]
    separator: str


@dataclass(frozen=True)
class SimpleDiff:
    lines: Tuple[DiffLine, ...]

    @property
    def context_lines(self) -> List[str]:
        return [ln.text for ln in self.lines if ln.kind == CONTEXT]

    @property
    def change_lines(self) -> List[DiffLine]:
        return [ln for ln in self.lines if ln.is_change]

    def as_segment(self) -> Segment:
        return Segment(lines=self.lines)


DiffDialect = Union[UnifiedDiff, SegmentedDiff, SimpleDiff]


@dataclass(frozen=True)
class NoMatch:
    pass


@dataclass(frozen=True)
class UniqueMatch:
    location: MatchLocation


@dataclass(frozen=True)
class AmbiguousMatch:
    locations: Tuple[MatchLocation, ...]

    @property
    def line_numbers(self) -> List[int]:
        return [loc.line_number for loc in self.locations]


MatchResult = Union[NoMatch, UniqueMatch, AmbiguousMatch]
