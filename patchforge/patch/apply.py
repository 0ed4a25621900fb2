# patchforge/patch/apply.py
from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence, Tuple, Union

from .._logging import resolve_logger
from ..errors.patch import (
    AmbiguousContextError,
    BinaryContentError,
    PatchFailedError,
    SegmentOrderError,
)
from ..models.diff import (
    ADD,
    DELETE,
    AmbiguousMatch,
    DiffDialect,
    Hunk,
    MatchLocation,
    Segment,
    SegmentedDiff,
    SimpleDiff,
    UnifiedDiff,
    UniqueMatch,
)
from ..models.outcome import PatchOutcome
from .binary import is_binary_content
from .classify import classify_diff
from .lines import Row, to_working_lines
from .match import find_context, window_matches

__all__ = ["apply_diff", "apply_dialect"]


# ---------- replay ----------


def _replay(lines, start: int) -> Tuple[List[Row], int]:
    """
    Walk diff lines against the file from line index ``start``.

    Context lines emit the file's own line (the diff may differ in
    whitespace), deletions consume a line, additions emit their text.
    Returns the emitted rows and the index just past the consumed window.
    """
    out: List[Row] = []
    pos = start
    for ln in lines:
        if ln.kind == ADD:
            out.append(ln.text)
        elif ln.kind == DELETE:
            pos += 1
        else:
            out.append(pos)
            pos += 1
    return out, pos


# ---------- simple / segmented ----------


def _locate(original: List[str], segment: Segment, n: int, total: int) -> MatchLocation:
    result = find_context(original, segment.context_lines)
    if isinstance(result, UniqueMatch):
        return result.location
    where = f" for segment {n}" if total > 1 else ""
    if isinstance(result, AmbiguousMatch):
        nums = ", ".join(str(x) for x in result.line_numbers)
        raise AmbiguousContextError(
            f"Multiple matching contexts found{where} at lines {nums}",
            result.line_numbers,
        )
    raise PatchFailedError(
        f"No matching context found{where}",
        suggestions=[
            "Read the file again; the context lines must match its current content",
        ],
    )


def _apply_segments(original: List[str], segments: Sequence[Segment], log) -> Tuple[List[Row], int]:
    resolved = [
        replace(seg, location=_locate(original, seg, n, len(segments)))
        for n, seg in enumerate(segments, 1)
    ]
    for n in range(1, len(resolved)):
        prev, cur = resolved[n - 1].location, resolved[n].location
        if cur.start < prev.end:
            raise SegmentOrderError(
                f"Segments out of order or overlap: segment {n + 1} matches lines "
                f"{cur.start + 1}-{cur.end}, segment {n} ends at line {prev.end}",
                suggestions=["List segments in file order and keep them apart"],
            )
    for n, seg in enumerate(resolved, 1):
        log.debug(f"segment {n}: lines {seg.location.start + 1}-{seg.location.end}")

    # Back to front: splicing a later window never moves an earlier one.
    out: List[Row] = list(range(len(original)))
    for seg in reversed(resolved):
        loc = seg.location
        emitted, _ = _replay(seg.lines, loc.start)
        out[loc.start:loc.end] = emitted
    return out, sum(s.additions + s.deletions for s in resolved)


# ---------- unified ----------


def _declared_index(hunk: Hunk) -> int:
    # "-0,0" and "-k,0" insert after line k.
    if hunk.old_len == 0:
        return hunk.old_start
    return max(hunk.old_start - 1, 0)


def _verifies(original: List[str], start: int, old: List[str]) -> bool:
    return start + len(old) <= len(original) and window_matches(original, start, old)


def _relocate(original: List[str], hunk: Hunk, n: int, cursor: int, log) -> int:
    old = hunk.old_lines
    result = find_context(original, old, lo=cursor)
    if isinstance(result, UniqueMatch):
        start = result.location.start
        log.warning(
            f"hunk {n} does not match at declared line {hunk.old_start}; applying at line {start + 1}"
        )
        return start
    if isinstance(result, AmbiguousMatch):
        nums = ", ".join(str(x) for x in result.line_numbers)
        raise AmbiguousContextError(
            f"Hunk {n} does not match at line {hunk.old_start}; "
            f"multiple matching contexts found at lines {nums}",
            result.line_numbers,
        )
    raise PatchFailedError(
        f"No matching context found for hunk {n} (declared at line {hunk.old_start})",
        suggestions=["Read the file again and regenerate the diff against its current content"],
    )


def _apply_unified(original: List[str], diff: UnifiedDiff, log) -> Tuple[List[Row], int]:
    out: List[Row] = []
    cursor = 0
    changed = 0
    for n, hunk in enumerate(diff.hunks, 1):
        old = hunk.old_lines
        start = _declared_index(hunk)
        if start < cursor and (not old or _verifies(original, start, old)):
            raise SegmentOrderError(
                f"Hunk {n} at line {hunk.old_start} overlaps the previous hunk (ends at line {cursor})"
            )
        if old:
            if start < cursor or not _verifies(original, start, old):
                start = _relocate(original, hunk, n, cursor, log)
        elif start > len(original):
            raise PatchFailedError(
                f"Hunk {n} starts at line {hunk.old_start}, past the end of the file ({len(original)} lines)"
            )

        out.extend(range(cursor, start))
        emitted, cursor = _replay(hunk.lines, start)
        out.extend(emitted)
        changed += hunk.additions + hunk.deletions
        log.debug(f"hunk {n}: applied at line {start + 1} (+{hunk.additions} -{hunk.deletions})")
    out.extend(range(cursor, len(original)))
    return out, changed


# ---------- entry points ----------


def apply_dialect(content: str, dialect: DiffDialect, *, logger=None, log: bool = False) -> PatchOutcome:
    """Apply an already classified diff to ``content`` in memory."""
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    if is_binary_content(content):
        raise BinaryContentError("Cannot apply diff to binary content")

    text = to_working_lines(content)
    original = text.lines
    if isinstance(dialect, UnifiedDiff):
        log.debug(f"applying unified diff with {len(dialect.hunks)} hunk(s)")
        rows, changed = _apply_unified(original, dialect, log)
    elif isinstance(dialect, SegmentedDiff):
        log.debug(f"applying segmented diff with {len(dialect.segments)} segment(s)")
        rows, changed = _apply_segments(original, dialect.segments, log)
    elif isinstance(dialect, SimpleDiff):
        rows, changed = _apply_segments(original, [dialect.as_segment()], log)
    else:
        raise TypeError(f"unsupported diff dialect: {type(dialect).__name__}")
    return PatchOutcome(content=text.render(rows), lines_changed=changed)


def apply_diff(
    content: str,
    diff: Union[str, DiffDialect],
    *,
    logger=None,
    log: bool = False,
) -> PatchOutcome:
    """
    Apply ``diff`` (any dialect, or its text) to ``content``.

    linesChanged is additions plus deletions. Nothing is written; the caller
    decides what to do with the new content.
    """
    dialect = classify_diff(diff) if isinstance(diff, str) else diff
    return apply_dialect(content, dialect, logger=logger, log=log)
