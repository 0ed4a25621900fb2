# patchforge/patch/search.py
"""
Search/replace engine.

Exact mode replaces every literal occurrence. When there is none, a
line-window fuzzy search (whitespace-trimmed, positional character ratio)
replaces the single best block scoring at least FUZZY_THRESHOLD.
Regex mode uses Python ``re`` syntax, including ``\\1`` / ``\\g<name>``
in the replacement.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .._logging import resolve_logger
from ..errors.patch import BinaryContentError, PatchFailedError
from ..errors.request import InvalidRequestError
from ..models.outcome import PatchOutcome
from .binary import is_binary_content
from .lines import Row, count_changed_lines, split_lines, to_working_lines

__all__ = ["search_replace", "regex_replace", "block_similarity", "FUZZY_THRESHOLD"]

FUZZY_THRESHOLD = 0.7
PREVIEW_CHARS = 80


def _preview(text: str) -> str:
    text = text.strip()
    return text if len(text) <= PREVIEW_CHARS else text[:PREVIEW_CHARS] + "..."


def block_similarity(search_lines: List[str], window: List[str]) -> float:
    """
    Line-by-line similarity of two equally long blocks.

    Each pair is trimmed; matching characters are counted positionally and
    divided by the summed lengths of the longer line of every pair.
    """
    total = 0
    same = 0
    for a, b in zip(search_lines, window):
        a, b = a.strip(), b.strip()
        total += max(len(a), len(b))
        same += sum(1 for x, y in zip(a, b) if x == y)
    if total == 0:
        return 1.0
    return same / total


def _best_window(lines: List[str], search_lines: List[str]) -> Tuple[Optional[int], float]:
    m = len(search_lines)
    best_at: Optional[int] = None
    best = 0.0
    for i in range(len(lines) - m + 1):
        score = block_similarity(search_lines, lines[i:i + m])
        # Strictly greater: the earliest of equal scores wins.
        if score > best:
            best_at, best = i, score
    return best_at, best


def _fuzzy_replace(content: str, search: str, replace: str, log) -> Optional[str]:
    text = to_working_lines(content)
    search_lines = [ln.rstrip("\r") for ln in search.split("\n")]
    at, score = _best_window(text.lines, search_lines)
    if at is None or score < FUZZY_THRESHOLD:
        log.debug(f"fuzzy search: best score {score:.3f} below {FUZZY_THRESHOLD}")
        return None
    log.warning(
        f"search text not found verbatim; replacing lines {at + 1}-{at + len(search_lines)} "
        f"(similarity {score:.2f})"
    )
    replacement = [ln.rstrip("\r") for ln in replace.split("\n")]
    rows: List[Row] = list(range(len(text.lines)))
    rows[at:at + len(search_lines)] = replacement
    return text.render(rows)


def search_replace(content: str, search: str, replace: str, *, logger=None, log: bool = False) -> PatchOutcome:
    """
    Replace every occurrence of ``search`` with ``replace``.

    Falls back to one fuzzy block replacement when the literal text is absent.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    if not search.strip():
        raise InvalidRequestError("Empty search string")
    if is_binary_content(content):
        raise BinaryContentError("Cannot search-replace binary content")

    count = content.count(search)
    if count:
        new_content = content.replace(search, replace)
        log.debug(f"exact search: {count} occurrence(s)")
    else:
        fuzzy = _fuzzy_replace(content, search, replace, log)
        if fuzzy is None:
            raise PatchFailedError(
                f"Search string not found: {_preview(search)}",
                suggestions=["Copy the search text exactly from a fresh read of the file"],
            )
        new_content, count = fuzzy, 1

    changed = count_changed_lines(split_lines(content), split_lines(new_content))
    return PatchOutcome(content=new_content, lines_changed=changed, replacements=count)


def regex_replace(content: str, pattern: str, replace: str, *, logger=None, log: bool = False) -> PatchOutcome:
    """Replace every match of ``pattern``; ``replace`` may use group references."""
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    try:
        rx = re.compile(pattern)
    except re.error as e:
        raise InvalidRequestError(f"Invalid regex pattern: {pattern} ({e})")
    if is_binary_content(content):
        raise BinaryContentError("Cannot search-replace binary content")

    try:
        new_content, count = rx.subn(replace, content)
    except (re.error, IndexError) as e:
        raise InvalidRequestError(f"Invalid regex pattern: bad replacement template ({e})")
    if count == 0:
        raise PatchFailedError(f"Regex pattern not found: {_preview(pattern)}")
    log.debug(f"regex search: {count} match(es)")

    changed = count_changed_lines(split_lines(content), split_lines(new_content))
    return PatchOutcome(content=new_content, lines_changed=changed, replacements=count)
