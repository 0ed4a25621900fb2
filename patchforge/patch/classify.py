# patchforge/patch/classify.py
"""
Content classifier.

Turns raw tool parameters into a PatchRequest (exactly one payload) and
diff text into one of the three dialects:

    Unified    ``@@ -S[,L] +S'[,L'] @@`` hunk headers
    Segmented  simple blocks separated by a bare ``...`` or ``@@`` line
    Simple     one flat block of context / ``-`` / ``+`` lines
"""
from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional, Tuple

import patch as patch_lib

from ..errors.request import InvalidRequestError
from ..models.diff import (
    ADD,
    CONTEXT,
    DELETE,
    DiffDialect,
    DiffLine,
    Hunk,
    Segment,
    SegmentedDiff,
    SimpleDiff,
    UnifiedDiff,
)
from ..models.request import (
    ENCODINGS,
    ContentPayload,
    DiffPayload,
    PatchRequest,
    SearchReplacePayload,
)
from .lines import NO_NEWLINE_MARKER, split_diff_lines

__all__ = ["parse_request", "classify_diff", "HUNK_HEADER_RE", "SEPARATORS"]

HUNK_HEADER_RE = re.compile(r"^@@\s+-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@")
SEPARATORS = ("...", "@@")

# Lines that may precede a diff body and carry no content.
_METADATA_PREFIXES = (
    "diff --git ",
    "index ",
    "new file mode",
    "deleted file mode",
    "old mode",
    "new mode",
    "similarity index",
    "rename from",
    "rename to",
    "Binary files",
)


# ---------- request ----------


def _optional_str(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidRequestError(f"Parameter '{key}' must be a string, got {type(value).__name__}")
    return value


def parse_request(params: Mapping[str, Any]) -> PatchRequest:
    """
    Validate raw tool parameters and build the tagged PatchRequest.

    Runs before any filesystem access; every failure is VALIDATION_ERROR.
    """
    if not isinstance(params, Mapping):
        raise InvalidRequestError("Parameters must be an object")

    path = params.get("path")
    if path is None:
        raise InvalidRequestError("Missing required parameter: path")
    if not isinstance(path, str):
        raise InvalidRequestError(f"Parameter 'path' must be a string, got {type(path).__name__}")

    content = _optional_str(params, "content")
    search = _optional_str(params, "search")
    replace = _optional_str(params, "replace")
    diff = _optional_str(params, "diff")
    regex = params.get("searchRegex", False)
    if not isinstance(regex, bool):
        raise InvalidRequestError("Parameter 'searchRegex' must be a boolean")

    given = [name for name, v in (("content", content), ("search", search), ("diff", diff)) if v is not None]
    if not given:
        raise InvalidRequestError("Must provide one of content, search/replace or diff")
    if len(given) > 1:
        raise InvalidRequestError(f"Cannot mix modes ({', '.join(given)}) - use only one of content, search/replace or diff")
    if replace is not None and search is None:
        raise InvalidRequestError("replace is only valid together with search")

    encoding = params.get("encoding") or "utf8"
    if encoding not in ENCODINGS:
        raise InvalidRequestError(f"Invalid encoding: {encoding}")

    if content is not None:
        return PatchRequest(path=path, payload=ContentPayload(content), encoding=encoding)

    if encoding != "utf8":
        raise InvalidRequestError(f"Encoding '{encoding}' is only supported with content")
    if search is not None:
        if replace is None:
            raise InvalidRequestError("Search-replace mode requires both search and replace")
        if not search.strip():
            raise InvalidRequestError("Empty search string")
        return PatchRequest(path=path, payload=SearchReplacePayload(search, replace, regex))
    return PatchRequest(path=path, payload=DiffPayload(diff))


# ---------- diff lines ----------


def _unified_line(ln: str) -> DiffLine:
    if ln == "":
        # Editors strip the lone space off blank context lines.
        return DiffLine(CONTEXT, "")
    tag = ln[0]
    if tag == "+":
        return DiffLine(ADD, ln[1:])
    if tag == "-":
        return DiffLine(DELETE, ln[1:])
    return DiffLine(CONTEXT, ln[1:])


def _body_line(ln: str) -> DiffLine:
    """Simple/segmented grammar: unprefixed lines are context too."""
    if ln.startswith("+"):
        return DiffLine(ADD, ln[1:])
    if ln.startswith("-"):
        return DiffLine(DELETE, ln[1:])
    if ln.startswith(" "):
        return DiffLine(CONTEXT, ln[1:])
    return DiffLine(CONTEXT, ln)


def _is_metadata(ln: str) -> bool:
    return ln.startswith(_METADATA_PREFIXES)


def _file_header_indices(lines: List[str]) -> List[int]:
    """Indices of '--- ' lines immediately followed by a '+++ ' line."""
    return [
        i
        for i in range(len(lines) - 1)
        if lines[i].startswith("--- ") and lines[i + 1].startswith("+++ ")
    ]


def _reject_multi_file(headers: List[int]) -> None:
    if len(headers) > 1:
        raise InvalidRequestError(
            f"Diff touches {len(headers)} files; only single-file diffs are supported"
        )


def _strip_leading_metadata(lines: List[str]) -> List[str]:
    """Drop git/file headers in front of a simple or segmented body."""
    headers = set()
    for i in _file_header_indices(lines):
        headers.update((i, i + 1))
    start = 0
    while start < len(lines) and (start in headers or _is_metadata(lines[start])):
        start += 1
    return lines[start:]


# ---------- unified ----------


def _hunks_from_patch_lib(diff: str) -> Optional[Tuple[Hunk, ...]]:
    """
    Parse a header-bearing unified diff with python-patch.
    Returns None when the library cannot make sense of it.
    """
    patch_set = patch_lib.fromstring(diff.encode("utf-8"))
    if not patch_set or not patch_set.items:
        return None
    if len(patch_set.items) > 1:
        raise InvalidRequestError(
            f"Diff touches {len(patch_set.items)} files; only single-file diffs are supported"
        )
    hunks: List[Hunk] = []
    for h in patch_set.items[0].hunks:
        body: List[DiffLine] = []
        for raw in h.text:
            ln = raw.decode("utf-8").rstrip("\r\n")
            if ln.startswith(NO_NEWLINE_MARKER):
                continue
            body.append(_unified_line(ln))
        hunks.append(Hunk(h.startsrc, h.linessrc, h.starttgt, h.linestgt, tuple(body)))
    return tuple(hunks) if hunks else None


def _hunks_from_headers(lines: List[str]) -> Tuple[Hunk, ...]:
    """Built-in parser: collect prefixed lines under each @@ header."""
    headers = _file_header_indices(lines)
    _reject_multi_file(headers)
    skip = {i for h in headers for i in (h, h + 1)}

    hunks: List[Hunk] = []
    cur: Optional[dict] = None
    for idx, ln in enumerate(lines):
        if idx in skip:
            continue
        m = HUNK_HEADER_RE.match(ln)
        if m:
            if cur:
                hunks.append(Hunk(**cur))
            cur = {
                "old_start": int(m.group(1)),
                "old_len": int(m.group(2) or "1"),
                "new_start": int(m.group(3)),
                "new_len": int(m.group(4) or "1"),
                "lines": (),
            }
            continue
        if cur is None or ln.startswith(NO_NEWLINE_MARKER):
            continue
        if ln == "" or ln[0] in " +-":
            cur["lines"] += (_unified_line(ln),)
    if cur:
        hunks.append(Hunk(**cur))
    return tuple(hunks)


def _parse_unified(diff: str, lines: List[str]) -> UnifiedDiff:
    if _file_header_indices(lines):
        hunks = _hunks_from_patch_lib(diff)
        if hunks is not None:
            return UnifiedDiff(hunks)
    return UnifiedDiff(_hunks_from_headers(lines))


# ---------- simple / segmented ----------


def _body(lines: List[str]) -> Tuple[DiffLine, ...]:
    return tuple(_body_line(ln) for ln in lines if not ln.startswith(NO_NEWLINE_MARKER))


def _parse_segmented(lines: List[str], separator: str) -> SegmentedDiff:
    segments: List[Segment] = []
    cur: List[str] = []
    for ln in lines:
        if ln.rstrip() == separator:
            if cur:
                segments.append(Segment(_body(cur)))
                cur = []
            continue
        cur.append(ln)
    if cur:
        segments.append(Segment(_body(cur)))
    return SegmentedDiff(tuple(segments), separator)


# ---------- classification ----------


def _changes(dialect: DiffDialect) -> int:
    if isinstance(dialect, UnifiedDiff):
        return sum(h.additions + h.deletions for h in dialect.hunks)
    if isinstance(dialect, SegmentedDiff):
        return sum(s.additions + s.deletions for s in dialect.segments)
    if isinstance(dialect, SimpleDiff):
        return len(dialect.change_lines)
    raise TypeError(f"unsupported diff dialect: {type(dialect).__name__}")


def _require_context(dialect: DiffDialect) -> None:
    if isinstance(dialect, SimpleDiff):
        if not dialect.context_lines:
            raise InvalidRequestError(
                "Simple diff requires at least one context line to locate the change",
                suggestions=["Include an unchanged line before or after the change"],
            )
    elif isinstance(dialect, SegmentedDiff):
        for n, seg in enumerate(dialect.segments, 1):
            if not seg.has_pure_context:
                raise InvalidRequestError(
                    f"Segment {n} has no context lines; every segment requires at least one context line",
                )


def classify_diff(diff: str) -> DiffDialect:
    """
    Decide the dialect of ``diff`` and parse it.

    Raises InvalidRequestError for empty diffs, diffs without changes, mixed
    use of '@@' and structurally unusable simple/segmented blocks.
    """
    if not diff or not diff.strip():
        raise InvalidRequestError("Empty diff provided")

    lines = split_diff_lines(diff)
    has_hunk_headers = any(HUNK_HEADER_RE.match(ln) for ln in lines)
    separators = sorted({ln.rstrip() for ln in lines if ln.rstrip() in SEPARATORS})

    if has_hunk_headers:
        if "@@" in separators:
            raise InvalidRequestError(
                "Ambiguous use of '@@': diff mixes unified hunk headers with bare '@@' separators"
            )
        dialect: DiffDialect = _parse_unified(diff, lines)
    elif separators:
        if len(separators) > 1:
            raise InvalidRequestError("Ambiguous segmented diff: mixes '...' and '@@' separators")
        dialect = _parse_segmented(_strip_leading_metadata(lines), separators[0])
    else:
        dialect = SimpleDiff(_body(_strip_leading_metadata(lines)))

    if _changes(dialect) == 0:
        raise InvalidRequestError("Invalid diff: no additions or deletions found")
    _require_context(dialect)
    return dialect
