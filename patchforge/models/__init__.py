from .diff import (
    ADD,
    CONTEXT,
    DELETE,
    AmbiguousMatch,
    DiffDialect,
    DiffLine,
    Hunk,
    MatchLocation,
    MatchResult,
    NoMatch,
    Segment,
    SegmentedDiff,
    SimpleDiff,
    UnifiedDiff,
    UniqueMatch,
)
from .outcome import PatchOutcome, WriteOutcome, WriteResult
from .request import ENCODINGS, ContentPayload, DiffPayload, PatchRequest, SearchReplacePayload

__all__ = [
    "ADD",
    "CONTEXT",
    "DELETE",
    "DiffLine",
    "Hunk",
    "Segment",
    "UnifiedDiff",
    "SegmentedDiff",
    "SimpleDiff",
    "DiffDialect",
    "MatchLocation",
    "MatchResult",
    "NoMatch",
    "UniqueMatch",
    "AmbiguousMatch",
    "PatchOutcome",
    "WriteOutcome",
    "WriteResult",
    "ENCODINGS",
    "ContentPayload",
    "SearchReplacePayload",
    "DiffPayload",
    "PatchRequest",
]
