# patchforge/models/request.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ENCODINGS = ("utf8", "binary", "base64")


@dataclass(frozen=True)
class ContentPayload:
    """Full replacement (or creation) content."""

    content: str


@dataclass(frozen=True)
class SearchReplacePayload:
    search: str
    replace: str
    regex: bool = False


@dataclass(frozen=True)
class DiffPayload:
    diff: str


Payload = Union[ContentPayload, SearchReplacePayload, DiffPayload]


@dataclass(frozen=True)
class PatchRequest:
    """One write-tool invocation. Exactly one payload variant by construction."""

    path: str
    payload: Payload
    encoding: str = "utf8"

    @property
    def mode_name(self) -> str:
        if isinstance(self.payload, ContentPayload):
            return "content"
        if isinstance(self.payload, SearchReplacePayload):
            return "search-replace"
        if isinstance(self.payload, DiffPayload):
            return "diff"
        raise TypeError(f"unsupported payload: {type(self.payload).__name__}")
