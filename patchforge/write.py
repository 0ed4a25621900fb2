# patchforge/write.py
"""
Write coordinator.

Validates a write request against the configured policy and the session's
access history, runs the patch engine in memory and commits the result
atomically. ``WriteTool.execute`` is the tool-calling boundary: it never
raises and always returns a WriteResult.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .commit.core import atomic_write, encode_content, read_text
from .config import WriteContext
from .errors.base import INVALID_PATH, PERMISSION_DENIED, UNKNOWN_ERROR, ToolError
from .errors.path import AccessDeniedError, PathViolation
from .errors.request import InvalidRequestError
from .history import AccessCheck, AccessHistory
from .models.outcome import PatchOutcome, WriteOutcome, WriteResult
from .models.request import (
    ENCODINGS,
    ContentPayload,
    DiffPayload,
    PatchRequest,
    SearchReplacePayload,
)
from .patch.apply import apply_dialect
from .patch.classify import classify_diff, parse_request
from .patch.search import regex_replace, search_replace
from .policy import PathPolicy

log = logging.getLogger(__name__)

__all__ = ["WriteTool", "ApprovalRequest", "APPROVED", "DENIED", "PARAMETERS_SCHEMA"]

APPROVED = "approved"
DENIED = "denied"
PREVIEW_CHARS = 2000

DESCRIPTION = (
    "Write or modify a file. Provide exactly one of: 'content' to create or overwrite "
    "the file; 'search' and 'replace' to replace text (set 'searchRegex' for a regular "
    "expression); or 'diff' to patch it. Diffs may be unified (@@ hunk headers), a "
    "simple block of context/-/+ lines, or several such blocks separated by '...' lines. "
    "Read the file before using search/replace or diff."
)

PARAMETERS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "path": {
            "type": "string",
            "description": "File path, absolute or relative to the working directory",
        },
        "content": {
            "type": "string",
            "description": "Complete file content; creates the file or replaces it",
        },
        "search": {
            "type": "string",
            "description": "Text to find; every exact occurrence is replaced",
        },
        "replace": {
            "type": "string",
            "description": "Replacement text, required with search",
        },
        "searchRegex": {
            "type": "boolean",
            "default": False,
            "description": "Treat search as a Python regular expression",
        },
        "diff": {
            "type": "string",
            "description": "Change to apply; context lines locate it, '-' removes, '+' adds",
        },
        "encoding": {
            "type": "string",
            "enum": list(ENCODINGS),
            "default": "utf8",
            "description": "Encoding of content; binary and base64 apply to content only",
        },
    },
    "required": ["path"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class ApprovalRequest:
    """What the user is asked to approve before a file is touched."""

    path: str
    mode: str
    preview: str
    exists: bool


Approval = Callable[[ApprovalRequest], Union[bool, str]]


def _preview(text: str) -> str:
    if len(text) <= PREVIEW_CHARS:
        return text
    return text[:PREVIEW_CHARS] + f"\n... ({len(text) - PREVIEW_CHARS} more characters)"


def _payload_size(request: PatchRequest) -> int:
    payload = request.payload
    if isinstance(payload, ContentPayload):
        return len(encode_content(payload.content, request.encoding))
    if isinstance(payload, SearchReplacePayload):
        return len(payload.search.encode("utf-8")) + len(payload.replace.encode("utf-8"))
    return len(payload.diff.encode("utf-8"))


class WriteTool:
    """
    The ``write`` tool.

    ``history`` is the session's AccessHistory; a fresh one is created when
    omitted, which means diff and search-replace requests are refused until
    reads are recorded on it. ``approval`` is an optional callback asked
    before anything is written.
    """

    name = "write"
    description = DESCRIPTION

    def __init__(
        self,
        context: Optional[WriteContext] = None,
        history: Optional[AccessHistory] = None,
        *,
        approval: Optional[Approval] = None,
        logger: Optional[logging.Logger] = None,
        log: bool = False,
    ):
        self.context = context or WriteContext()
        self.history = history if history is not None else AccessHistory()
        self.policy = PathPolicy(self.context)
        self.approval = approval
        self._engine_logger = logger
        self._engine_log = log

    @property
    def schema(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "parameters": PARAMETERS_SCHEMA}

    # ---------- boundary ----------

    def execute(self, params: Mapping[str, Any]) -> WriteResult:
        """Run one tool call; failures come back as WriteResult, never as exceptions."""
        try:
            request = parse_request(params)
            outcome = self.write(request)
        except ToolError as e:
            result = WriteResult.fail(e.code, e.message, e.suggestions)
        except PermissionError as e:
            result = WriteResult.fail(PERMISSION_DENIED, f"Write failed: {e}")
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError) as e:
            result = WriteResult.fail(INVALID_PATH, f"Write failed: {e}")
        except Exception as e:
            log.exception("unexpected error in write tool")
            result = WriteResult.fail(UNKNOWN_ERROR, f"Write failed: {e}")
        else:
            self.history.record_write(outcome.file_path, True)
            return WriteResult.ok(outcome)

        self._record_failure(params)
        log.info(f"write failed [{result.error_code}]: {result.message}")
        return result

    def _record_failure(self, params: Any) -> None:
        path = params.get("path") if isinstance(params, Mapping) else None
        if not isinstance(path, str) or not path.strip():
            return
        try:
            path = self.policy.resolve(path)
        except ToolError:
            pass
        self.history.record_write(path, False)

    # ---------- core ----------

    def write(self, request: PatchRequest) -> WriteOutcome:
        """
        Validate, patch and commit ``request``. Raises ToolError (or OSError)
        on failure; the target is untouched unless this returns.
        """
        target = self.policy.check(request.path)
        self.policy.check_size(_payload_size(request))
        payload = request.payload
        dialect = classify_diff(payload.diff) if isinstance(payload, DiffPayload) else None

        exists = os.path.exists(target)
        if exists and not os.path.isfile(target):
            raise PathViolation(f"Not a regular file: {target}")

        replacements: Optional[int] = None
        if isinstance(payload, ContentPayload):
            check = self.history.validate(target, requires_read=False)
            data = encode_content(payload.content, request.encoding)
            mode = "patch" if exists else "create"
            lines_changed = len(payload.content.split("\n"))
            preview = payload.content
        else:
            if not exists:
                raise InvalidRequestError(
                    f"File does not exist: {target}",
                    suggestions=["Use content mode to create a new file"],
                )
            check = self._require_read(target)
            result = self._patch(read_text(target), payload, dialect)
            data = result.content.encode("utf-8")
            self.policy.check_size(len(data))
            lines_changed = result.lines_changed
            if isinstance(payload, SearchReplacePayload):
                mode = "search-replace"
                replacements = result.replacements
                preview = f"- {payload.search}\n+ {payload.replace}"
            else:
                mode = "patch"
                preview = payload.diff

        self._approve(ApprovalRequest(path=target, mode=mode, preview=_preview(preview), exists=exists))
        created = atomic_write(target, data)
        log.info(f"{mode} {target}: {lines_changed} line(s) changed")
        return WriteOutcome(
            file_path=target,
            lines_changed=lines_changed,
            created=created,
            mode=mode,
            replacements=replacements,
            warnings=tuple(check.warnings),
        )

    def _require_read(self, target: str) -> AccessCheck:
        check = self.history.validate(target, requires_read=True)
        if not check.is_valid:
            raise InvalidRequestError(check.message, suggestions=check.suggestions)
        return check

    def _patch(self, current: str, payload, dialect) -> PatchOutcome:
        opts = {"logger": self._engine_logger, "log": self._engine_log}
        if isinstance(payload, DiffPayload):
            return apply_dialect(current, dialect, **opts)
        if payload.regex:
            return regex_replace(current, payload.search, payload.replace, **opts)
        return search_replace(current, payload.search, payload.replace, **opts)

    def _approve(self, request: ApprovalRequest) -> None:
        if self.approval is None:
            return
        decision = self.approval(request)
        if decision is True or decision == APPROVED:
            return
        raise AccessDeniedError(f"Write denied by user approval: {request.path}")
