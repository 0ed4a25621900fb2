# patchforge/history.py
"""
Per-session record of which files were read and written.

The write tool consults it before diff and search-replace operations so a
change is never generated against a file the model has not seen. Callers
own the instance (typically one per CLI session); nothing here is global.
"""
from __future__ import annotations

import hashlib
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

log = logging.getLogger(__name__)

READ_VALIDITY_WINDOW = 5 * 60
FAILURE_WINDOW = 10 * 60
FAILURE_THRESHOLD = 2
MAX_HISTORY = 100
CLEANUP_AGE = 24 * 60 * 60


def _normalize(path: str) -> str:
    return os.path.abspath(path).replace("\\", "/")


@dataclass
class FileAccess:
    path: str
    last_read: Optional[float] = None
    last_write: Optional[float] = None
    read_count: int = 0
    write_count: int = 0
    content_hash: Optional[str] = None
    # Sequence numbers order events that share a clock tick.
    read_seq: int = 0
    write_seq: int = 0

    @property
    def last_activity(self) -> float:
        return max(self.last_read or 0.0, self.last_write or 0.0)


@dataclass(frozen=True)
class ToolCall:
    name: str
    timestamp: float
    success: bool
    path: Optional[str] = None


@dataclass(frozen=True)
class AccessCheck:
    is_valid: bool
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return "; ".join(self.warnings)


class AccessHistory:
    """
    Tracks reads, writes and tool calls per normalized absolute path.

    ``clock`` returns seconds; tests inject a fake one.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        read_validity: float = READ_VALIDITY_WINDOW,
        max_history: int = MAX_HISTORY,
    ):
        self._clock = clock
        self.read_validity = read_validity
        self.max_history = max_history
        self._files: Dict[str, FileAccess] = {}
        self._calls: List[ToolCall] = []
        self._seq = 0

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def _entry(self, path: str) -> FileAccess:
        key = _normalize(path)
        info = self._files.get(key)
        if info is None:
            info = self._files[key] = FileAccess(path=key)
        return info

    # ---------- recording ----------

    def record_read(self, path: str, content: Optional[str] = None) -> None:
        info = self._entry(path)
        info.last_read = self._clock()
        info.read_seq = self._next_seq()
        info.read_count += 1
        if content is not None:
            info.content_hash = hashlib.sha256(content.encode("utf-8")).hexdigest()
        self.record_tool_call("read", True, path)

    def record_write(self, path: str, success: bool = True) -> None:
        if success:
            info = self._entry(path)
            info.last_write = self._clock()
            info.write_seq = self._next_seq()
            info.write_count += 1
            info.content_hash = None
        self.record_tool_call("write", success, path)

    def record_tool_call(self, name: str, success: bool, path: Optional[str] = None) -> None:
        self._calls.append(
            ToolCall(name=name, timestamp=self._clock(), success=success, path=_normalize(path) if path else None)
        )
        if len(self._calls) > self.max_history:
            del self._calls[: len(self._calls) - self.max_history]

    # ---------- queries ----------

    def file_info(self, path: str) -> Optional[FileAccess]:
        return self._files.get(_normalize(path))

    def recent_history(self, limit: int = 10) -> List[ToolCall]:
        return self._calls[-limit:] if limit > 0 else []

    def recent_failures(self, path: str) -> int:
        key = _normalize(path)
        cutoff = self._clock() - FAILURE_WINDOW
        return sum(
            1
            for c in self._calls
            if c.path == key and not c.success and "write" in c.name.lower() and c.timestamp > cutoff
        )

    def validate(self, path: str, requires_read: bool) -> AccessCheck:
        """
        Check whether a write to ``path`` is safe.

        Only a missing read for an operation that requires one is fatal;
        everything else is reported as a warning.
        """
        info = self.file_info(path)
        warnings: List[str] = []
        suggestions: List[str] = []

        if requires_read:
            if info is None or info.last_read is None:
                return AccessCheck(
                    is_valid=False,
                    warnings=[
                        "DIFF OPERATION WITHOUT READ: the file must be read before it is patched",
                        "A patch generated without reading the file is likely to mismatch its content",
                    ],
                    suggestions=[
                        "Use the read tool first to get the current file content",
                        "Then generate the diff against that content",
                        "Alternatively use content mode to overwrite the file",
                    ],
                )
            age = self._clock() - info.last_read
            if age > self.read_validity:
                warnings.append(f"STALE READ: file was last read {round(age / 60)} minutes ago")
                suggestions.append("Read the file again to make sure the change matches its current state")
            if info.last_write is not None and info.write_seq > info.read_seq:
                warnings.append("FILE MODIFIED: file was written after it was last read")
                suggestions.append("Read the file again and regenerate the change against the new content")

        failures = self.recent_failures(path)
        if failures > FAILURE_THRESHOLD:
            warnings.append(f"REPEATED FAILURES: {failures} recent write failures for this file")
            suggestions.append("Try a different approach, or content mode if patching keeps failing")

        for w in warnings:
            log.warning(f"{_normalize(path)}: {w}")
        return AccessCheck(is_valid=True, warnings=warnings, suggestions=suggestions)

    # ---------- maintenance ----------

    def cleanup(self, max_age: float = CLEANUP_AGE) -> None:
        """Forget files and tool calls with no activity in the last ``max_age`` seconds."""
        cutoff = self._clock() - max_age
        for key in [k for k, info in self._files.items() if info.last_activity < cutoff]:
            del self._files[key]
        self._calls = [c for c in self._calls if c.timestamp > cutoff]

    def reset(self) -> None:
        self._files.clear()
        self._calls = []
