# patchforge/models/outcome.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

MODES = ("create", "patch", "search-replace")


@dataclass(frozen=True)
class PatchOutcome:
    """In-memory result of the engine, before anything touches the disk."""

    content: str
    lines_changed: int
    replacements: Optional[int] = None


@dataclass(frozen=True)
class WriteOutcome:
    """What a successful write reports back. Never mutated after construction."""

    file_path: str
    lines_changed: int
    created: bool
    mode: str
    replacements: Optional[int] = None
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "filePath": self.file_path,
            "linesChanged": self.lines_changed,
            "created": self.created,
            "mode": self.mode,
        }
        if self.mode == "search-replace":
            out["replacements"] = self.replacements or 0
        return out


@dataclass(frozen=True)
class WriteResult:
    """Structured success/failure returned across the tool boundary."""

    success: bool
    outcome: Optional[WriteOutcome] = None
    error_code: Optional[str] = None
    message: str = ""
    suggestions: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, outcome: WriteOutcome) -> "WriteResult":
        return cls(success=True, outcome=outcome)

    @classmethod
    def fail(cls, code: str, message: str, suggestions=()) -> "WriteResult":
        return cls(success=False, error_code=code, message=message, suggestions=tuple(suggestions))

    def to_dict(self) -> Dict[str, Any]:
        if self.success and self.outcome is not None:
            return {"success": True, "output": self.outcome.to_dict()}
        out: Dict[str, Any] = {
            "success": False,
            "error": {"code": self.error_code, "message": self.message},
        }
        if self.suggestions:
            out["error"]["suggestions"] = list(self.suggestions)
        return out

    def describe(self, path: str = "") -> str:
        """One-line summary for terminal display."""
        if not self.success or self.outcome is None:
            return f"\n{self.message or 'Unknown error'}"
        where = f" {path}" if path else ""
        o = self.outcome
        if o.mode == "search-replace":
            return f"{where}\n• {o.replacements or 0} replacements, {o.lines_changed}L changed"
        if o.lines_changed:
            return f"{where}\n• {o.lines_changed}L changed"
        return f"{where} • saved"
