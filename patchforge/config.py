# patchforge/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Tuple

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

DEFAULT_BLOCKED_PATHS: Tuple[str, ...] = (
    "node_modules",
    ".git",
    ".svn",
    ".hg",
    ".env",
    ".env.*",
    "*.log",
    "dist",
    "build",
    "coverage",
)

DEFAULT_SYSTEM_ROOTS: Tuple[str, ...] = ("/etc", "/usr", "/bin", "/sbin")

# host key -> field name
_KEY_ALIASES = {
    "workingDirectory": "working_directory",
    "maxFileSize": "max_file_size",
    "allowedExtensions": "allowed_extensions",
    "blockedPaths": "blocked_paths",
    "systemRoots": "system_roots",
}


def _as_tuple(value: Any, key: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    try:
        items = tuple(value)
    except TypeError:
        raise ValueError(f"{key} must be a list of strings") from None
    if not all(isinstance(v, str) for v in items):
        raise ValueError(f"{key} must be a list of strings")
    return items


@dataclass(frozen=True)
class WriteContext:
    """
    Policy for one write tool instance.

    ``allowed_extensions`` of None means every extension is allowed.
    ``blocked_paths`` are gitignore-style patterns.
    """

    working_directory: str = field(default_factory=os.getcwd)
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    allowed_extensions: Optional[Tuple[str, ...]] = None
    blocked_paths: Tuple[str, ...] = DEFAULT_BLOCKED_PATHS
    system_roots: Tuple[str, ...] = DEFAULT_SYSTEM_ROOTS

    def __post_init__(self):
        if not isinstance(self.max_file_size, int) or self.max_file_size <= 0:
            raise ValueError(f"max_file_size must be a positive integer, got {self.max_file_size!r}")
        object.__setattr__(self, "working_directory", os.path.abspath(self.working_directory))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> "WriteContext":
        """
        Build a context from host settings, camelCase or snake_case keys.
        Missing keys keep their defaults; unknown keys are ignored.
        """
        kwargs = {}
        for key, value in (data or {}).items():
            name = _KEY_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__ or value is None:
                continue
            if name in ("allowed_extensions", "blocked_paths", "system_roots"):
                value = _as_tuple(value, key)
            kwargs[name] = value
        return cls(**kwargs)

    def with_overrides(self, **changes: Any) -> "WriteContext":
        for name in ("allowed_extensions", "blocked_paths", "system_roots"):
            if changes.get(name) is not None:
                changes[name] = _as_tuple(changes[name], name)
        return replace(self, **changes)
