# patchforge/policy.py
"""
Path, extension and size policy for the write tool.

Blocked paths are gitignore-style patterns matched with pathspec against
the target relative to the working directory (or the absolute path, minus
its leading separator, when the target lies outside it). A bare name such
as ``.git`` therefore blocks ``.git/config`` and ``sub/.git/HEAD`` but not
``.github/workflows/ci.yml``.
"""
from __future__ import annotations

import os
import re
from typing import FrozenSet, Optional

import pathspec

from .config import WriteContext
from .errors.path import AccessDeniedError, PathViolation
from .errors.policy import FileTooLargeError, FileTypeError

__all__ = ["PathPolicy", "normalize_extension"]

_SEPARATORS_RE = re.compile(r"[\\/]")


def normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


class PathPolicy:
    """Compiled form of a WriteContext's path rules."""

    def __init__(self, context: WriteContext):
        self.context = context
        self._blocked = pathspec.PathSpec.from_lines("gitwildmatch", context.blocked_paths)
        self._allowed: Optional[FrozenSet[str]] = None
        if context.allowed_extensions:
            self._allowed = frozenset(normalize_extension(e) for e in context.allowed_extensions)

    # ---------- path ----------

    def resolve(self, path: str) -> str:
        """Return the absolute target for ``path``; malformed paths raise PathViolation."""
        if not path or not path.strip():
            raise PathViolation("Invalid file path: path is empty")
        if "\0" in path:
            raise PathViolation("Invalid file path: path contains a NUL byte")
        if ".." in _SEPARATORS_RE.split(path):
            raise PathViolation(
                f"Invalid file path: '{path}' contains a '..' component",
                suggestions=["Use a path inside the working directory without '..'"],
            )
        target = os.path.normpath(os.path.join(self.context.working_directory, path))
        root = os.path.abspath(os.sep)
        if target == root or os.path.dirname(target) == root:
            raise AccessDeniedError("Cannot write to root directory")
        return target

    def _match_key(self, target: str) -> str:
        wd = self.context.working_directory
        if os.path.commonpath([wd, target]) == wd:
            rel = os.path.relpath(target, wd)
        else:
            rel = target.lstrip(os.sep)
        return rel.replace(os.sep, "/")

    def is_blocked(self, target: str) -> bool:
        for sys_root in self.context.system_roots:
            if target == sys_root or target.startswith(sys_root.rstrip("/") + "/"):
                return True
        return self._blocked.match_file(self._match_key(target))

    def check_blocked(self, target: str) -> None:
        if self.is_blocked(target):
            raise AccessDeniedError(
                f"File path is restricted: {target}",
                suggestions=["Choose a path outside dependency, VCS and build directories"],
            )

    # ---------- type / size ----------

    def check_extension(self, target: str) -> None:
        if self._allowed is None:
            return
        ext = os.path.splitext(target)[1].lower()
        if ext not in self._allowed:
            raise FileTypeError(
                f"File extension not allowed: '{ext or '(none)'}'",
                suggestions=[f"Allowed extensions: {', '.join(sorted(self._allowed))}"],
            )

    def check_size(self, size: int) -> None:
        limit = self.context.max_file_size
        if size > limit:
            raise FileTooLargeError(
                f"Content size {size} bytes exceeds maximum allowed size of {limit} bytes"
            )

    def check(self, path: str) -> str:
        """Resolve ``path`` and run the blocked-path and extension checks."""
        target = self.resolve(path)
        self.check_blocked(target)
        self.check_extension(target)
        return target
