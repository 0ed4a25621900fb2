# patchforge/errors/path.py
from .base import INVALID_PATH, PERMISSION_DENIED, ToolError


class PathViolation(ToolError):
    """Malformed path or a traversal attempt."""

    code = INVALID_PATH


class AccessDeniedError(ToolError):
    """Path is blocked by policy, by the OS, or the user denied the write."""

    code = PERMISSION_DENIED
