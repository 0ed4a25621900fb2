# patchforge/errors/base.py
from __future__ import annotations

from typing import Iterable, Optional

VALIDATION_ERROR = "VALIDATION_ERROR"
FILE_TOO_LARGE = "FILE_TOO_LARGE"
PERMISSION_DENIED = "PERMISSION_DENIED"
INVALID_PATH = "INVALID_PATH"
INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

ERROR_CODES = frozenset(
    {
        VALIDATION_ERROR,
        FILE_TOO_LARGE,
        PERMISSION_DENIED,
        INVALID_PATH,
        INVALID_FILE_TYPE,
        UNKNOWN_ERROR,
    }
)


class ToolError(Exception):
    """
    Root of every error the write tool reports.

    Carries one of the ERROR_CODES plus optional suggestions that the agent
    loop can relay to the model alongside the message.
    """

    code = UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        suggestions: Optional[Iterable[str]] = None,
    ):
        super().__init__(message)
        if code is not None:
            if code not in ERROR_CODES:
                raise ValueError(f"unknown error code: {code!r}")
            self.code = code
        self.message = message
        self.suggestions = list(suggestions or [])
