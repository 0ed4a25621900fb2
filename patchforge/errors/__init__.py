from .base import (
    ERROR_CODES,
    FILE_TOO_LARGE,
    INVALID_FILE_TYPE,
    INVALID_PATH,
    PERMISSION_DENIED,
    UNKNOWN_ERROR,
    VALIDATION_ERROR,
    ToolError,
)
from .patch import AmbiguousContextError, BinaryContentError, PatchFailedError, SegmentOrderError
from .path import AccessDeniedError, PathViolation
from .policy import FileTooLargeError, FileTypeError
from .request import InvalidRequestError

__all__ = [
    "ToolError",
    "PatchFailedError",
    "AmbiguousContextError",
    "SegmentOrderError",
    "BinaryContentError",
    "PathViolation",
    "AccessDeniedError",
    "FileTypeError",
    "FileTooLargeError",
    "InvalidRequestError",
    "ERROR_CODES",
    "VALIDATION_ERROR",
    "FILE_TOO_LARGE",
    "PERMISSION_DENIED",
    "INVALID_PATH",
    "INVALID_FILE_TYPE",
    "UNKNOWN_ERROR",
]
