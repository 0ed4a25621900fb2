# patchforge/errors/policy.py
from .base import FILE_TOO_LARGE, INVALID_FILE_TYPE, ToolError


class FileTypeError(ToolError):
    code = INVALID_FILE_TYPE


class FileTooLargeError(ToolError):
    code = FILE_TOO_LARGE
