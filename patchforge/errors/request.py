# patchforge/errors/request.py
from .base import VALIDATION_ERROR, ToolError


class InvalidRequestError(ToolError):
    """Bad request shape: missing/duplicate payload, bad encoding, empty diff."""

    code = VALIDATION_ERROR
