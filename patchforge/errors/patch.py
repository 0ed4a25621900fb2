# patchforge/errors/patch.py
from __future__ import annotations

from typing import Sequence

from .base import VALIDATION_ERROR, ToolError


class PatchFailedError(ToolError):
    """A diff or search/replace could not be applied to the file."""

    code = VALIDATION_ERROR


class AmbiguousContextError(PatchFailedError):
    """Context matched more than one place; the 1-based line numbers are kept."""

    def __init__(self, message: str, line_numbers: Sequence[int]):
        super().__init__(
            message,
            suggestions=["Add more surrounding context lines so the location is unique"],
        )
        self.line_numbers = list(line_numbers)


class SegmentOrderError(PatchFailedError):
    """Segments resolved out of order or on top of each other."""


class BinaryContentError(PatchFailedError):
    """Target file looks binary; text patching is refused."""
