from .config import DEFAULT_BLOCKED_PATHS, DEFAULT_MAX_FILE_SIZE, WriteContext
from .errors import ToolError
from .history import AccessCheck, AccessHistory
from .models import PatchOutcome, PatchRequest, WriteOutcome, WriteResult
from .patch import apply_diff, classify_diff, find_context, parse_request, regex_replace, search_replace
from .write import APPROVED, DENIED, ApprovalRequest, WriteTool

__version__ = "0.1.0"

__all__ = [
    "WriteTool",
    "WriteContext",
    "AccessHistory",
    "AccessCheck",
    "ApprovalRequest",
    "APPROVED",
    "DENIED",
    "DEFAULT_BLOCKED_PATHS",
    "DEFAULT_MAX_FILE_SIZE",
    "ToolError",
    "PatchRequest",
    "PatchOutcome",
    "WriteOutcome",
    "WriteResult",
    "apply_diff",
    "classify_diff",
    "find_context",
    "parse_request",
    "search_replace",
    "regex_replace",
]
