from .apply import apply_dialect, apply_diff
from .binary import is_binary_content
from .classify import classify_diff, parse_request
from .match import MATCH_TIERS, context_matches, find_context
from .search import block_similarity, regex_replace, search_replace

__all__ = [
    "apply_diff",
    "apply_dialect",
    "classify_diff",
    "parse_request",
    "find_context",
    "context_matches",
    "MATCH_TIERS",
    "search_replace",
    "regex_replace",
    "block_similarity",
    "is_binary_content",
]
