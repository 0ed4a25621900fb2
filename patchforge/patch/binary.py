# patchforge/patch/binary.py
from __future__ import annotations

import unicodedata

SAMPLE_SIZE = 1000
NON_PRINTABLE_RATIO = 0.1

_TEXT_CONTROLS = frozenset("\t\n\r")
_REPLACEMENT_CHAR = "\ufffd"


def _non_printable(ch: str) -> bool:
    if ch in _TEXT_CONTROLS:
        return False
    if ch == _REPLACEMENT_CHAR:
        return True
    # Cc, Cf, Cs, Co, Cn
    return unicodedata.category(ch)[0] == "C"


def is_binary_content(text: str) -> bool:
    """
    Heuristic: any NUL, or more than 10% non-printable characters in the
    first 1000 characters. Letters of every script count as printable.
    """
    if "\0" in text:
        return True
    sample = text[:SAMPLE_SIZE]
    if not sample:
        return False
    bad = sum(1 for ch in sample if _non_printable(ch))
    return bad > len(sample) * NON_PRINTABLE_RATIO
