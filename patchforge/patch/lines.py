# patchforge/patch/lines.py
"""
Line tokenizer.

File text is split on "\\n" only, so a CR before the LF stays attached to its
line and ``join_lines(split_lines(text)) == text`` holds for every input.

Patching works on WorkingText: terminator-free lines plus the terminator
each line had. Lines carried over from the file keep their own terminator;
inserted lines get the file's dominant one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Union

NO_NEWLINE_MARKER = "\\"
LF = "\n"
CRLF = "\r\n"

# An int is the index of a line carried over from the file, a str is inserted text.
Row = Union[int, str]


def split_lines(text: str) -> List[str]:
    """Split file content; a trailing newline shows up as a final empty line."""
    return text.split("\n")


def join_lines(lines: List[str]) -> str:
    return "\n".join(lines)


def split_diff_lines(diff: str) -> List[str]:
    """
    Split diff text into lines with CRLF terminators normalized away.
    Trailing line breaks are dropped so they do not become an empty context line.
    """
    out: List[str] = []
    for ln in diff.rstrip("\r\n").split("\n"):
        out.append(ln[:-1] if ln.endswith("\r") else ln)
    return out


def dominant_newline(endings: Sequence[str]) -> str:
    """CRLF when most terminated lines end in it, else LF."""
    terminated = [e for e in endings if e]
    crlf = sum(1 for e in terminated if e == CRLF)
    return CRLF if terminated and crlf * 2 > len(terminated) else LF


@dataclass
class WorkingText:
    lines: List[str]
    endings: List[str]
    newline: str

    def render(self, rows: Sequence[Row]) -> str:
        """
        Join ``rows`` back into file text.

        The last row is never terminated. The file's final line, which had no
        terminator, gets the dominant one if something now follows it.
        """
        out: List[str] = []
        last = len(rows) - 1
        for k, row in enumerate(rows):
            if isinstance(row, int):
                out.append(self.lines[row])
                ending = self.endings[row] or self.newline
            else:
                out.append(row)
                ending = self.newline
            if k < last:
                out.append(ending)
        return "".join(out)


def to_working_lines(text: str) -> WorkingText:
    raw = split_lines(text)
    lines: List[str] = []
    endings: List[str] = []
    for i, ln in enumerate(raw):
        if i == len(raw) - 1:
            # Not followed by LF: a trailing CR here is content.
            lines.append(ln)
            endings.append("")
        elif ln.endswith("\r"):
            lines.append(ln[:-1])
            endings.append(CRLF)
        else:
            lines.append(ln)
            endings.append(LF)
    return WorkingText(lines, endings, dominant_newline(endings))


def count_changed_lines(before: List[str], after: List[str]) -> int:
    """Positional line difference count plus the change in length."""
    changed = sum(1 for a, b in zip(before, after) if a != b)
    return changed + abs(len(after) - len(before))
