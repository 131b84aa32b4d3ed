from __future__ import annotations
import re
from typing import List

# \r\n first so it is never split into two terminators
_EOL_RE = re.compile(r"\r\n|\r|\n")


def key_from_text(text: str | None) -> str:
    """The NormalizedKey of a line: text with surrounding whitespace trimmed."""
    return (text or "").strip()


def split_lines(text: str) -> List[str]:
    """
    Split file content into physical lines.
      * \\r\\n, \\n and \\r all end a line
      * a trailing terminator does not produce an extra empty line
      * empty content has no lines
    """
    if not text:
        return []
    lines = _EOL_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines
