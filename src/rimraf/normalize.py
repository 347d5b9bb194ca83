"""Pattern normalization: duplicate separators and relative segments."""

from __future__ import annotations

import re
from typing import Final

SEP: Final[str] = "/"

# "//" past the leading pair, or a "." / ".." segment anywhere.
_ANOMALY: Final[re.Pattern[str]] = re.compile(r"(?<=.)//|(?:^|/)\.{1,2}(?:/|$)")


def normalize_pattern(pattern: str) -> str:
    """Collapse duplicate separators and resolve ``.``/``..`` segments.

    A leading ``//`` is kept for network-share style roots. A ``..``
    segment removes the segment before it; when there is none, the output
    built so far is cleared. No filesystem access happens here.

    Args:
        pattern: Raw ``/``-separated glob pattern.

    Returns:
        str: The normalized pattern. The input object itself is returned
        when nothing needs rewriting.
    """
    if not pattern or not _ANOMALY.search(pattern):
        return pattern

    # Relative patterns are processed as if they had a leading separator so
    # that a leading "." or ".." segment is recognized like any other.
    virtual = not pattern.startswith(SEP)
    text = SEP + pattern if virtual else pattern

    out = ""
    start = 0
    if text.startswith(SEP * 2) and not virtual:
        out = SEP
        start = 1

    i = start
    length = len(text)
    while i < length:
        char = text[i]
        if char == SEP:
            if i + 1 < length and text[i + 1] == SEP:
                i += 1
                continue
            end = text.find(SEP, i + 1)
            if end < 0:
                end = length
            segment = text[i + 1 : end]
            if segment == ".":
                i = end
                continue
            if segment == "..":
                out = _unwind(out)
                i = end
                continue
        out += char
        i += 1

    if virtual and out.startswith(SEP):
        out = out[1:]
    return out


def _unwind(text: str) -> str:
    """Drop the last segment of *text*, or everything if it has no separator."""
    index = text.rfind(SEP)
    return text[:index] if index >= 0 else ""
