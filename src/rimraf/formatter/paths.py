"""Path shortening for width-limited progress messages."""

from __future__ import annotations

import os
from pathlib import Path


def shrink_path(path: str | Path, limit: int, spacer: str = "..") -> str:
    """Shorten *path* to roughly *limit* characters.

    Keeps the anchor, a spacer and the final name, then puts back parent
    directory names nearest-first while they fit. Paths within the limit
    are returned unchanged.

    Example::

        >>> shrink_path("/srv/data/projects/alpha/build/out.bin", 28)
        '/../alpha/build/out.bin'

    Args:
        path: Absolute path to shorten.
        limit: Target maximum length.
        spacer: Marker standing in for the dropped directories.

    Returns:
        str: Shortened path, or ``""`` for a blank input.
    """
    text = str(path)
    if not text.strip():
        return ""
    if len(text) <= limit:
        return text

    target = Path(text)
    parts = [target.anchor.rstrip("\\/"), spacer, target.name]
    result = os.sep.join(parts)

    for parent in target.parents:
        if len(result) >= limit or not parent.name:
            break
        if len(result) + len(parent.name) + len(os.sep) > limit:
            break
        parts.insert(2, parent.name)
        result = os.sep.join(parts)

    return result
