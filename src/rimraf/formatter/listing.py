"""Plain path listing for ``--list`` mode."""

from __future__ import annotations

from rimraf.matcher import MatchResult


def format_listing(result: MatchResult, skip_root: bool = False) -> str:
    """Render matched paths one per line in deletion order.

    The root follows the entries unless *skip_root* is set. Nothing is
    rendered when nothing matched.

    Args:
        result: Matcher output.
        skip_root: Whether the root would be left in place.

    Returns:
        str: Newline-separated paths (no trailing newline).
    """
    if not result.entries:
        return ""
    lines = [str(path) for path in result.paths]
    if not skip_root:
        lines.append(str(result.root))
    return "\n".join(lines)
