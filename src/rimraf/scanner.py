"""Full directory enumeration using os.scandir with explicit stack (DFS)."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entry:
    """A single filesystem entry discovered during scanning.

    Attributes:
        path: Absolute path of the filesystem entry.
        is_dir: Whether the entry is a directory. Symlinks never are.
        depth: Parent directory depth from scanning root.
    """

    path: Path
    is_dir: bool
    depth: int

    @property
    def name(self) -> str:
        return self.path.name


def scan(root: Path) -> list[Entry]:
    """Enumerate every file and directory below *root*.

    Hidden entries are included and symlinks are never followed. There is
    no pruning: callers evaluate patterns after the walk.

    Args:
        root: Resolved root directory.

    Returns:
        list[Entry]: Flat list of entries in deterministic DFS order.
    """
    if not root.is_dir():
        return []

    result: list[Entry] = []

    # Stack items: (directory_path, depth)
    stack: list[tuple[Path, int]] = [(root, 0)]

    while stack:
        current_dir, depth = stack.pop()

        try:
            with os.scandir(current_dir) as it:
                raw_entries = list(it)
        except PermissionError:
            logger.debug("Permission denied: %s", current_dir)
            continue
        except FileNotFoundError:
            logger.debug("Vanished during scan: %s", current_dir)
            continue

        raw_entries.sort(key=lambda e: e.name)

        child_dirs: list[tuple[Path, int]] = []

        for dir_entry in raw_entries:
            try:
                is_dir = dir_entry.is_dir(follow_symlinks=False)
            except OSError:
                logger.debug("Cannot stat: %s", dir_entry.path)
                continue

            path = Path(dir_entry.path)
            result.append(Entry(path=path, is_dir=is_dir, depth=depth))

            if is_dir:
                child_dirs.append((path, depth + 1))

        # Push children in reverse so first-alphabetical is popped first
        for child in reversed(child_dirs):
            stack.append(child)

    return result


def deletion_order(entries: Iterable[Entry]) -> list[Entry]:
    """Sort entries so that every descendant precedes its ancestors.

    Deeper entries come first. Path length and then path text break ties,
    which keeps the order stable across runs.
    """
    return sorted(entries, key=lambda e: (-e.depth, -len(str(e.path)), str(e.path)))
